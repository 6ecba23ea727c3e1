"""Test fixtures for mobilekit tests.

- installs: Fake install layouts and a matching build tool

Import fixtures in your tests using:
    from tests.fixtures.installs import fake_install
"""

__all__ = [
    "installs",
]
