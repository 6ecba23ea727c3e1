"""
Pytest configuration and shared fixtures for mobilekit tests.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Generator

from mobilekit.core.platform import HostPlatform

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.installs import (
    build_tool,
    fake_executable,
    fake_install,
)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def linux_host() -> HostPlatform:
    return HostPlatform("linux")


@pytest.fixture
def macos_host() -> HostPlatform:
    return HostPlatform("macos")


@pytest.fixture
def windows_host() -> HostPlatform:
    return HostPlatform("windows")


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset any module-level caches between tests."""
    from mobilekit.core import platform

    platform.detect_host.cache_clear()

    yield

    platform.detect_host.cache_clear()
