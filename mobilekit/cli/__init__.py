"""
mobilekit command-line interface.
"""

from mobilekit.cli.parser import CLI, main

__all__ = ["CLI", "main"]
