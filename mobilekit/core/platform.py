"""
Host platform detection for mobilekit.

Only the properties of the build host that influence environment
construction are detected here:

- the normalized operating system name ('windows', 'linux', 'macos')
- whether executables carry a '.exe' suffix
- whether environment variable names are case-insensitive

Usage:
    from mobilekit.core.platform import detect_host

    host = detect_host()
    if host.is_macos:
        print("iOS targets can be configured on this host")
"""

import functools
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class HostPlatform:
    """
    Build host information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos')
    """

    os: str

    @property
    def is_macos(self) -> bool:
        """True when the host can run the Xcode command-line tools."""
        return self.os == "macos"

    @property
    def exe_suffix(self) -> str:
        """
        Suffix appended to executable names on this host.

        Example:
            >>> HostPlatform("windows").exe_suffix
            '.exe'
            >>> HostPlatform("linux").exe_suffix
            ''
        """
        return ".exe" if self.os == "windows" else ""

    @property
    def case_insensitive_env(self) -> bool:
        """True when environment variable names ignore case."""
        return self.os == "windows"

    def __str__(self) -> str:
        return self.os


@functools.lru_cache(maxsize=1)
def detect_host() -> HostPlatform:
    """
    Detect the current build host.

    This function is cached - it only runs detection once per process.

    Returns:
        HostPlatform for the running interpreter
    """
    return HostPlatform(os=_detect_os())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos'

    Raises:
        RuntimeError: If OS is not supported
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    else:
        raise RuntimeError(f"Unsupported operating system: {system}")


def clear_host_cache():
    """
    Clear the host detection cache.

    Forces the next call to detect_host() to re-detect. Used by tests that
    patch platform.system().
    """
    detect_host.cache_clear()


__all__ = [
    "HostPlatform",
    "detect_host",
    "clear_host_cache",
]
