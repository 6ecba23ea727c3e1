"""
Xcode SDK discovery for darwin targets.

The iOS toolchain is not bundled with mobilekit. Its compiler and SDK root
are found through `xcrun`, which ships with the Xcode command-line tools and
only exists on macOS hosts.

Two locators implement the SDKLocator interface:

- XcrunSDKLocator asks xcrun.
- PlaceholderSDKLocator returns deterministic stand-ins and never runs
  anything, so a dry run can print the environments it would use on a host
  without Xcode.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Union

from mobilekit.core.config import BuildOptions
from mobilekit.core.exceptions import ToolchainDiscoveryError, UnknownArchitectureError
from mobilekit.toolchain.catalog import Architecture

logger = logging.getLogger(__name__)

IPHONEOS_SDK = "iphoneos"
IPHONESIMULATOR_SDK = "iphonesimulator"

_CLANG_ARCH = {
    Architecture.ARM: "armv7",
    Architecture.ARM64: "arm64",
    Architecture.X86: "i386",
    Architecture.AMD64: "x86_64",
}


class SDKInfo(NamedTuple):
    """Compiler and sysroot flags for one SDK."""

    compiler: str
    cflags: str


class SDKLocator(ABC):
    """
    Abstract interface for finding the compiler of an Apple SDK.
    """

    @abstractmethod
    def locate(self, sdk_name: str) -> SDKInfo:
        """
        Find the clang binary and sysroot flags for an SDK.

        Args:
            sdk_name: SDK name ('iphoneos', 'iphonesimulator')

        Returns:
            SDKInfo with the compiler path and the flags selecting the SDK root

        Raises:
            ToolchainDiscoveryError: If the SDK cannot be located
        """
        pass


class XcrunSDKLocator(SDKLocator):
    """Locate SDKs with `xcrun`."""

    def __init__(self, xcrun: str = "xcrun"):
        self.xcrun = xcrun

    def locate(self, sdk_name: str) -> SDKInfo:
        clang = self._run(["--sdk", sdk_name, "--find", "clang"])
        sdk_path = self._run(["--sdk", sdk_name, "--show-sdk-path"])
        logger.debug(f"SDK {sdk_name}: clang={clang} sysroot={sdk_path}")
        return SDKInfo(compiler=clang, cflags=f"-isysroot {sdk_path}")

    def _run(self, args: List[str]) -> str:
        """Run xcrun and return its trimmed combined output."""
        cmd = [self.xcrun] + args
        command = " ".join(cmd)
        logger.debug(f"Running {command}")
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except (FileNotFoundError, OSError) as e:
            raise ToolchainDiscoveryError(command, str(e)) from e

        if result.returncode != 0:
            raise ToolchainDiscoveryError(command, result.stdout, result.returncode)
        return result.stdout.strip()


class PlaceholderSDKLocator(SDKLocator):
    """Return fixed stand-in values; used for dry runs."""

    def locate(self, sdk_name: str) -> SDKInfo:
        return SDKInfo(compiler=f"clang-{sdk_name}", cflags=f"-isysroot={sdk_name}")


def make_sdk_locator(options: BuildOptions) -> SDKLocator:
    """Select the locator implementation for a build."""
    if options.dry_run:
        return PlaceholderSDKLocator()
    return XcrunSDKLocator()


def arch_flag(arch: Union[Architecture, str]) -> str:
    """
    Map a build-tool architecture to clang's -arch value.

    Raises:
        UnknownArchitectureError: For anything outside the fixed architecture
            set. Catalog-driven callers never pass such a value.

    Example:
        >>> arch_flag("arm")
        'armv7'
    """
    try:
        return _CLANG_ARCH[Architecture(arch)]
    except (ValueError, KeyError):
        raise UnknownArchitectureError(str(arch)) from None


__all__ = [
    "IPHONEOS_SDK",
    "IPHONESIMULATOR_SDK",
    "SDKInfo",
    "SDKLocator",
    "XcrunSDKLocator",
    "PlaceholderSDKLocator",
    "make_sdk_locator",
    "arch_flag",
]
