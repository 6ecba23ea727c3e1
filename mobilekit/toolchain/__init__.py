"""
Toolchain discovery for mobilekit.

This package describes the bundled Android NDK toolchains, locates the Xcode
SDKs used for iOS, and builds the per-target compiler environments.
"""

from mobilekit.toolchain.catalog import (
    NDK_VERSION,
    NDK_TOOLCHAINS,
    Architecture,
    ToolchainEntry,
    ToolchainCatalog,
)
from mobilekit.toolchain.sdk_locator import (
    SDKInfo,
    SDKLocator,
    XcrunSDKLocator,
    PlaceholderSDKLocator,
    make_sdk_locator,
    arch_flag,
)
from mobilekit.toolchain.environment import (
    TargetEnvironment,
    BuildEnvironment,
    EnvironmentBuilder,
)

__all__ = [
    "NDK_VERSION",
    "NDK_TOOLCHAINS",
    "Architecture",
    "ToolchainEntry",
    "ToolchainCatalog",
    "SDKInfo",
    "SDKLocator",
    "XcrunSDKLocator",
    "PlaceholderSDKLocator",
    "make_sdk_locator",
    "arch_flag",
    "TargetEnvironment",
    "BuildEnvironment",
    "EnvironmentBuilder",
]
