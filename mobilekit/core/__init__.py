"""
Core functionality for mobilekit.

This package contains the foundational modules that other components depend on.
"""

from .config import BuildOptions, load_config, DEFAULT_CONFIG_NAME

from .platform import HostPlatform, detect_host, clear_host_cache

from .version import BuildToolVersion, BuildToolInfo, detect_build_tool

from .exceptions import (
    MobileKitError,
    InternalConsistencyError,
    ConfigError,
    BuildToolError,
    ToolchainInstallError,
    ToolchainNotInstalledError,
    ToolchainPartiallyInstalledError,
    ToolchainOutOfDateError,
    UnsupportedArchitectureError,
    ToolchainDiscoveryError,
    MalformedOverrideError,
    UnknownArchitectureError,
)

__all__ = [
    "BuildOptions",
    "load_config",
    "DEFAULT_CONFIG_NAME",
    "HostPlatform",
    "detect_host",
    "clear_host_cache",
    "BuildToolVersion",
    "BuildToolInfo",
    "detect_build_tool",
    "MobileKitError",
    "InternalConsistencyError",
    "ConfigError",
    "BuildToolError",
    "ToolchainInstallError",
    "ToolchainNotInstalledError",
    "ToolchainPartiallyInstalledError",
    "ToolchainOutOfDateError",
    "UnsupportedArchitectureError",
    "ToolchainDiscoveryError",
    "MalformedOverrideError",
    "UnknownArchitectureError",
]
