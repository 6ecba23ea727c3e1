"""
Centralized exception hierarchy for mobilekit.

Everything derived from MobileKitError describes a condition the user can act
on (install the toolchain, fix a config file, install Xcode) and is reported
by the CLI as a plain error message.

InternalConsistencyError and its subclasses signal a bug in the caller. They
derive from AssertionError, sit outside the MobileKitError tree and are
never converted into an exit code.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class MobileKitError(Exception):
    """Base exception for all mobilekit errors."""

    pass


class InternalConsistencyError(AssertionError):
    """Base exception for violated internal invariants."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(MobileKitError):
    """Configuration parsing or validation error."""

    pass


class BuildToolError(MobileKitError):
    """Raised when the hosting build tool cannot be queried for its version."""

    pass


# ============================================================================
# Toolchain Installation Exceptions
# ============================================================================


class ToolchainInstallError(MobileKitError):
    """Base exception for problems with the installed toolchain."""

    pass


class ToolchainNotInstalledError(ToolchainInstallError):
    """Raised when no toolchain install root can be found."""

    def __init__(self, detail: str = ""):
        self.detail = detail
        msg = "toolchain not installed, run `mobilekit init`"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ToolchainPartiallyInstalledError(ToolchainInstallError):
    """Raised when the installation record cannot be read."""

    def __init__(self, detail: str = ""):
        self.detail = detail
        msg = "toolchain partially installed, run `mobilekit init`"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ToolchainOutOfDateError(ToolchainInstallError):
    """Raised when the installation record does not match the running tool."""

    def __init__(self, installed: bytes = b"", expected: bytes = b""):
        self.installed = installed
        self.expected = expected
        super().__init__("toolchain out of date, run `mobilekit init`")


# ============================================================================
# Target Exceptions
# ============================================================================


class UnsupportedArchitectureError(MobileKitError):
    """Raised when an architecture is not in the catalog or is version-gated out."""

    def __init__(self, arch: str):
        self.arch = arch
        super().__init__(f"unsupported architecture: {arch}")


class ToolchainDiscoveryError(MobileKitError):
    """Raised when the external SDK locator cannot be run or exits with an error."""

    def __init__(self, command: str, output: str, returncode: Optional[int] = None):
        self.command = command
        self.output = output
        self.returncode = returncode
        if returncode is None:
            msg = f"{command}: could not be run: {output}"
        else:
            msg = f"{command}: exit status {returncode}\n{output}"
        super().__init__(msg)


# ============================================================================
# Internal Consistency Exceptions
# ============================================================================


class MalformedOverrideError(InternalConsistencyError):
    """Raised when an override entry is not of the form KEY=VALUE."""

    def __init__(self, entry: str):
        self.entry = entry
        super().__init__(f"malformed env var {entry!r} from input")


class UnknownArchitectureError(InternalConsistencyError):
    """Raised when an architecture outside the fixed set reaches a flag mapping."""

    def __init__(self, arch: str):
        self.arch = arch
        super().__init__(f"unknown GOARCH: {arch!r}")


__all__ = [
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
