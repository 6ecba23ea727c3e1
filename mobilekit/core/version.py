"""
Build-tool version detection.

The hosting build tool is the Go command. Its version gates which toolchain
catalog entries are usable, and its raw `go version` output is the descriptor
an installed toolchain must match byte-for-byte.
"""

import logging
import re
import subprocess
from dataclasses import dataclass

from mobilekit.core.exceptions import BuildToolError

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"\bgo(\d+)\.(\d+)(?:\.\d+)?")

# Seconds to wait for `go version`
VERSION_TIMEOUT = 5

# A development build sorts after every release.
_DEVEL_MINOR = 1 << 30


@dataclass(frozen=True, order=True)
class BuildToolVersion:
    """
    Ordered build-tool release version.

    Attributes:
        major: Major release number (1 for go1.x)
        minor: Minor release number

    Example:
        >>> BuildToolVersion.parse("go1.5") <= BuildToolVersion.parse("go1.6.2")
        True
    """

    major: int
    minor: int

    @classmethod
    def parse(cls, text: str) -> "BuildToolVersion":
        """
        Parse a version token or a full `go version` line.

        Args:
            text: String such as 'go1.6', 'go1.6.3' or
                'go version go1.6.3 darwin/amd64'

        Returns:
            Parsed version

        Raises:
            BuildToolError: If no version can be found in text
        """
        if "devel" in text.split():
            return DEVEL
        match = _VERSION_RE.search(text)
        if not match:
            raise BuildToolError(f"Cannot parse build tool version from {text!r}")
        return cls(int(match.group(1)), int(match.group(2)))

    @property
    def is_devel(self) -> bool:
        return self.minor == _DEVEL_MINOR

    def __str__(self) -> str:
        if self.is_devel:
            return "devel"
        return f"go{self.major}.{self.minor}"


GO1_5 = BuildToolVersion(1, 5)
GO1_6 = BuildToolVersion(1, 6)
DEVEL = BuildToolVersion(1, _DEVEL_MINOR)


@dataclass(frozen=True)
class BuildToolInfo:
    """
    The running build tool.

    Attributes:
        version: Parsed, comparable version
        descriptor: Raw `go version` output; compared byte-for-byte against
            the installation record
    """

    version: BuildToolVersion
    descriptor: bytes

    @classmethod
    def from_descriptor(cls, descriptor: bytes) -> "BuildToolInfo":
        return cls(
            version=BuildToolVersion.parse(descriptor.decode("utf-8", "replace")),
            descriptor=descriptor,
        )


def detect_build_tool(go_command: str = "go") -> BuildToolInfo:
    """
    Run `go version` and describe the running build tool.

    Args:
        go_command: Go executable name or path

    Returns:
        BuildToolInfo for the detected tool

    Raises:
        BuildToolError: If the command cannot be run, times out, fails, or prints
            something that is not a version
    """
    try:
        result = subprocess.run(
            [go_command, "version"],
            capture_output=True,
            timeout=VERSION_TIMEOUT,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise BuildToolError(
            f"`{go_command} version` timed out after {VERSION_TIMEOUT}s"
        ) from e
    except (FileNotFoundError, OSError) as e:
        raise BuildToolError(f"Cannot run `{go_command} version`: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", "replace").strip()
        raise BuildToolError(
            f"`{go_command} version` exited with status {result.returncode}: {stderr}"
        )

    info = BuildToolInfo.from_descriptor(result.stdout)
    logger.debug(f"Detected build tool {info.version} via {go_command}")
    return info


__all__ = [
    "BuildToolVersion",
    "BuildToolInfo",
    "detect_build_tool",
    "GO1_5",
    "GO1_6",
    "DEVEL",
    "VERSION_TIMEOUT",
]
