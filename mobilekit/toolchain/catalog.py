"""
Android NDK toolchain catalog.

The set of Android architectures is fixed when mobilekit is released. Each
architecture maps to the layout of its prebuilt toolchain inside the NDK
bundled under the install root, and to the first build-tool release able to
target it. Entries newer than the running build tool are treated as absent.

Example:
    >>> catalog = ToolchainCatalog(Path("/go/pkg/mobilekit"), GO1_6)
    >>> catalog.tool_path("arm", "gcc")
    PosixPath('/go/pkg/mobilekit/android-ndk-r10e/arm/bin/arm-linux-androideabi-gcc')
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Union

from mobilekit.core.exceptions import UnsupportedArchitectureError
from mobilekit.core.platform import HostPlatform, detect_host
from mobilekit.core.version import GO1_5, GO1_6, BuildToolVersion

logger = logging.getLogger(__name__)

NDK_VERSION = "ndk-r10e"


class Architecture(str, Enum):
    """Target CPU architectures, named the way the build tool names them."""

    ARM = "arm"
    ARM64 = "arm64"
    X86 = "386"
    AMD64 = "amd64"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ToolchainEntry:
    """
    Prebuilt NDK toolchain for one architecture.

    Attributes:
        arch: Architecture served by this toolchain
        arch_dir: Directory of the toolchain under the NDK root
        abi: Android ABI name (e.g., 'armeabi-v7a')
        platform: Android platform / API level (e.g., 'android-15')
        gcc: NDK compiler package name
        tool_prefix: Prefix of every binary in the toolchain's bin directory
        min_version: First build-tool release supporting this architecture
    """

    arch: Architecture
    arch_dir: str
    abi: str
    platform: str
    gcc: str
    tool_prefix: str
    min_version: BuildToolVersion

    def path(
        self, ndk_root: Path, tool_name: str, host: Optional[HostPlatform] = None
    ) -> Path:
        """
        Absolute path to a binary of this toolchain.

        Args:
            ndk_root: NDK root (see ToolchainCatalog.root)
            tool_name: Unprefixed tool name ('gcc', 'g++', 'nm', ...)
            host: Build host, detected if None

        Returns:
            ndk_root/arch_dir/bin/<tool_prefix>-<tool_name>[.exe]
        """
        if host is None:
            host = detect_host()
        binary = f"{self.tool_prefix}-{tool_name}{host.exe_suffix}"
        return ndk_root / self.arch_dir / "bin" / binary


NDK_TOOLCHAINS: Mapping[Architecture, ToolchainEntry] = MappingProxyType(
    {
        Architecture.ARM: ToolchainEntry(
            arch=Architecture.ARM,
            arch_dir="arm",
            abi="armeabi-v7a",
            platform="android-15",
            gcc="arm-linux-androideabi-4.8",
            tool_prefix="arm-linux-androideabi",
            min_version=GO1_5,
        ),
        Architecture.ARM64: ToolchainEntry(
            arch=Architecture.ARM64,
            arch_dir="arm64",
            abi="arm64-v8a",
            platform="android-21",
            gcc="aarch64-linux-android-4.9",
            tool_prefix="aarch64-linux-android",
            min_version=GO1_6,
        ),
        Architecture.X86: ToolchainEntry(
            arch=Architecture.X86,
            arch_dir="x86",
            abi="x86",
            platform="android-15",
            gcc="x86-4.8",
            tool_prefix="i686-linux-android",
            min_version=GO1_6,
        ),
        Architecture.AMD64: ToolchainEntry(
            arch=Architecture.AMD64,
            arch_dir="x86_64",
            abi="x86_64",
            platform="android-21",
            gcc="x86_64-4.9",
            tool_prefix="x86_64-linux-android",
            min_version=GO1_6,
        ),
    }
)


class ToolchainCatalog:
    """
    Version-gated view of the NDK toolchain table.

    Args:
        install_root: mobilekit install root (e.g., $GOPATH/pkg/mobilekit)
        build_version: Version of the running build tool
        entries: Toolchain table, NDK_TOOLCHAINS by default
        host: Build host, detected if None
    """

    def __init__(
        self,
        install_root: Path,
        build_version: BuildToolVersion,
        entries: Mapping[Architecture, ToolchainEntry] = NDK_TOOLCHAINS,
        host: Optional[HostPlatform] = None,
    ):
        self.install_root = Path(install_root)
        self.build_version = build_version
        self.host = host if host is not None else detect_host()
        self._entries = entries

    def root(self) -> Path:
        """NDK root directory under the install root."""
        return self.install_root / f"android-{NDK_VERSION}"

    def toolchain(self, arch: Union[Architecture, str]) -> ToolchainEntry:
        """
        Look up the toolchain for an architecture.

        Raises:
            UnsupportedArchitectureError: If the architecture is not in the
                table or needs a newer build tool
        """
        try:
            key = Architecture(arch)
        except ValueError:
            raise UnsupportedArchitectureError(str(arch)) from None

        entry = self._entries.get(key)
        if entry is None or entry.min_version > self.build_version:
            raise UnsupportedArchitectureError(str(key))
        return entry

    def available(self) -> Iterator[ToolchainEntry]:
        """Usable entries, in table order."""
        for entry in self._entries.values():
            if entry.min_version <= self.build_version:
                yield entry
            else:
                logger.debug(
                    f"Skipping android/{entry.arch}: needs {entry.min_version}, "
                    f"running {self.build_version}"
                )

    def architectures(self) -> List[Architecture]:
        return [entry.arch for entry in self.available()]

    def tool_path(self, arch: Union[Architecture, str], tool_name: str) -> Path:
        """Absolute path to a tool of the toolchain for arch."""
        return self.toolchain(arch).path(self.root(), tool_name, self.host)


__all__ = [
    "NDK_VERSION",
    "NDK_TOOLCHAINS",
    "Architecture",
    "ToolchainEntry",
    "ToolchainCatalog",
]
