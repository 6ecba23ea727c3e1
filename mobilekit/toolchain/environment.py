"""
Cross-compiler environment construction.

EnvironmentBuilder produces, for every target the current host can build
for, the list of KEY=VALUE overrides that point the build tool at the right
C/C++ toolchain. The result is a read-only BuildEnvironment that is passed
explicitly to whatever runs the builds.

Android targets use the NDK bundled under the install root. Darwin (iOS)
targets use Xcode's toolchain and are only configured on macOS hosts.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, TextIO, Tuple

from mobilekit.core.exceptions import UnsupportedArchitectureError
from mobilekit.core.platform import HostPlatform, detect_host
from mobilekit.toolchain.catalog import Architecture, ToolchainCatalog
from mobilekit.toolchain.sdk_locator import (
    IPHONEOS_SDK,
    IPHONESIMULATOR_SDK,
    SDKInfo,
    SDKLocator,
    arch_flag,
)

logger = logging.getLogger(__name__)

IOS_SIMULATOR_MIN_VERSION = "6.1"

# SDK variant -> architectures built against it
DARWIN_VARIANTS: Tuple[Tuple[str, Tuple[Architecture, ...]], ...] = (
    (IPHONEOS_SDK, (Architecture.ARM, Architecture.ARM64)),
    (IPHONESIMULATOR_SDK, (Architecture.X86, Architecture.AMD64)),
)


@dataclass(frozen=True)
class TargetEnvironment:
    """
    Environment overrides for one (OS, architecture) target.

    Attributes:
        goos: Target operating system ('android', 'darwin')
        goarch: Target architecture ('arm', 'arm64', '386', 'amd64')
        overrides: KEY=VALUE strings, in construction order
    """

    goos: str
    goarch: str
    overrides: Tuple[str, ...]

    @property
    def name(self) -> str:
        return f"{self.goos}/{self.goarch}"

    def __iter__(self) -> Iterator[str]:
        return iter(self.overrides)

    def __len__(self) -> int:
        return len(self.overrides)

    def __str__(self) -> str:
        return f"{self.name}: {' '.join(self.overrides)}"


@dataclass(frozen=True)
class BuildEnvironment:
    """
    Every target environment available on this host.

    Attributes:
        android: Android environments keyed by architecture
        darwin: Darwin environments keyed by architecture (empty off macOS)
        nm: Symbol-table tool for each target, keyed by 'goos/goarch'
    """

    android: Mapping[str, TargetEnvironment] = field(
        default_factory=lambda: MappingProxyType({})
    )
    darwin: Mapping[str, TargetEnvironment] = field(
        default_factory=lambda: MappingProxyType({})
    )
    nm: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def targets(self) -> Iterator[TargetEnvironment]:
        yield from self.android.values()
        yield from self.darwin.values()

    def target(self, goos: str, goarch: str) -> TargetEnvironment:
        """
        Environment for a target.

        Raises:
            UnsupportedArchitectureError: If the target was not configured
        """
        table = {"android": self.android, "darwin": self.darwin}.get(goos, {})
        env = table.get(goarch)
        if env is None:
            raise UnsupportedArchitectureError(f"{goos}/{goarch}")
        return env


class EnvironmentBuilder:
    """
    Build the per-target override environments.

    Args:
        catalog: Version-gated NDK toolchain catalog
        locator: SDK locator for darwin targets
        host: Build host, detected if None
        trace_out: If set, every environment is printed to this stream
    """

    def __init__(
        self,
        catalog: ToolchainCatalog,
        locator: SDKLocator,
        host: Optional[HostPlatform] = None,
        trace_out: Optional[TextIO] = None,
    ):
        self.catalog = catalog
        self.locator = locator
        self.host = host if host is not None else detect_host()
        self.trace_out = trace_out

    def build(self) -> BuildEnvironment:
        """
        Construct every target environment this host supports.

        Raises:
            ToolchainDiscoveryError: If an Xcode SDK cannot be located
        """
        android: Dict[str, TargetEnvironment] = {}
        darwin: Dict[str, TargetEnvironment] = {}
        nm: Dict[str, str] = {}

        for env, nm_tool in self._android_environments():
            android[env.goarch] = env
            nm[env.name] = nm_tool

        if self.host.is_macos:
            for env in self._darwin_environments():
                darwin[env.goarch] = env
                nm[env.name] = "nm"
        else:
            logger.debug(f"Skipping darwin targets on {self.host} host")

        result = BuildEnvironment(
            android=MappingProxyType(android),
            darwin=MappingProxyType(darwin),
            nm=MappingProxyType(nm),
        )
        for env in result.targets():
            self._trace(str(env))
        logger.info(
            f"Configured {len(android)} android and {len(darwin)} darwin target(s)"
        )
        return result

    def _android_environments(self) -> Iterator[Tuple[TargetEnvironment, str]]:
        ndk_root = self.catalog.root()
        for entry in self.catalog.available():
            arch = entry.arch.value
            overrides = [
                "GOOS=android",
                f"GOARCH={arch}",
                f"CC={entry.path(ndk_root, 'gcc', self.host)}",
                f"CXX={entry.path(ndk_root, 'g++', self.host)}",
                "CGO_ENABLED=1",
            ]
            if entry.arch is Architecture.ARM:
                overrides.append("GOARM=7")
            nm_tool = str(entry.path(ndk_root, "nm", self.host))
            yield TargetEnvironment("android", arch, tuple(overrides)), nm_tool

    def _darwin_environments(self) -> Iterator[TargetEnvironment]:
        for sdk_name, archs in DARWIN_VARIANTS:
            sdk = self.locator.locate(sdk_name)
            simulator = sdk_name == IPHONESIMULATOR_SDK
            for arch in archs:
                yield self._darwin_environment(sdk, arch, simulator)

    def _darwin_environment(
        self, sdk: SDKInfo, arch: Architecture, simulator: bool
    ) -> TargetEnvironment:
        flags = sdk.cflags
        if simulator:
            flags += f" -mios-simulator-version-min={IOS_SIMULATOR_MIN_VERSION}"
        flags += f" -arch {arch_flag(arch)}"

        overrides: List[str] = ["GOOS=darwin", f"GOARCH={arch.value}"]
        if arch is Architecture.ARM:
            overrides.append("GOARM=7")
        overrides += [
            f"CC={sdk.compiler}",
            f"CXX={sdk.compiler}",
            f"CGO_CFLAGS={flags}",
            f"CGO_LDFLAGS={flags}",
            "CGO_ENABLED=1",
        ]
        return TargetEnvironment("darwin", arch.value, tuple(overrides))

    def _trace(self, line: str) -> None:
        if self.trace_out is not None:
            print(line, file=self.trace_out)


__all__ = [
    "IOS_SIMULATOR_MIN_VERSION",
    "DARWIN_VARIANTS",
    "TargetEnvironment",
    "BuildEnvironment",
    "EnvironmentBuilder",
]
