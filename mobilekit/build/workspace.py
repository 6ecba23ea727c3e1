"""
Build workspace initialization.

Before any target is built, the installed toolchain is located and checked
against the running build tool, a scratch directory is allocated, and the
target environments are constructed:

    1. derive the install root from the running executable
       (<prefix>/bin/mobilekit -> <prefix>/pkg/mobilekit)
    2. fail if it does not exist
    3. compare <install root>/version with the build tool's version output
       (skipped for dry runs)
    4. allocate the workspace ($WORK for dry runs)
    5. build the target environments

Nothing is allocated when one of the first three stages fails.

Example:
    >>> initializer = BuildWorkspaceInitializer(BuildOptions(), detect_build_tool())
    >>> with initializer.initialize() as workspace:
    ...     env = workspace.environment.target("android", "arm")
"""

import logging
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional

from mobilekit.core.config import BuildOptions
from mobilekit.core.exceptions import (
    ToolchainNotInstalledError,
    ToolchainOutOfDateError,
    ToolchainPartiallyInstalledError,
)
from mobilekit.core.platform import HostPlatform, detect_host
from mobilekit.core.version import BuildToolInfo
from mobilekit.toolchain.catalog import ToolchainCatalog
from mobilekit.toolchain.environment import BuildEnvironment, EnvironmentBuilder
from mobilekit.toolchain.sdk_locator import SDKLocator, make_sdk_locator

logger = logging.getLogger(__name__)

VERSION_FILE = "version"
WORK_PLACEHOLDER = "$WORK"
WORK_PREFIX = "mobilekit-work-"
LAUNCHER_NAME = "mobilekit"

# Console-script directories; virtualenvs on Windows use Scripts
_BIN_DIRS = ("bin", "scripts")


def resolve_install_root(executable: Path) -> Path:
    """
    Install root for an executable living in a bin (or Scripts) directory.

    Args:
        executable: Path of the running mobilekit executable

    Returns:
        Sibling 'pkg' directory entry named after the executable

    Raises:
        ToolchainNotInstalledError: If the executable is not in a bin or
            Scripts directory

    Example:
        >>> resolve_install_root(Path("/home/me/go/bin/mobilekit"))
        PosixPath('/home/me/go/pkg/mobilekit')
    """
    executable = Path(executable)
    if executable.parent.name.lower() not in _BIN_DIRS:
        raise ToolchainNotInstalledError(
            f"cannot derive install root from {executable}"
        )
    name = executable.name
    if name.lower().endswith(".exe"):
        name = name[: -len(".exe")]
    return executable.parent.parent / "pkg" / name


def _current_executable() -> Path:
    """
    Path of the running mobilekit launcher.

    Under `python -m mobilekit` argv[0] is the package's __main__.py, so the
    installed console script is looked up on PATH instead.
    """
    argv0 = Path(sys.argv[0])
    if argv0.name != "__main__.py":
        return argv0.resolve()

    launcher = shutil.which(LAUNCHER_NAME)
    if launcher is None:
        raise ToolchainNotInstalledError(
            f"running from {argv0} and no {LAUNCHER_NAME} launcher on PATH"
        )
    logger.debug(f"Using launcher {launcher} found on PATH")
    return Path(launcher).resolve()


class BuildWorkspace:
    """
    An initialized build: install root, scratch directory and environments.

    cleanup() must be called on every exit path of the build; using the
    workspace as a context manager does that.
    """

    def __init__(
        self,
        install_root: Path,
        work_dir: str,
        environment: BuildEnvironment,
        options: BuildOptions,
        temporary: bool = True,
    ):
        self.install_root = install_root
        self.work_dir = work_dir
        self.environment = environment
        self.options = options
        self._temporary = temporary

    def cleanup(self) -> None:
        """Remove the scratch directory, or keep it and print where it is."""
        if not self._temporary:
            return
        if self.options.keep_work:
            print(f"WORK={self.work_dir}")
            return
        self.remove()

    def remove(self) -> None:
        """Delete the scratch directory regardless of keep_work."""
        if not self._temporary:
            return
        logger.debug(f"Removing workspace {self.work_dir}")
        try:
            shutil.rmtree(self.work_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove workspace {self.work_dir}: {e}")

    def __enter__(self) -> "BuildWorkspace":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()


class BuildWorkspaceInitializer:
    """
    Prepare a build workspace.

    Args:
        options: Build options
        tool: Running build tool
        executable: Running mobilekit executable, sys.argv[0] if None
        host: Build host, detected if None
        locator: Xcode SDK locator, chosen from options if None
    """

    def __init__(
        self,
        options: BuildOptions,
        tool: BuildToolInfo,
        executable: Optional[Path] = None,
        host: Optional[HostPlatform] = None,
        locator: Optional[SDKLocator] = None,
    ):
        self.options = options
        self.tool = tool
        self.executable = executable
        self.host = host if host is not None else detect_host()
        self.locator = locator if locator is not None else make_sdk_locator(options)

    def initialize(self) -> BuildWorkspace:
        """
        Run every initialization stage.

        Returns:
            The initialized workspace

        Raises:
            ToolchainNotInstalledError: If no install root exists
            ToolchainPartiallyInstalledError: If the version record is unreadable
            ToolchainOutOfDateError: If the toolchain was installed by another
                build-tool version
            ToolchainDiscoveryError: If an Xcode SDK cannot be located
        """
        install_root = self.locate_install_root()
        trace = self.options.trace_stream()
        if trace is not None:
            print(f"MOBILEKIT={install_root}", file=trace)

        if not self.options.dry_run:
            self.check_installation(install_root)

        workspace = self._allocate(install_root)
        if trace is not None:
            print(f"WORK={workspace.work_dir}", file=trace)

        catalog = ToolchainCatalog(install_root, self.tool.version, host=self.host)
        builder = EnvironmentBuilder(catalog, self.locator, self.host, trace)
        try:
            workspace.environment = builder.build()
        except BaseException:
            workspace.remove()
            raise
        return workspace

    def locate_install_root(self) -> Path:
        executable = self.executable or _current_executable()
        install_root = resolve_install_root(executable)
        if not install_root.is_dir():
            raise ToolchainNotInstalledError(f"{install_root} does not exist")
        logger.debug(f"Install root: {install_root}")
        return install_root

    def check_installation(self, install_root: Path) -> None:
        """Compare the installation record with the running build tool."""
        version_path = install_root / VERSION_FILE
        try:
            installed = version_path.read_bytes()
        except OSError as e:
            raise ToolchainPartiallyInstalledError(str(e)) from e

        if installed != self.tool.descriptor:
            logger.debug(
                f"Installed toolchain version {installed!r} != "
                f"{self.tool.descriptor!r}"
            )
            raise ToolchainOutOfDateError(installed, self.tool.descriptor)

    def _allocate(self, install_root: Path) -> BuildWorkspace:
        if self.options.dry_run:
            return BuildWorkspace(
                install_root,
                WORK_PLACEHOLDER,
                BuildEnvironment(),
                self.options,
                temporary=False,
            )
        work_dir = tempfile.mkdtemp(prefix=WORK_PREFIX)
        logger.debug(f"Allocated workspace {work_dir}")
        return BuildWorkspace(install_root, work_dir, BuildEnvironment(), self.options)


__all__ = [
    "VERSION_FILE",
    "WORK_PLACEHOLDER",
    "resolve_install_root",
    "BuildWorkspace",
    "BuildWorkspaceInitializer",
]
