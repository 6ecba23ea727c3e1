"""
Tests for build workspace initialization.
"""

import io
import os
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mobilekit.build.workspace import (
    WORK_PLACEHOLDER,
    BuildWorkspaceInitializer,
    _current_executable,
    resolve_install_root,
)
from mobilekit.core.config import BuildOptions
from mobilekit.core.exceptions import (
    ToolchainDiscoveryError,
    ToolchainNotInstalledError,
    ToolchainOutOfDateError,
    ToolchainPartiallyInstalledError,
)
from mobilekit.toolchain.sdk_locator import PlaceholderSDKLocator, SDKLocator


@pytest.fixture
def tracked_mkdtemp():
    """Record every temporary directory the initializer creates."""
    created = []
    real_mkdtemp = tempfile.mkdtemp

    def mkdtemp(*args, **kwargs):
        path = real_mkdtemp(*args, **kwargs)
        created.append(path)
        return path

    with patch("tempfile.mkdtemp", side_effect=mkdtemp):
        yield created


def _initializer(executable, tool, host, options=None, locator=None):
    return BuildWorkspaceInitializer(
        options or BuildOptions(),
        tool,
        executable=executable,
        host=host,
        locator=locator or PlaceholderSDKLocator(),
    )


class TestResolveInstallRoot:
    def test_bin_to_pkg(self):
        assert resolve_install_root(Path("/home/me/go/bin/mobilekit")) == Path(
            "/home/me/go/pkg/mobilekit"
        )

    def test_windows_executable(self):
        root = resolve_install_root(Path("/go/bin/mobilekit.exe"))

        assert root == Path("/go/pkg/mobilekit")

    def test_windows_scripts_dir(self):
        root = resolve_install_root(Path("C:/Python311/Scripts/mobilekit.exe"))

        assert root == Path("C:/Python311/pkg/mobilekit")

    def test_not_in_bin(self):
        with pytest.raises(ToolchainNotInstalledError):
            resolve_install_root(Path("/usr/local/mobilekit"))


class TestInitialize:
    def test_success(self, fake_install, build_tool, linux_host, tracked_mkdtemp):
        workspace = _initializer(fake_install.executable, build_tool, linux_host).initialize()

        try:
            assert workspace.install_root == fake_install.install_root
            assert os.path.isdir(workspace.work_dir)
            assert os.path.basename(workspace.work_dir).startswith("mobilekit-work-")
            assert tracked_mkdtemp == [workspace.work_dir]
            assert "android/arm" in [t.name for t in workspace.environment.targets()]
        finally:
            workspace.cleanup()

        assert not os.path.exists(workspace.work_dir)

    def test_environment_uses_install_root(self, fake_install, build_tool, linux_host):
        with _initializer(fake_install.executable, build_tool, linux_host).initialize() as workspace:
            env = workspace.environment.target("android", "arm")

        cc = next(line for line in env if line.startswith("CC="))
        assert cc.startswith(f"CC={fake_install.install_root / 'android-ndk-r10e'}")

    def test_context_manager_cleans_up(self, fake_install, build_tool, linux_host):
        with _initializer(fake_install.executable, build_tool, linux_host).initialize() as workspace:
            work_dir = workspace.work_dir
            assert os.path.isdir(work_dir)

        assert not os.path.exists(work_dir)

    def test_keep_work(self, fake_install, build_tool, linux_host, capsys):
        options = BuildOptions(keep_work=True)
        workspace = _initializer(fake_install.executable, build_tool, linux_host, options).initialize()

        workspace.cleanup()

        try:
            assert os.path.isdir(workspace.work_dir)
            assert f"WORK={workspace.work_dir}" in capsys.readouterr().out
        finally:
            workspace.remove()

    def test_not_installed(self, fake_executable, build_tool, linux_host, tracked_mkdtemp):
        initializer = _initializer(fake_executable, build_tool, linux_host)

        with pytest.raises(ToolchainNotInstalledError, match="does not exist"):
            initializer.initialize()
        assert tracked_mkdtemp == []

    def test_missing_version_record(
        self, fake_install, build_tool, linux_host, tracked_mkdtemp
    ):
        (fake_install.install_root / "version").unlink()

        with pytest.raises(ToolchainPartiallyInstalledError):
            _initializer(fake_install.executable, build_tool, linux_host).initialize()
        assert tracked_mkdtemp == []

    def test_out_of_date(self, fake_install, build_tool, linux_host, tracked_mkdtemp):
        (fake_install.install_root / "version").write_bytes(
            b"go version go1.5.3 linux/amd64\n"
        )

        with pytest.raises(ToolchainOutOfDateError):
            _initializer(fake_install.executable, build_tool, linux_host).initialize()
        assert tracked_mkdtemp == []

    def test_version_compared_byte_for_byte(self, fake_install, build_tool, linux_host):
        # Same release, trailing newline missing
        (fake_install.install_root / "version").write_bytes(
            build_tool.descriptor.rstrip(b"\n")
        )

        with pytest.raises(ToolchainOutOfDateError):
            _initializer(fake_install.executable, build_tool, linux_host).initialize()

    def test_discovery_failure_removes_workspace(
        self, fake_install, build_tool, macos_host, tracked_mkdtemp
    ):
        locator = MagicMock(spec=SDKLocator)
        locator.locate.side_effect = ToolchainDiscoveryError("xcrun", "no sdk", 1)
        initializer = _initializer(fake_install.executable, build_tool, macos_host, locator=locator)

        with pytest.raises(ToolchainDiscoveryError):
            initializer.initialize()

        assert len(tracked_mkdtemp) == 1
        assert not os.path.exists(tracked_mkdtemp[0])

    def test_interrupt_removes_workspace(
        self, fake_install, build_tool, macos_host, tracked_mkdtemp
    ):
        """Ctrl-C while xcrun is running must not leave the work directory."""
        locator = MagicMock(spec=SDKLocator)
        locator.locate.side_effect = KeyboardInterrupt
        initializer = _initializer(
            fake_install.executable, build_tool, macos_host, locator=locator
        )

        with pytest.raises(KeyboardInterrupt):
            initializer.initialize()

        assert len(tracked_mkdtemp) == 1
        assert not os.path.exists(tracked_mkdtemp[0])

    def test_print_commands(self, fake_install, build_tool, linux_host):
        out = io.StringIO()
        options = BuildOptions(print_commands=True, trace_out=out)

        with _initializer(fake_install.executable, build_tool, linux_host, options).initialize() as ws:
            work_dir = ws.work_dir

        lines = out.getvalue().splitlines()
        assert lines[0] == f"MOBILEKIT={fake_install.install_root}"
        assert lines[1] == f"WORK={work_dir}"
        assert any(line.startswith("android/arm: ") for line in lines)


class TestDryRun:
    def test_skips_version_check_and_tempdir(
        self, fake_install, build_tool, macos_host, tracked_mkdtemp
    ):
        (fake_install.install_root / "version").unlink()
        out = io.StringIO()
        options = BuildOptions(dry_run=True, trace_out=out)

        workspace = _initializer(fake_install.executable, build_tool, macos_host, options).initialize()

        assert workspace.work_dir == WORK_PLACEHOLDER
        assert tracked_mkdtemp == []
        assert "CC=clang-iphoneos" in workspace.environment.target("darwin", "arm").overrides
        assert f"WORK={WORK_PLACEHOLDER}" in out.getvalue().splitlines()

    def test_cleanup_is_noop(self, fake_install, build_tool, linux_host, capsys):
        options = BuildOptions(dry_run=True, keep_work=True, trace_out=io.StringIO())
        workspace = _initializer(fake_install.executable, build_tool, linux_host, options).initialize()

        with patch("shutil.rmtree") as mock_rmtree:
            workspace.cleanup()

        mock_rmtree.assert_not_called()
        assert capsys.readouterr().out == ""

    def test_still_requires_install_root(self, fake_executable, build_tool, linux_host):
        options = BuildOptions(dry_run=True, trace_out=io.StringIO())

        with pytest.raises(ToolchainNotInstalledError):
            _initializer(fake_executable, build_tool, linux_host, options).initialize()

    def test_default_locator_is_placeholder(self, fake_install, build_tool, macos_host):
        options = BuildOptions(dry_run=True, trace_out=io.StringIO())
        initializer = BuildWorkspaceInitializer(
            options, build_tool, executable=fake_install.executable, host=macos_host
        )

        with patch("subprocess.run") as mock_run:
            initializer.initialize()

        mock_run.assert_not_called()


class TestCurrentExecutable:
    """Locating the launcher the install root is derived from."""

    def test_console_script(self, fake_install):
        with patch("sys.argv", [str(fake_install.executable)]):
            assert _current_executable() == fake_install.executable.resolve()

    def test_module_entry_point_uses_path(self, fake_install, tmp_path):
        main_py = tmp_path / "site-packages" / "mobilekit" / "__main__.py"

        with patch("sys.argv", [str(main_py)]), patch(
            "shutil.which", return_value=str(fake_install.executable)
        ) as mock_which:
            assert _current_executable() == fake_install.executable.resolve()

        mock_which.assert_called_once_with("mobilekit")

    def test_module_entry_point_without_launcher(self, tmp_path):
        main_py = tmp_path / "site-packages" / "mobilekit" / "__main__.py"

        with patch("sys.argv", [str(main_py)]), patch("shutil.which", return_value=None):
            with pytest.raises(ToolchainNotInstalledError, match="launcher"):
                _current_executable()

    def test_initialize_under_module_entry_point(
        self, fake_install, build_tool, linux_host, tmp_path
    ):
        main_py = tmp_path / "site-packages" / "mobilekit" / "__main__.py"
        initializer = BuildWorkspaceInitializer(
            BuildOptions(),
            build_tool,
            host=linux_host,
            locator=PlaceholderSDKLocator(),
        )

        with patch("sys.argv", [str(main_py)]), patch(
            "shutil.which", return_value=str(fake_install.executable)
        ):
            with initializer.initialize() as workspace:
                assert workspace.install_root == fake_install.install_root.resolve()
