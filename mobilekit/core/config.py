"""YAML configuration for mobilekit builds.

This module parses the optional mobilekit.yaml file and holds the build
options that select how the cross-compilation environment is prepared.
"""

import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

import yaml

from mobilekit.core.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "mobilekit.yaml"

_BUILD_FLAGS = ("dry_run", "print_commands", "keep_work")


@dataclass
class BuildOptions:
    """
    Options controlling environment preparation.

    Attributes:
        dry_run: Print what would be done without running external commands
            or creating a workspace (-n)
        print_commands: Print resolved paths and environments (-x)
        keep_work: Keep the temporary workspace and print its path (-work)
        go_command: Go executable used to detect the build tool version
        trace_out: Stream receiving trace output (stderr if None)
    """

    dry_run: bool = False
    print_commands: bool = False
    keep_work: bool = False
    go_command: str = "go"
    trace_out: Optional[TextIO] = field(default=None, repr=False, compare=False)

    @property
    def tracing(self) -> bool:
        """A dry run always prints what it would have done."""
        return self.dry_run or self.print_commands

    def trace_stream(self) -> Optional[TextIO]:
        """Stream for trace output, or None when tracing is off."""
        if not self.tracing:
            return None
        return self.trace_out if self.trace_out is not None else sys.stderr

    def with_overrides(self, **overrides: Any) -> "BuildOptions":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(config_path: Path, required: bool = False) -> BuildOptions:
    """
    Parse a mobilekit.yaml configuration file.

    Args:
        config_path: Path to mobilekit.yaml
        required: If True, a missing file is an error

    Returns:
        Parsed options (defaults if the file is absent and not required)

    Raises:
        ConfigError: If the file is required but missing, or invalid
    """
    if not config_path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return BuildOptions()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        return BuildOptions()

    return _parse_and_validate(data)


def _parse_and_validate(data: Any) -> BuildOptions:
    """Parse and validate configuration data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    version = data.get("version", 1)
    if version != 1:
        raise ConfigError(f"Unsupported version: {version} (expected 1)")

    build = data.get("build") or {}
    if not isinstance(build, dict):
        raise ConfigError("build must be a mapping")

    flags: Dict[str, bool] = {}
    for name in _BUILD_FLAGS:
        if name not in build:
            continue
        if not isinstance(build[name], bool):
            raise ConfigError(f"build.{name} must be true or false")
        flags[name] = build[name]

    unknown = sorted(set(build) - set(_BUILD_FLAGS))
    if unknown:
        raise ConfigError(f"Unknown build options: {', '.join(unknown)}")

    go_command: Optional[str] = data.get("go_command")
    if go_command is not None and (not isinstance(go_command, str) or not go_command):
        raise ConfigError("go_command must be a non-empty string")

    return BuildOptions(**flags).with_overrides(go_command=go_command)


__all__ = [
    "BuildOptions",
    "load_config",
    "DEFAULT_CONFIG_NAME",
]
