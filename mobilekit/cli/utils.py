"""
Shared utilities for CLI commands.
"""

import logging
from pathlib import Path

from mobilekit.core.config import DEFAULT_CONFIG_NAME, BuildOptions, load_config

logger = logging.getLogger(__name__)


def load_options(args) -> BuildOptions:
    """
    Build options from the config file and command-line flags.

    An explicit --config must exist; the default ./mobilekit.yaml is optional.
    Flags given on the command line override the file.

    Args:
        args: Parsed arguments (config, dry_run, print_commands, keep_work)

    Returns:
        Effective build options
    """
    config = getattr(args, "config", None)
    if config:
        options = load_config(Path(config), required=True)
    else:
        default_config = Path.cwd() / DEFAULT_CONFIG_NAME
        logger.debug(f"Looking for configuration at {default_config}")
        options = load_config(default_config)

    return options.with_overrides(
        dry_run=getattr(args, "dry_run", None),
        print_commands=getattr(args, "print_commands", None),
        keep_work=getattr(args, "keep_work", None),
    )
