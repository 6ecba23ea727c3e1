"""
Env command implementation.

Initializes the build workspace and prints the cross-compilation environment
of every configured target.
"""

import logging

from mobilekit.build.environ import merge_environ, pkgdir
from mobilekit.build.workspace import BuildWorkspaceInitializer
from mobilekit.cli.utils import load_options
from mobilekit.core.version import detect_build_tool

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the env command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    logger.debug(f"Arguments: {args}")

    options = load_options(args)
    tool = detect_build_tool(options.go_command)
    initializer = BuildWorkspaceInitializer(options, tool)

    with initializer.initialize() as workspace:
        environment = workspace.environment

        if not args.target:
            for target in environment.targets():
                print(target)
            return 0

        goos, _, goarch = args.target.partition("/")
        target = environment.target(goos, goarch)
        logger.debug(
            f"Package directory: {pkgdir(target.overrides, workspace.install_root)}"
        )

        if args.merged:
            lines = sorted(merge_environ(target.overrides))
        else:
            lines = list(target.overrides)
        for line in lines:
            print(line)

    return 0
