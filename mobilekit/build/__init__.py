"""
Build preparation for mobilekit.

This package initializes the build workspace and merges target environments
into the process environment used to run builds.
"""

from mobilekit.build.environ import merge_environ, getenv, pkgdir
from mobilekit.build.workspace import (
    BuildWorkspace,
    BuildWorkspaceInitializer,
    resolve_install_root,
)

__all__ = [
    "merge_environ",
    "getenv",
    "pkgdir",
    "BuildWorkspace",
    "BuildWorkspaceInitializer",
    "resolve_install_root",
]
