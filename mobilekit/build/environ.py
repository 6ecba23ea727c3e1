"""
Process environment merging.

Builds are run with the host's inherited environment plus a target's
overrides. merge_environ() combines the two with the overrides taking
precedence.
"""

import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from mobilekit.core.exceptions import MalformedOverrideError
from mobilekit.core.platform import HostPlatform, detect_host


def merge_environ(
    overrides: Iterable[str],
    base: Optional[Iterable[str]] = None,
    host: Optional[HostPlatform] = None,
) -> List[str]:
    """
    Merge KEY=VALUE overrides into a base environment.

    Entries are split at the first '='. Base entries without '=' or with an
    empty name are passed through unchanged. On hosts whose variable names
    are case-insensitive, names from both sides are upper-cased so that an
    override replaces a differently-cased inherited variable.

    Args:
        overrides: KEY=VALUE strings that take precedence
        base: Inherited entries, os.environ if None
        host: Build host, detected if None

    Returns:
        Merged KEY=VALUE list. Order is unspecified.

    Raises:
        MalformedOverrideError: If an override is not of the form KEY=VALUE

    Example:
        >>> merge_environ(["A=2"], base=["A=1", "B=3"])
        ['A=2', 'B=3']
    """
    if base is None:
        base = [f"{k}={v}" for k, v in os.environ.items()]
    if host is None:
        host = detect_host()

    merged: List[str] = []
    values: Dict[str, str] = {}

    for entry in base:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            # e.g. Windows keeps per-drive cwd in names starting with '='
            merged.append(entry)
            continue
        if host.case_insensitive_env:
            key = key.upper()
        values[key] = value

    for entry in overrides:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            raise MalformedOverrideError(entry)
        if host.case_insensitive_env:
            key = key.upper()
        values[key] = value

    merged.extend(f"{k}={v}" for k, v in values.items())
    return merged


def getenv(env: Iterable[str], key: str) -> str:
    """
    Value of key in a KEY=VALUE list.

    Returns the remainder of the first entry starting with 'key='. A missing
    key and a key set to the empty string both give ''.
    """
    prefix = key + "="
    for entry in env:
        if entry.startswith(prefix):
            return entry[len(prefix) :]
    return ""


def pkgdir(env: Iterable[str], install_root: Path) -> Path:
    """Package output directory for the target described by env."""
    env = list(env)
    return Path(install_root) / f"pkg_{getenv(env, 'GOOS')}_{getenv(env, 'GOARCH')}"


__all__ = [
    "merge_environ",
    "getenv",
    "pkgdir",
]
