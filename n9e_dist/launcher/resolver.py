"""Locate the installed platform binary through Python's import system."""

from __future__ import annotations

import importlib.util
from collections.abc import Callable
from importlib.machinery import ModuleSpec
from pathlib import Path

from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.launcher.catalog import PlatformEntry, lookup
from n9e_dist.launcher.errors import LaunchError, PackageNotFound
from n9e_dist.platform.detection import PlatformKey

__all__ = ["FindSpec", "locate_package", "resolve"]

FindSpec = Callable[[str], ModuleSpec | None]


def _package_dir(spec: ModuleSpec) -> Path | None:
    if spec.submodule_search_locations:
        return Path(next(iter(spec.submodule_search_locations)))
    if spec.origin and spec.has_location:
        return Path(spec.origin).parent
    return None


def locate_package(entry: PlatformEntry, find_spec: FindSpec) -> Result[Path, str]:
    """Directory of the entry's installed import package, or why it was not found."""
    try:
        spec = find_spec(entry.import_name)
    except (ImportError, ValueError) as e:
        return Err(str(e))
    if spec is None:
        return Err(f"No module named '{entry.import_name}'")

    package_dir = _package_dir(spec)
    if package_dir is None:
        return Err(f"'{entry.import_name}' has no location on disk")
    return Ok(package_dir.absolute())


def resolve(
    os: str,
    arch: str,
    *,
    find_spec: FindSpec = importlib.util.find_spec,
) -> Result[Path, LaunchError]:
    """Absolute path of the binary that serves (os, arch).

    The file itself is not checked; a missing or non-executable binary shows up
    when it is spawned.
    """
    entry_result = lookup(os, arch)
    if isinstance(entry_result, Err):
        return entry_result
    entry = entry_result.value

    located = locate_package(entry, find_spec)
    if isinstance(located, Err):
        return Err(
            PackageNotFound(
                package=entry.package,
                platform=PlatformKey(os=os, arch=arch),
                cause=located.error,
            )
        )

    return Ok(located.value / entry.binary)
