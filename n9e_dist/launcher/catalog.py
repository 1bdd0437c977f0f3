"""Supported platforms and the package carrying each platform's binary.

This table is the single source of truth for the package family: the release
targets in ``n9e_dist.release.targets`` are derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass

from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.launcher.errors import UnsupportedArchitecture, UnsupportedPlatform
from n9e_dist.platform.detection import (
    ARCH_ARM64,
    ARCH_X64,
    OS_DARWIN,
    OS_LINUX,
    OS_WIN32,
    PlatformKey,
)

__all__ = [
    "DISPATCHER_PACKAGE",
    "TOOL_NAME",
    "PlatformEntry",
    "entries",
    "lookup",
    "package_names",
]

TOOL_NAME = "n9e-mcp-server"
DISPATCHER_PACKAGE = TOOL_NAME


@dataclass(frozen=True, slots=True)
class PlatformEntry:
    """Where a platform's binary lives.

    Attributes:
        package: Distribution name of the platform package
        binary: File name of the binary inside the package's import directory
    """

    package: str
    binary: str

    @property
    def import_name(self) -> str:
        """Import package name, e.g. ``n9e_mcp_server_linux_x64``."""
        return self.package.replace("-", "_")

    @property
    def has_exe_suffix(self) -> bool:
        return self.binary.endswith(".exe")


_UNIX_BINARY = TOOL_NAME
_WINDOWS_BINARY = f"{TOOL_NAME}.exe"

_CATALOG: dict[str, dict[str, PlatformEntry]] = {
    OS_DARWIN: {
        ARCH_ARM64: PlatformEntry(f"{TOOL_NAME}-darwin-arm64", _UNIX_BINARY),
        ARCH_X64: PlatformEntry(f"{TOOL_NAME}-darwin-x64", _UNIX_BINARY),
    },
    OS_LINUX: {
        ARCH_ARM64: PlatformEntry(f"{TOOL_NAME}-linux-arm64", _UNIX_BINARY),
        ARCH_X64: PlatformEntry(f"{TOOL_NAME}-linux-x64", _UNIX_BINARY),
    },
    OS_WIN32: {
        ARCH_ARM64: PlatformEntry(f"{TOOL_NAME}-win32-arm64", _WINDOWS_BINARY),
        ARCH_X64: PlatformEntry(f"{TOOL_NAME}-win32-x64", _WINDOWS_BINARY),
    },
}


def lookup(
    os: str, arch: str
) -> Result[PlatformEntry, UnsupportedPlatform | UnsupportedArchitecture]:
    """Return the entry for (os, arch).

    An unknown OS and a known OS with an unknown architecture are reported
    as different errors.
    """
    by_arch = _CATALOG.get(os)
    if by_arch is None:
        return Err(UnsupportedPlatform(os=os))
    entry = by_arch.get(arch)
    if entry is None:
        return Err(UnsupportedArchitecture(os=os, arch=arch))
    return Ok(entry)


def entries() -> list[tuple[PlatformKey, PlatformEntry]]:
    """Every supported platform with its entry, in table order."""
    return [
        (PlatformKey(os=os, arch=arch), entry)
        for os, by_arch in _CATALOG.items()
        for arch, entry in by_arch.items()
    ]


def package_names() -> frozenset[str]:
    """Distribution names of every platform package."""
    return frozenset(entry.package for _, entry in entries())
