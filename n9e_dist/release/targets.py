"""Release archive naming for each platform package.

Archives use their own OS/arch tokens (``windows``, ``amd64``) which differ
from the package suffixes (``win32``, ``x64``). The table here is derived from
the launcher catalog so a platform cannot be added to one without the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from n9e_dist.launcher.catalog import TOOL_NAME, PlatformEntry, entries
from n9e_dist.platform.detection import (
    ARCH_ARM64,
    ARCH_X64,
    OS_DARWIN,
    OS_LINUX,
    OS_WIN32,
    PlatformKey,
)

__all__ = ["ArchiveFormat", "ReleaseTarget", "RELEASE_TARGETS", "derive_target"]


class ArchiveFormat(Enum):
    TAR_GZ = "tar.gz"
    ZIP = "zip"

    @property
    def extension(self) -> str:
        return self.value


_ARCHIVE_OS = {
    OS_DARWIN: "darwin",
    OS_LINUX: "linux",
    OS_WIN32: "windows",
}

_ARCHIVE_ARCH = {
    ARCH_X64: "amd64",
    ARCH_ARM64: "arm64",
}


@dataclass(frozen=True, slots=True)
class ReleaseTarget:
    """One platform package and the release archive that feeds it.

    Attributes:
        suffix: Package suffix, e.g. ``win32-x64``
        package: Platform package distribution name
        archive_os: OS token used in archive names, e.g. ``windows``
        archive_arch: Architecture token used in archive names, e.g. ``amd64``
        binary_suffix: ``.exe`` or empty
    """

    suffix: str
    package: str
    archive_os: str
    archive_arch: str
    binary_suffix: str

    @property
    def archive_format(self) -> ArchiveFormat:
        return ArchiveFormat.ZIP if self.archive_os == "windows" else ArchiveFormat.TAR_GZ

    @property
    def binary_name(self) -> str:
        return f"{TOOL_NAME}{self.binary_suffix}"

    @property
    def import_name(self) -> str:
        return self.package.replace("-", "_")

    def archive_name(self, version: str) -> str:
        """e.g. ``n9e-mcp-server-v0.1.0-windows-amd64.zip``"""
        return (
            f"{TOOL_NAME}-v{version}-{self.archive_os}-{self.archive_arch}"
            f".{self.archive_format.extension}"
        )


def derive_target(key: PlatformKey, entry: PlatformEntry) -> ReleaseTarget:
    return ReleaseTarget(
        suffix=key.suffix,
        package=entry.package,
        archive_os=_ARCHIVE_OS[key.os],
        archive_arch=_ARCHIVE_ARCH[key.arch],
        binary_suffix=".exe" if entry.has_exe_suffix else "",
    )


RELEASE_TARGETS: tuple[ReleaseTarget, ...] = tuple(
    derive_target(key, entry) for key, entry in entries()
)
