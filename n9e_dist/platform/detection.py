"""Host operating system and CPU architecture detection.

Identifiers follow the naming the platform packages are published under:
``darwin``/``linux``/``win32`` and ``x64``/``arm64``. Values that are not
recognized are passed through lower-cased rather than mapped to a placeholder,
so a rejection message names what the host actually reported.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from functools import lru_cache

__all__ = [
    "PlatformKey",
    "detect",
    "detect_arch",
    "detect_os",
    "normalize_arch",
    "normalize_os",
]

OS_DARWIN = "darwin"
OS_LINUX = "linux"
OS_WIN32 = "win32"

ARCH_X64 = "x64"
ARCH_ARM64 = "arm64"


@dataclass(frozen=True, slots=True)
class PlatformKey:
    """An (operating system, CPU architecture) pair."""

    os: str
    arch: str

    @property
    def suffix(self) -> str:
        """Package name suffix, e.g. ``darwin-arm64``."""
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return self.suffix


def normalize_os(system: str) -> str:
    system = system.lower()
    if system.startswith("linux"):
        return OS_LINUX
    if system.startswith("darwin"):
        return OS_DARWIN
    if system.startswith(("win32", "cygwin", "msys")):
        return OS_WIN32
    return system or "unknown"


def normalize_arch(machine: str) -> str:
    machine = machine.lower()
    if machine in ("x86_64", "amd64"):
        return ARCH_X64
    if machine in ("aarch64", "arm64"):
        return ARCH_ARM64
    return machine or "unknown"


@lru_cache(maxsize=1)
def detect_os() -> str:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows.
    # It may query WMI (slow/hangs on some machines).
    return normalize_os(_sys.platform)


@lru_cache(maxsize=1)
def detect_arch() -> str:
    """Detect the current CPU architecture (cached)."""
    # NOTE: avoid platform.machine() on Windows, same WMI issue as above.
    if detect_os() == OS_WIN32:
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
    else:
        machine = _platform.machine()
    return normalize_arch(machine)


def detect() -> PlatformKey:
    """Detect the host's platform key."""
    return PlatformKey(os=detect_os(), arch=detect_arch())
