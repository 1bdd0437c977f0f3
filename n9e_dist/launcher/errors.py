from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from n9e_dist.platform.detection import PlatformKey


@dataclass(frozen=True, slots=True)
class UnsupportedPlatform:
    os: str


@dataclass(frozen=True, slots=True)
class UnsupportedArchitecture:
    os: str
    arch: str


@dataclass(frozen=True, slots=True)
class PackageNotFound:
    package: str
    platform: PlatformKey
    cause: str


@dataclass(frozen=True, slots=True)
class SpawnFailure:
    binary: Path
    cause: str


LaunchError = UnsupportedPlatform | UnsupportedArchitecture | PackageNotFound | SpawnFailure
