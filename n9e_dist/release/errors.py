"""Failures of the publish pipeline.

Every one of them ends the run; only downloads are retried before giving up.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class UsageError:
    message: str


@dataclass(frozen=True, slots=True)
class DiscoveryFailure:
    root: Path
    reason: str


@dataclass(frozen=True, slots=True)
class StampFailure:
    package: str
    reason: str
    # Packages whose manifest was already rewritten when the failure happened
    stamped: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DownloadExhausted:
    asset: str
    attempts: int
    detail: str


@dataclass(frozen=True, slots=True)
class ExtractionFailure:
    archive: Path
    binary: str
    reason: str


@dataclass(frozen=True, slots=True)
class PublishFailure:
    package: str
    detail: str


ReleaseError = (
    UsageError
    | DiscoveryFailure
    | StampFailure
    | DownloadExhausted
    | ExtractionFailure
    | PublishFailure
)
