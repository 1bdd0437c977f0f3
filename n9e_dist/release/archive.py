"""Fetch release archives with bounded retries and pull the binary out of them.

Downloading and extracting sit behind the Downloader and Extractor protocols;
``GhReleaseDownloader`` (``n9e_dist.release.gh``) and ``ArchiveExtractor``
are the production implementations.
"""

from __future__ import annotations

import os
import shutil
import tarfile
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from time import sleep
from typing import BinaryIO, Protocol

from n9e_dist.core.config import DEFAULT_DOWNLOAD_ATTEMPTS, DEFAULT_DOWNLOAD_RETRY_DELAY
from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.output.console import ConsoleProtocol, Style
from n9e_dist.platform.process import ProcessError
from n9e_dist.release.errors import DownloadExhausted, ExtractionFailure
from n9e_dist.release.targets import ArchiveFormat, ReleaseTarget

__all__ = [
    "ArchiveExtractor",
    "Downloader",
    "Extractor",
    "RetryPolicy",
    "fetch",
    "install_target_binary",
]

EXECUTABLE_MODE = 0o755


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Fixed-delay retry: no backoff, no jitter."""

    max_attempts: int = DEFAULT_DOWNLOAD_ATTEMPTS
    delay_seconds: float = DEFAULT_DOWNLOAD_RETRY_DELAY

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")


class Downloader(Protocol):
    def download(self, *, version: str, asset_name: str, dest_dir: Path) -> Result[Path, ProcessError]:
        """Download one release asset into dest_dir and return its path."""
        ...


class Extractor(Protocol):
    def extract(
        self, archive: Path, dest_dir: Path, binary_name: str, fmt: ArchiveFormat
    ) -> Result[Path, ExtractionFailure]:
        """Write the single entry binary_name of archive to dest_dir."""
        ...


def fetch(
    downloader: Downloader,
    *,
    version: str,
    asset_name: str,
    dest_dir: Path,
    policy: RetryPolicy,
    console: ConsoleProtocol,
) -> Result[Path, DownloadExhausted]:
    """Download asset_name, retrying up to policy.max_attempts times."""
    detail = ""
    for attempt in range(1, policy.max_attempts + 1):
        result = downloader.download(version=version, asset_name=asset_name, dest_dir=dest_dir)
        if isinstance(result, Ok):
            return result

        detail = str(result.error)
        remaining = policy.max_attempts - attempt
        if remaining:
            console.print(
                f"    Download failed, retrying in {policy.delay_seconds:g}s... "
                f"({remaining} retries left)",
                Style.DIM,
            )
            sleep(policy.delay_seconds)

    return Err(DownloadExhausted(asset=asset_name, attempts=policy.max_attempts, detail=detail))


def _entry_name(name: str) -> str:
    normalized = name.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return str(PurePosixPath(normalized)) if normalized else ""


class ArchiveExtractor:
    """Extract exactly one named file from a .tar.gz or .zip archive.

    The format is whatever the caller declares; archive contents are never
    sniffed. Only an entry at the archive root whose name equals the binary
    name is accepted.
    """

    def extract(
        self, archive: Path, dest_dir: Path, binary_name: str, fmt: ArchiveFormat
    ) -> Result[Path, ExtractionFailure]:
        def failure(reason: str) -> Err[ExtractionFailure]:
            return Err(ExtractionFailure(archive=archive, binary=binary_name, reason=reason))

        if not archive.is_file():
            return failure("archive not found")

        try:
            if fmt is ArchiveFormat.ZIP:
                return self._extract_zip(archive, dest_dir, binary_name)
            return self._extract_tar(archive, dest_dir, binary_name)
        except (tarfile.TarError, zipfile.BadZipFile) as e:
            return failure(f"corrupt archive: {e}")
        except OSError as e:
            return failure(f"IO error: {e}")

    def _write(self, src: BinaryIO, dest_dir: Path, binary_name: str) -> Path:
        dest_dir.mkdir(parents=True, exist_ok=True)
        out = dest_dir / binary_name
        with src, open(out, "wb") as dst:
            shutil.copyfileobj(src, dst)
        return out

    def _extract_tar(
        self, archive: Path, dest_dir: Path, binary_name: str
    ) -> Result[Path, ExtractionFailure]:
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar.getmembers():
                if _entry_name(member.name) != binary_name:
                    continue
                if not member.isreg():
                    break
                src = tar.extractfile(member)
                if src is None:
                    break
                return Ok(self._write(src, dest_dir, binary_name))

        return Err(
            ExtractionFailure(
                archive=archive, binary=binary_name, reason="no regular file entry with that name"
            )
        )

    def _extract_zip(
        self, archive: Path, dest_dir: Path, binary_name: str
    ) -> Result[Path, ExtractionFailure]:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                if info.is_dir() or _entry_name(info.filename) != binary_name:
                    continue
                return Ok(self._write(zf.open(info), dest_dir, binary_name))

        return Err(
            ExtractionFailure(
                archive=archive, binary=binary_name, reason="no file entry with that name"
            )
        )


def install_target_binary(
    target: ReleaseTarget,
    *,
    archive: Path,
    dest_dir: Path,
    extractor: Extractor,
) -> Result[Path, ExtractionFailure]:
    """Extract the target's binary into dest_dir and make it executable.

    Suffix-less binaries get 0o755; ``.exe`` binaries keep default permissions.
    """
    result = extractor.extract(archive, dest_dir, target.binary_name, target.archive_format)
    if isinstance(result, Err):
        return result

    path = result.value
    if not target.binary_suffix:
        try:
            os.chmod(path, EXECUTABLE_MODE)
        except OSError as e:
            return Err(
                ExtractionFailure(
                    archive=archive,
                    binary=target.binary_name,
                    reason=f"cannot make executable: {e}",
                )
            )
    return Ok(path)
