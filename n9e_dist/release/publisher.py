"""Building and uploading packages to the index.

``UvPublisher`` builds with ``uv build`` and uploads with ``uv publish``.
In dry-run mode the same build runs and ``uv publish --dry-run`` validates
the upload without sending anything. Index credentials come from the
environment (``UV_PUBLISH_TOKEN`` and friends).
"""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.platform.process import run_silent
from n9e_dist.release.errors import PublishFailure

__all__ = ["Publisher", "UvPublisher"]


class Publisher(Protocol):
    def publish(self, package_dir: Path, *, dry_run: bool) -> Result[None, PublishFailure]:
        """Publish the package in package_dir (or only verify it when dry_run)."""
        ...


class UvPublisher:
    def __init__(self, *, env: Mapping[str, str] | None = None) -> None:
        self._env = env

    def commands(self, package_dir: Path, *, dry_run: bool) -> list[list[str]]:
        dist_dir = package_dir / "dist"
        publish = ["uv", "publish"]
        if dry_run:
            publish.append("--dry-run")
        publish.append(str(dist_dir / "*"))
        return [
            ["uv", "build", "--out-dir", str(dist_dir), str(package_dir)],
            publish,
        ]

    def publish(self, package_dir: Path, *, dry_run: bool) -> Result[None, PublishFailure]:
        # Stale artifacts from an earlier version would be uploaded too
        dist_dir = package_dir / "dist"
        try:
            if dist_dir.exists():
                shutil.rmtree(dist_dir)
        except OSError as e:
            return Err(PublishFailure(package=package_dir.name, detail=f"cannot clear {dist_dir}: {e}"))

        for cmd in self.commands(package_dir, dry_run=dry_run):
            result = run_silent(cmd, cwd=package_dir, env=self._env)
            if isinstance(result, Err):
                return Err(PublishFailure(package=package_dir.name, detail=str(result.error)))
        return Ok(None)
