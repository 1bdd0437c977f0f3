"""GitHub Releases as the artifact host, through the ``gh`` CLI.

``gh`` must already be authenticated; credentials are never read here.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.platform.process import ProcessError, run_silent

__all__ = ["GhReleaseDownloader", "ensure_gh_available"]


def ensure_gh_available() -> Result[None, str]:
    if shutil.which("gh") is None:
        return Err("gh: missing (install GitHub CLI: https://cli.github.com/)")
    return Ok(None)


class GhReleaseDownloader:
    """Download release assets of one repository with ``gh release download``."""

    def __init__(self, *, repo: str, cwd: Path) -> None:
        self._repo = repo
        self._cwd = cwd

    @property
    def repo(self) -> str:
        return self._repo

    def command(self, *, version: str, asset_name: str, dest_dir: Path) -> list[str]:
        return [
            "gh",
            "release",
            "download",
            f"v{version}",
            "--repo",
            self._repo,
            "--pattern",
            asset_name,
            "--dir",
            str(dest_dir),
            "--clobber",
        ]

    def download(self, *, version: str, asset_name: str, dest_dir: Path) -> Result[Path, ProcessError]:
        dest_dir.mkdir(parents=True, exist_ok=True)
        cmd = self.command(version=version, asset_name=asset_name, dest_dir=dest_dir)
        result = run_silent(cmd, cwd=self._cwd)
        if isinstance(result, Err):
            return result

        path = dest_dir / asset_name
        if not path.is_file():
            return Err(
                ProcessError(
                    command=tuple(cmd),
                    returncode=0,
                    stdout="",
                    stderr=f"{asset_name} missing after download",
                )
            )
        return Ok(path)
