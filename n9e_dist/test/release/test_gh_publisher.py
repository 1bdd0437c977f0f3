"""Tests for the gh downloader and the uv publisher."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest

from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.platform.process import ProcessError
from n9e_dist.release import gh as gh_mod
from n9e_dist.release import publisher as publisher_mod
from n9e_dist.release.gh import GhReleaseDownloader, ensure_gh_available
from n9e_dist.release.publisher import UvPublisher


def test_gh_download_command(tmp_path: Path) -> None:
    downloader = GhReleaseDownloader(repo="n9e/n9e-mcp-server", cwd=tmp_path)

    cmd = downloader.command(
        version="0.1.0",
        asset_name="n9e-mcp-server-v0.1.0-linux-amd64.tar.gz",
        dest_dir=tmp_path / ".tmp",
    )

    assert cmd == [
        "gh",
        "release",
        "download",
        "v0.1.0",
        "--repo",
        "n9e/n9e-mcp-server",
        "--pattern",
        "n9e-mcp-server-v0.1.0-linux-amd64.tar.gz",
        "--dir",
        str(tmp_path / ".tmp"),
        "--clobber",
    ]


def test_gh_download_returns_asset_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    asset = "n9e-mcp-server-v0.1.0-windows-amd64.zip"

    def fake_run_silent(cmd: list[str], cwd: Path, env: Mapping[str, str] | None = None):
        del cwd, env
        (Path(cmd[cmd.index("--dir") + 1]) / asset).write_bytes(b"PK")
        return Ok(None)

    monkeypatch.setattr(gh_mod, "run_silent", fake_run_silent)
    downloader = GhReleaseDownloader(repo="n9e/n9e-mcp-server", cwd=tmp_path)

    result = downloader.download(version="0.1.0", asset_name=asset, dest_dir=tmp_path / "dl")

    assert result == Ok(tmp_path / "dl" / asset)


def test_gh_download_without_file_is_an_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(gh_mod, "run_silent", lambda cmd, cwd, env=None: Ok(None))
    downloader = GhReleaseDownloader(repo="n9e/n9e-mcp-server", cwd=tmp_path)

    result = downloader.download(version="0.1.0", asset_name="x.zip", dest_dir=tmp_path)

    assert isinstance(result, Err)
    assert "x.zip missing" in result.error.stderr


def test_gh_download_propagates_process_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    error = ProcessError(command=("gh",), returncode=1, stdout="", stderr="")
    monkeypatch.setattr(gh_mod, "run_silent", lambda cmd, cwd, env=None: Err(error))
    downloader = GhReleaseDownloader(repo="n9e/n9e-mcp-server", cwd=tmp_path)

    assert downloader.download(version="0.1.0", asset_name="x.zip", dest_dir=tmp_path) == Err(error)


def test_ensure_gh_available(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: None)
    assert isinstance(ensure_gh_available(), Err)

    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: f"/usr/bin/{name}")
    assert ensure_gh_available() == Ok(None)


@pytest.mark.parametrize(
    ("dry_run", "publish_cmd"),
    [(True, ["uv", "publish", "--dry-run"]), (False, ["uv", "publish"])],
)
def test_uv_commands(tmp_path: Path, dry_run: bool, publish_cmd: list[str]) -> None:
    package_dir = tmp_path / "n9e-mcp-server"
    dist = package_dir / "dist"

    assert UvPublisher().commands(package_dir, dry_run=dry_run) == [
        ["uv", "build", "--out-dir", str(dist), str(package_dir)],
        [*publish_cmd, str(dist / "*")],
    ]


def test_uv_publish_clears_stale_artifacts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    package_dir = tmp_path / "n9e-mcp-server-linux-x64"
    stale = package_dir / "dist" / "n9e_mcp_server_linux_x64-0.0.9-py3-none-any.whl"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"old")
    calls: list[list[str]] = []

    def fake_run_silent(
        cmd: list[str], cwd: Path, env: Mapping[str, str] | None = None
    ) -> Result[None, ProcessError]:
        assert cwd == package_dir
        calls.append(cmd)
        return Ok(None)

    monkeypatch.setattr(publisher_mod, "run_silent", fake_run_silent)

    assert UvPublisher().publish(package_dir, dry_run=True) == Ok(None)
    assert not stale.exists()
    assert [c[:2] for c in calls] == [["uv", "build"], ["uv", "publish"]]


def test_uv_build_failure_skips_upload(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    package_dir = tmp_path / "n9e-mcp-server"
    package_dir.mkdir()
    calls: list[list[str]] = []

    def fake_run_silent(cmd: list[str], cwd: Path, env: Mapping[str, str] | None = None):
        calls.append(cmd)
        return Err(ProcessError(command=tuple(cmd), returncode=2, stdout="", stderr=""))

    monkeypatch.setattr(publisher_mod, "run_silent", fake_run_silent)

    result = UvPublisher().publish(package_dir, dry_run=False)

    assert isinstance(result, Err)
    assert result.error.package == "n9e-mcp-server"
    assert "exit 2" in result.error.detail
    assert len(calls) == 1
