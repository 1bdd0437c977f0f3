from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from n9e_dist.core.config import DEFAULT_CONFIG_NAME, load_config
from n9e_dist.core.errors import ErrorCode
from n9e_dist.core.result import Err
from n9e_dist.output.console import ConsoleProtocol, RichConsole
from n9e_dist.output.errors import print_release_error, release_error_exit_code
from n9e_dist.release.archive import ArchiveExtractor
from n9e_dist.release.errors import ReleaseError
from n9e_dist.release.gh import GhReleaseDownloader, ensure_gh_available
from n9e_dist.release.orchestrator import PublishOptions, publish_release, validate_version
from n9e_dist.release.publisher import UvPublisher


def _fail(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    print_release_error(error, console)
    raise typer.Exit(code=release_error_exit_code(error))


def _exit(message: str, console: ConsoleProtocol) -> NoReturn:
    console.error(message)
    raise typer.Exit(code=int(ErrorCode.FAILURE))


def publish(
    version: str | None = typer.Argument(None, help="Version to publish, e.g. 0.1.0"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Build and verify every package without uploading"
    ),
    skip_download: bool = typer.Option(
        False, "--skip-download", help="Use the binaries already in the package directories"
    ),
    config_path: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME), "--config", help="Release configuration file"
    ),
) -> None:
    """Stamp VERSION on every package, fetch the binaries and publish."""
    console = RichConsole()

    valid = validate_version(version)
    if isinstance(valid, Err):
        _fail(valid.error, console)

    loaded = load_config(config_path)
    if isinstance(loaded, Err):
        _exit(loaded.error.message, console)
    config = loaded.value

    if not skip_download:
        gh = ensure_gh_available()
        if isinstance(gh, Err):
            _exit(gh.error, console)

    result = publish_release(
        config=config,
        options=PublishOptions(version=valid.value, dry_run=dry_run, skip_download=skip_download),
        downloader=GhReleaseDownloader(repo=config.github_repo, cwd=config.packages_root),
        extractor=ArchiveExtractor(),
        publisher=UvPublisher(),
        console=console,
    )
    if isinstance(result, Err):
        _fail(result.error, console)

    report = result.value
    console.newline()
    verb = "Verified" if report.dry_run else "Published"
    console.success(f"{verb} {len(report.published)} packages at {report.version}")
