"""The publish pipeline.

discover -> stamp -> fetch+extract -> cleanup -> publish

Platform packages and the runtime package (n9e-mcp-dist, which holds the
launcher) are published before the dispatcher, always: the dispatcher pins
them, and must never reach the index ahead of the versions it points at.
Every failure ends the run; nothing is rolled back.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from dataclasses import dataclass

from packaging.version import InvalidVersion, Version

from n9e_dist.core.config import DistConfig
from n9e_dist.core.result import Err, Ok, Result
from n9e_dist.launcher.catalog import DISPATCHER_PACKAGE, package_names
from n9e_dist.output.console import ConsoleProtocol, Style
from n9e_dist.release.archive import Downloader, Extractor, RetryPolicy, fetch, install_target_binary
from n9e_dist.release.errors import DiscoveryFailure, ReleaseError, UsageError
from n9e_dist.release.manifest import (
    PackageDescriptor,
    discover_packages,
    load_descriptor,
    stamp_all,
)
from n9e_dist.release.publisher import Publisher
from n9e_dist.release.targets import RELEASE_TARGETS

__all__ = [
    "PublishOptions",
    "PublishReport",
    "fetch_binaries",
    "publish_order",
    "publish_release",
    "validate_version",
]


@dataclass(frozen=True, slots=True)
class PublishOptions:
    version: str
    dry_run: bool = False
    skip_download: bool = False


@dataclass(frozen=True, slots=True)
class PublishReport:
    version: str
    dry_run: bool
    stamped: tuple[str, ...]
    fetched: tuple[str, ...]
    published: tuple[str, ...]


def validate_version(version: str | None) -> Result[str, UsageError]:
    """Check a release version given on the command line.

    It must be a PEP 440 version without a leading ``v``; the ``v`` belongs
    to the release tag, not to the package version.
    """
    if version is None or not version.strip():
        return Err(UsageError("missing version"))
    version = version.strip()
    if version[0] in "vV":
        return Err(UsageError(f"invalid version '{version}': drop the leading 'v'"))
    try:
        Version(version)
    except InvalidVersion:
        return Err(UsageError(f"invalid version '{version}': not a PEP 440 version"))
    return Ok(version)


def publish_order(
    packages: Sequence[PackageDescriptor], *, dispatcher: str = DISPATCHER_PACKAGE
) -> list[PackageDescriptor]:
    """Every other package in the given order, then the dispatcher."""
    first = [p for p in packages if p.name != dispatcher]
    last = [p for p in packages if p.name == dispatcher]
    return first + last


def fetch_binaries(
    *,
    config: DistConfig,
    version: str,
    downloader: Downloader,
    extractor: Extractor,
    console: ConsoleProtocol,
    policy: RetryPolicy,
) -> Result[list[str], ReleaseError]:
    """Download and extract the binary of every platform package present.

    Stops at the first failure. The download directory is removed only once
    every target succeeded.
    """
    temp_dir = config.temp_dir
    temp_dir.mkdir(parents=True, exist_ok=True)

    fetched: list[str] = []
    for target in RELEASE_TARGETS:
        package_dir = config.packages_root / target.package
        if not package_dir.is_dir():
            continue

        asset = target.archive_name(version)
        console.print(f"  Downloading {asset}...")
        downloaded = fetch(
            downloader,
            version=version,
            asset_name=asset,
            dest_dir=temp_dir,
            policy=policy,
            console=console,
        )
        if isinstance(downloaded, Err):
            return downloaded

        console.print(f"  Extracting {target.binary_name}...")
        installed = install_target_binary(
            target,
            archive=downloaded.value,
            dest_dir=package_dir / target.import_name,
            extractor=extractor,
        )
        if isinstance(installed, Err):
            return installed
        fetched.append(target.package)

    try:
        shutil.rmtree(temp_dir)
    except OSError as e:
        console.warning(f"could not remove {temp_dir}: {e}")
    return Ok(fetched)


def publish_release(
    *,
    config: DistConfig,
    options: PublishOptions,
    downloader: Downloader,
    extractor: Extractor,
    publisher: Publisher,
    console: ConsoleProtocol,
    policy: RetryPolicy | None = None,
) -> Result[PublishReport, ReleaseError]:
    """Stamp, fetch and publish the whole package family at options.version."""
    version = options.version
    root = config.packages_root
    if policy is None:
        policy = RetryPolicy(config.download_attempts, config.download_retry_delay)

    console.header(f"Publishing version {version}{' (dry run)' if options.dry_run else ''}")

    packages = discover_packages(root)
    if not packages:
        return Err(DiscoveryFailure(root=root, reason="no package directory with a pyproject.toml"))
    if not any(p.name == DISPATCHER_PACKAGE for p in packages):
        return Err(
            DiscoveryFailure(root=root, reason=f"dispatcher package '{DISPATCHER_PACKAGE}' not found")
        )

    family = set(package_names())
    release_dirs = list(packages)
    if config.runtime_package is not None:
        # The dispatcher imports its launcher from this project
        runtime = load_descriptor(config.runtime_package, family=())
        if isinstance(runtime, Err):
            return Err(
                DiscoveryFailure(
                    root=config.runtime_package, reason=f"runtime package: {runtime.error}"
                )
            )
        family.add(runtime.value.name)
        release_dirs.append(config.runtime_package)

    console.header("Updating package versions...")
    stamped = stamp_all(release_dirs, version, family=family)
    if isinstance(stamped, Err):
        return stamped
    for descriptor in stamped.value:
        console.print(f"  Updated {descriptor.name}")

    fetched: list[str] = []
    if options.skip_download:
        console.print("Skipping binary download", Style.DIM)
    else:
        console.header("Downloading binaries from GitHub Release...")
        result = fetch_binaries(
            config=config,
            version=version,
            downloader=downloader,
            extractor=extractor,
            console=console,
            policy=policy,
        )
        if isinstance(result, Err):
            return result
        fetched = result.value

    console.header("Publishing packages...")
    published: list[str] = []
    for descriptor in publish_order(stamped.value):
        console.print(f"  Publishing {descriptor.name}...")
        outcome = publisher.publish(descriptor.directory, dry_run=options.dry_run)
        if isinstance(outcome, Err):
            return outcome
        published.append(descriptor.name)

    return Ok(
        PublishReport(
            version=version,
            dry_run=options.dry_run,
            stamped=tuple(d.name for d in stamped.value),
            fetched=tuple(fetched),
            published=tuple(published),
        )
    )
