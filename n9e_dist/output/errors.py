"""Error presentation utilities.

Centralized error formatting and exit code mapping for the dispatcher and the
release CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from n9e_dist.core.errors import ErrorCode
from n9e_dist.launcher.catalog import DISPATCHER_PACKAGE
from n9e_dist.launcher.errors import (
    LaunchError,
    PackageNotFound,
    SpawnFailure,
    UnsupportedArchitecture,
    UnsupportedPlatform,
)
from n9e_dist.output.console import Style
from n9e_dist.release.errors import (
    DiscoveryFailure,
    DownloadExhausted,
    ExtractionFailure,
    PublishFailure,
    ReleaseError,
    StampFailure,
    UsageError,
)

if TYPE_CHECKING:
    from n9e_dist.output.console import ConsoleProtocol

__all__ = [
    "launch_error_exit_code",
    "print_launch_error",
    "print_release_error",
    "release_error_exit_code",
]

PUBLISH_USAGE = "usage: n9e-dist publish <version> [--dry-run] [--skip-download]"


def print_launch_error(error: LaunchError, console: ConsoleProtocol) -> None:
    """Print a dispatcher error."""
    match error:
        case UnsupportedPlatform(os=os):
            console.error(f"Unsupported platform: {os}")
        case UnsupportedArchitecture(os=os, arch=arch):
            console.error(f"Unsupported architecture: {arch} on {os}")
        case PackageNotFound(package=package, platform=platform, cause=cause):
            console.error(
                f"Could not find binary for {platform} (package {package}). "
                f"Please ensure {DISPATCHER_PACKAGE} is installed correctly."
            )
            console.print(f"Original error: {cause}", Style.DIM)
        case SpawnFailure(binary=binary, cause=cause):
            console.error(f"Failed to execute {binary}: {cause}")


def launch_error_exit_code(error: LaunchError) -> int:
    match error:
        case SpawnFailure():
            return int(ErrorCode.SPAWN_FAILED)
        case UnsupportedPlatform() | UnsupportedArchitecture() | PackageNotFound():
            return int(ErrorCode.FAILURE)


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a publish pipeline error with what the operator needs to act on it."""
    match error:
        case UsageError(message=message):
            console.error(message)
            console.print(PUBLISH_USAGE, Style.DIM)
        case DiscoveryFailure(root=root, reason=reason):
            console.error(f"{reason} (packages root: {root})")
        case StampFailure(package=package, reason=reason, stamped=stamped):
            console.error(f"Failed to update {package}: {reason}")
            if stamped:
                console.warning(
                    "manifests are inconsistent, already updated: " + ", ".join(stamped)
                )
            else:
                console.print("No manifest was modified.", Style.DIM)
        case DownloadExhausted(asset=asset, attempts=attempts, detail=detail):
            console.error(f"Failed to download {asset} after {attempts} attempts")
            if detail:
                console.print(f"last error: {detail}", Style.DIM)
        case ExtractionFailure(archive=archive, binary=binary, reason=reason):
            console.error(f"Failed to extract {binary} from {archive.name}: {reason}")
        case PublishFailure(package=package, detail=detail):
            console.error(f"Failed to publish {package}")
            if detail:
                console.print(detail, Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    # Every pipeline failure exits 1; the message tells them apart
    del error
    return int(ErrorCode.FAILURE)
