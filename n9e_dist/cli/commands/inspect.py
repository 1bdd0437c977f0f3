from __future__ import annotations

import typer

from n9e_dist.core.result import Err
from n9e_dist.launcher.catalog import entries
from n9e_dist.launcher.resolver import resolve
from n9e_dist.output.console import RichConsole, Style
from n9e_dist.output.errors import launch_error_exit_code, print_launch_error
from n9e_dist.platform.detection import detect
from n9e_dist.release.targets import derive_target


def which() -> None:
    """Print the binary the dispatcher would run on this machine."""
    console = RichConsole()
    host = detect()
    resolved = resolve(host.os, host.arch)
    if isinstance(resolved, Err):
        print_launch_error(resolved.error, console)
        raise typer.Exit(code=launch_error_exit_code(resolved.error))
    typer.echo(str(resolved.value))


def targets(
    version: str = typer.Option("0.0.0", "--version", "-v", help="Version used in archive names"),
) -> None:
    """List supported platforms, their packages and release archives."""
    console = RichConsole()
    host = detect()
    for key, entry in entries():
        target = derive_target(key, entry)
        marker = "*" if key == host else " "
        console.print(
            f"{marker} {key.suffix:<13} {entry.package:<28} {entry.binary:<20} "
            f"{target.archive_name(version)}"
        )
    console.print("* this machine", Style.DIM)
