from __future__ import annotations

import typer

from n9e_dist import __version__
from n9e_dist.cli.commands.inspect import targets, which
from n9e_dist.cli.commands.publish import publish


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Release tooling for the n9e-mcp-server package family.",
)

app.command()(publish)
app.command()(which)
app.command()(targets)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False, "--version", is_eager=True, callback=_print_version, help="Show version and exit."
    ),
) -> None:
    del version


def main() -> None:
    app()
