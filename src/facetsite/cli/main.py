"""facetsite CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from facetsite.cli.build import build_cmd
from facetsite.cli.search import search_cmd


def _version() -> str:
    try:
        return importlib.metadata.version("facetsite")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"facetsite {_version()}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    root = logging.getLogger("facetsite")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # Re-invocations (tests, REPL) must not stack handlers.
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.addHandler(RichHandler(console=Console(stderr=True), show_path=False, markup=False))


app = typer.Typer(
    name="facetsite",
    help=(
        "facetsite — search index compiler for static content sites.\n\n"
        "  facetsite build   Compile content groups into the search index.\n"
        "  facetsite search  Query the compiled index."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log per-document progress."),
    ] = False,
) -> None:
    """facetsite — search index compiler for static content sites."""
    _setup_logging(verbose)


app.command("build")(build_cmd)
app.command("search")(search_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed facetsite version."""
    typer.echo(f"facetsite {_version()}")


if __name__ == "__main__":
    app()
