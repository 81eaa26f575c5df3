"""facetsite search — query the built index from the terminal.

Loads the records written by ``facetsite build``, uses the prebuilt lunr
index when one exists (otherwise builds it in memory) and prints the
ranked hits.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from lunr.exceptions import QueryParseError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from facetsite.cli.errors import err_bad_query, err_config, err_index_invalid, err_index_not_found
from facetsite.config import ConfigError, load_config
from facetsite.indexer.search import build_index, search
from facetsite.indexer.writer import load_records

console = Console()

_DEFAULT_PROJECT_DIR = Path(".")


def search_cmd(
    query: Annotated[str, typer.Argument(help="lunr query, e.g. 'sleep' or 'title:sleep +toddler'.")],
    project_dir: Annotated[
        Path,
        typer.Option("--project-dir", "-C", help="Directory containing site.yaml."),
    ] = _DEFAULT_PROJECT_DIR,
    index: Annotated[
        Path | None,
        typer.Option("--index", help="Records file to search. Defaults to the build output."),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Maximum number of hits to show."),
    ] = 10,
) -> None:
    """Search the compiled index."""
    try:
        cfg = load_config(project_dir)
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)

    records_path = index if index is not None else cfg.index_path(project_dir)
    if not records_path.exists():
        console.print(err_index_not_found(records_path))
        raise typer.Exit(1)

    try:
        records = load_records(records_path)
    except ValueError as exc:
        console.print(err_index_invalid(records_path, str(exc)))
        raise typer.Exit(1)

    prebuilt_path = cfg.prebuilt_index_path(project_dir)
    try:
        if index is None and prebuilt_path.exists():
            lunr_index = json.loads(prebuilt_path.read_text(encoding="utf-8"))
        else:
            lunr_index = build_index(records, cfg.search)
    except ValueError as exc:
        console.print(err_index_invalid(prebuilt_path, str(exc)))
        raise typer.Exit(1)

    try:
        hits = search(lunr_index, records, query, limit=limit)
    except QueryParseError as exc:
        console.print(err_bad_query(query, str(exc)))
        raise typer.Exit(1)

    if not hits:
        console.print(f"[dim]No results for '{escape(query)}'.[/]")
        return

    table = Table(title=f"Results for '{escape(query)}'")
    table.add_column("Score", justify="right", style="dim")
    table.add_column("Title")
    table.add_column("URL")
    table.add_column("Section", style="dim")
    for hit in hits:
        table.add_row(
            f"{hit.score:.3f}",
            escape(str(hit.record.get("title", ""))),
            escape(hit.ref),
            str(hit.record.get("section", "")),
        )
    console.print(table)
