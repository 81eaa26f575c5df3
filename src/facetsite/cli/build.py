"""facetsite build — compile content groups into the search index.

Reads ``site.yaml`` (content groups, output location, search options) and
writes ``<output.dir>/<output.index>``: a JSON array of
``{title, content, url, tags, category, audience, section}`` records. With
``search.prebuild`` (or --prebuild) also writes the serialized lunr index.

Documents that cannot be indexed fail the build unless --keep-going is
given, in which case they are left out and listed as warnings.

Usage:
  facetsite build
  facetsite build --dry-run
  facetsite build --output-dir public --keep-going
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from facetsite.cli.errors import (
    err_config,
    err_content_defects,
    err_no_content_dir,
    err_output_path_unsafe,
    warn_content_defects,
    warn_empty_group,
)
from facetsite.config import ConfigError, FacetsiteConfig, load_config
from facetsite.indexer.compiler import IndexResult, compile_index
from facetsite.indexer.search import build_search_index
from facetsite.indexer.writer import resolve_output_dir, write_atomic, write_index

console = Console()

_DEFAULT_PROJECT_DIR = Path(".")


def build_cmd(
    project_dir: Annotated[
        Path,
        typer.Option("--project-dir", "-C", help="Directory containing site.yaml and the content directory."),
    ] = _DEFAULT_PROJECT_DIR,
    output_dir: Annotated[
        str | None,
        typer.Option("--output-dir", "-o", help="Output directory. Overrides output.dir in site.yaml."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Scan and validate content, print the plan, write nothing."),
    ] = False,
    keep_going: Annotated[
        bool,
        typer.Option("--keep-going", help="Write the index even if some documents cannot be indexed."),
    ] = False,
    prebuild: Annotated[
        bool | None,
        typer.Option("--prebuild/--no-prebuild", help="Also write a serialized lunr index. Overrides search.prebuild."),
    ] = None,
) -> None:
    """Compile configured content groups into the search index."""

    # ---- Config ----
    try:
        cfg = load_config(project_dir)
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)

    if output_dir is not None:
        cfg.output.dir = output_dir
    if prebuild is not None:
        cfg.search.prebuild = prebuild

    content_dir = cfg.content_dir(project_dir)
    if not content_dir.is_dir():
        console.print(err_no_content_dir(content_dir))
        raise typer.Exit(1)

    # ---- Compile ----
    result = compile_index(cfg.content.groups, content_dir, path_prefix=cfg.site.path_prefix)
    for group in cfg.content.groups:
        if result.matched.get(group.id, 0) == 0:
            console.print(warn_empty_group(group.id, group.glob))

    if dry_run:
        _show_plan(cfg, result)
        if result.errors:
            console.print(err_content_defects(result.errors))
            raise typer.Exit(1)
        return

    if result.errors:
        if not keep_going:
            console.print(err_content_defects(result.errors))
            raise typer.Exit(1)
        console.print(warn_content_defects(result.errors))

    # ---- Write ----
    try:
        out_dir = resolve_output_dir(cfg.output.dir, project_dir)
    except ValueError:
        console.print(err_output_path_unsafe(cfg.output.dir))
        raise typer.Exit(1)

    records = result.records
    serialized = None
    if cfg.search.prebuild:
        try:
            serialized = build_search_index([r.to_dict() for r in records], cfg.search)
        except ValueError as exc:
            console.print(err_config(str(exc)))
            raise typer.Exit(1)

    index_path = out_dir / cfg.output.index
    write_index(records, index_path)
    console.print(f"[bold green]✓[/] {len(records)} record(s) written to [bold]{index_path}[/]")

    if serialized is not None:
        lunr_path = out_dir / cfg.search.prebuilt_index
        write_atomic(lunr_path, json.dumps(serialized))
        console.print(f"[bold green]✓[/] Prebuilt lunr index written to [bold]{lunr_path}[/]")


def _show_plan(cfg: FacetsiteConfig, result: IndexResult) -> None:
    table = Table(title="Index plan")
    table.add_column("#", style="dim")
    table.add_column("Group")
    table.add_column("Glob", style="dim")
    table.add_column("Matched", justify="right")
    table.add_column("Indexed", justify="right")

    for i, group in enumerate(cfg.content.groups, start=1):
        table.add_row(
            str(i),
            group.id,
            group.glob,
            str(result.matched.get(group.id, 0)),
            str(len(result.items_in_group(group.id))),
        )

    console.print(table)
    console.print(f"  Output: {Path(cfg.output.dir) / cfg.output.index}")
    if cfg.search.prebuild:
        console.print(f"  Prebuilt index: {Path(cfg.output.dir) / cfg.search.prebuilt_index}")
    console.print("[dim]Dry run — nothing written.[/]")
