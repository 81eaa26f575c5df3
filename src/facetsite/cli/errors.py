"""facetsite rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from facetsite.cli.errors import err_content_defects
    console.print(err_content_defects(result.errors))
    raise typer.Exit(1)
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from facetsite.content.loader import ContentError


def err_config(message: str) -> str:
    """site.yaml could not be loaded."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {escape(message)}\n"
        "  Fix site.yaml and run the command again."
    )


def err_no_content_dir(path: Path) -> str:
    """Configured content directory does not exist."""
    return (
        f"[red]Error:[/] Content directory not found: '{escape(str(path))}'\n"
        "  Create it, or point content.dir in site.yaml at your documents:\n"
        "    content:\n"
        "      dir: content"
    )


def err_content_defects(errors: list[ContentError]) -> str:
    """One or more documents could not be indexed."""
    lines = "\n".join(f"    {escape(str(e.path))}: {escape(e.reason)}" for e in errors)
    return (
        f"[red]Error:[/] {len(errors)} document(s) could not be indexed:\n"
        f"{lines}\n"
        "  Fix the front matter above (every document needs a title and a URL),\n"
        "  or run with --keep-going to write the index without them."
    )


def warn_content_defects(errors: list[ContentError]) -> str:
    """--keep-going: documents left out of the index."""
    lines = "\n".join(f"    {escape(str(e.path))}: {escape(e.reason)}" for e in errors)
    return (
        f"[yellow]⚠[/] {len(errors)} document(s) left out of the index:\n"
        f"{lines}"
    )


def warn_empty_group(group_id: str, pattern: str) -> str:
    return (
        f"[yellow]⚠[/] Content group '{escape(group_id)}' matched no documents ({escape(pattern)}).\n"
        "  Check the group's glob in site.yaml."
    )


def err_output_path_unsafe(path: str) -> str:
    """Output directory fails security validation."""
    return (
        f"[red]Error:[/] Output path is not allowed: '{escape(path)}'\n"
        "  Use a path within the project directory."
    )


def err_index_not_found(path: Path) -> str:
    """search run before build."""
    return (
        f"[red]Error:[/] No search index found at '{escape(str(path))}'.\n"
        "  Run:  facetsite build"
    )


def err_index_invalid(path: Path, reason: str) -> str:
    return (
        f"[red]Error:[/] Search index '{escape(str(path))}' cannot be read: {escape(reason)}\n"
        "  Rebuild it:  facetsite build"
    )


def err_bad_query(query: str, reason: str) -> str:
    return (
        f"[red]Error:[/] Invalid search query '{escape(query)}': {escape(reason)}\n"
        "  Quote terms, and use field:term or +required / -excluded syntax."
    )
