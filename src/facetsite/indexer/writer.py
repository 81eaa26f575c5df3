"""Index output: where the build writes, and how.

The records file and the prebuilt lunr index both land in ``output.dir``.
A relative ``output.dir`` is resolved against the project directory and
may not climb out of it; an absolute one is taken as given. Files are
replaced in one step, so a site serving ``search-index.json`` never picks
up a partial array mid-build.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from facetsite.content.models import IndexRecord


# ------------------------------------------------------------------
# Output directory
# ------------------------------------------------------------------


def resolve_output_dir(output_dir: str, project_dir: Path) -> Path:
    """Return the absolute build output directory for *output_dir*.

    Raises:
        ValueError: If a relative *output_dir* resolves outside *project_dir*.
    """
    target = Path(output_dir)
    if target.is_absolute():
        return target.resolve()

    root = project_dir.resolve()
    resolved = (root / target).resolve()
    if resolved != root and root not in resolved.parents:
        raise ValueError(f"Output directory '{output_dir}' is outside the project ('{root}')")
    return resolved


# ------------------------------------------------------------------
# Records file
# ------------------------------------------------------------------


def records_to_json(records: list[IndexRecord]) -> str:
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2)


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read a records file written by write_index().

    Raises:
        OSError: If the file cannot be read.
        ValueError: If it is not a JSON array of objects.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise ValueError(f"'{path}' is not a search index (expected a JSON array of records)")
    return data


def write_atomic(path: Path, text: str) -> None:
    """Replace *path* with *text* in one rename; parents are created."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    )
    try:
        with tmp:
            tmp.write(text)
        os.replace(tmp.name, path)
    except BaseException:
        os.unlink(tmp.name)
        raise


def write_index(records: list[IndexRecord], path: Path) -> None:
    write_atomic(path, records_to_json(records))
