"""Content document loader: YAML front matter + Markdown body.

A document looks like:

    ---
    title: Sleep routines for toddlers
    tags: [sleep, routines]
    category: guides
    audience: [parent]
    evidenceLevel: high
    ageRange: [0-2, 2-5]
    ---
    Body text…

Only ``title`` is required in the front matter. The URL comes from
``permalink`` when present, otherwise from the document's path relative to
the content directory. ``permalink: false`` marks a document that is not
published and therefore has no URL, which is an error for indexing.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from facetsite.content.models import ContentItem

# Front matter block at the very start of the file.
_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


class ContentError(ValueError):
    """A single content document cannot be indexed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def split_front_matter(text: str) -> tuple[str, str]:
    """Return ``(front_matter_yaml, body)``; front matter is ``""`` if absent."""
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return "", text
    return match.group(1), text[match.end():]


def url_for(relative: PurePosixPath, path_prefix: str = "") -> str:
    """Derive the pretty URL of a document from its content-relative path.

    ``guides/sleep.md`` → ``/guides/sleep/``; ``guides/index.md`` → ``/guides/``.
    """
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    path = "/" + "/".join(parts) + "/" if parts else "/"
    return join_prefix(path_prefix, path)


def join_prefix(path_prefix: str, url: str) -> str:
    if not path_prefix or not url.startswith("/"):
        return url
    return path_prefix.rstrip("/") + url


def _as_list(value: Any, field_name: str, path: Path) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (str, int, float)):
        return [str(value)]
    if isinstance(value, list):
        return [str(v) for v in value if v is not None and v != ""]
    raise ContentError(path, f"'{field_name}' must be a string or a list, got {type(value).__name__}")


def _category(value: Any, path: Path) -> str | list[str]:
    if value is None:
        return ""
    if isinstance(value, list):
        return [str(v) for v in value]
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ContentError(path, f"'category' must be a string or a list, got {type(value).__name__}")


def load_document(
    path: Path,
    content_dir: Path,
    group: str,
    *,
    path_prefix: str = "",
) -> ContentItem:
    """Parse a single content document.

    Args:
        path: Path to the Markdown file.
        content_dir: Root the URL is derived relative to.
        group: Id of the content group that selected the file.
        path_prefix: URL prefix joined onto the document URL.

    Returns:
        ContentItem with defaults for every optional field.

    Raises:
        ContentError: If the file cannot be read or decoded, the front matter
            is not a YAML mapping, or ``title`` / the URL is missing.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentError(path, f"cannot read file ({exc})") from exc

    raw_meta, body = split_front_matter(text)
    try:
        meta = yaml.safe_load(raw_meta) if raw_meta.strip() else {}
    except yaml.YAMLError as exc:
        raise ContentError(path, f"invalid front matter ({exc})") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ContentError(path, "front matter must be a mapping")

    title = meta.get("title")
    if title is None or not str(title).strip():
        raise ContentError(path, "missing required field 'title'")

    permalink = meta.get("permalink")
    if permalink is False or (permalink is not None and not str(permalink).strip()):
        raise ContentError(path, "missing required field 'url' (permalink is disabled)")
    if permalink is not None:
        url = join_prefix(path_prefix, str(permalink).strip())
    else:
        relative = PurePosixPath(path.relative_to(content_dir).as_posix())
        url = url_for(relative, path_prefix)

    return ContentItem(
        title=str(title).strip(),
        url=url,
        group=group,
        path=path,
        body=body,
        tags=_as_list(meta.get("tags"), "tags", path),
        category=_category(meta.get("category"), path),
        audience=_as_list(meta.get("audience"), "audience", path),
        evidence_level=_as_list(meta.get("evidenceLevel"), "evidenceLevel", path),
        age_range=_as_list(meta.get("ageRange"), "ageRange", path),
    )
