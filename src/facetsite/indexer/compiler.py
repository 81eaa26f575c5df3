"""Search index compiler.

Scans every configured content group, in declaration order, and projects
each document onto an IndexRecord. Within a group, documents follow
directory order (sorted relative path).

A broken document never aborts the scan: it is reported as a ContentError
naming its path and left out of the records. URLs must be unique across
the whole build; the first document to claim a URL keeps it.

Usage:
    result = compile_index(cfg.content.groups, Path("content"))
    if result.errors:
        ...
    write_index(result.records, Path("_site/search-index.json"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from facetsite.config import GroupCfg
from facetsite.content.loader import ContentError, load_document
from facetsite.content.models import ContentItem, IndexRecord

logger = logging.getLogger(__name__)


@dataclass
class IndexResult:
    items: list[ContentItem] = field(default_factory=list)
    errors: list[ContentError] = field(default_factory=list)
    # group id → number of documents the glob matched (valid or not)
    matched: dict[str, int] = field(default_factory=dict)

    @property
    def records(self) -> list[IndexRecord]:
        return [IndexRecord.from_item(item) for item in self.items]

    @property
    def ok(self) -> bool:
        return not self.errors

    def items_in_group(self, group_id: str) -> list[ContentItem]:
        return [item for item in self.items if item.group == group_id]


def collect_group(content_dir: Path, group: GroupCfg) -> list[Path]:
    """Return the files *group* selects, in directory order."""
    return sorted(p for p in content_dir.glob(group.glob) if p.is_file())


def compile_index(
    groups: list[GroupCfg],
    content_dir: Path,
    *,
    path_prefix: str = "",
) -> IndexResult:
    """Compile every group's documents into an IndexResult.

    Args:
        groups: Content groups in declaration order.
        content_dir: Directory the group globs are relative to.
        path_prefix: URL prefix joined onto every document URL.

    Returns:
        IndexResult with the valid items in output order and one
        ContentError per document that could not be indexed.
    """
    result = IndexResult()
    seen_urls: dict[str, Path] = {}

    for group in groups:
        paths = collect_group(content_dir, group)
        result.matched[group.id] = len(paths)
        if not paths:
            logger.info("Content group '%s' matched no documents (%s)", group.id, group.glob)
            continue

        for path in paths:
            try:
                item = load_document(path, content_dir, group.id, path_prefix=path_prefix)
            except ContentError as exc:
                logger.debug("Skipping %s: %s", path, exc.reason)
                result.errors.append(exc)
                continue

            if item.url in seen_urls:
                result.errors.append(
                    ContentError(path, f"URL '{item.url}' is already used by {seen_urls[item.url]}")
                )
                continue

            seen_urls[item.url] = path
            result.items.append(item)

        logger.info("Indexed group '%s': %d document(s)", group.id, len(result.items_in_group(group.id)))

    return result
