"""lunr bridge: build, serialize and query the full-text index.

Ranking is entirely lunr's; this module only shapes the records lunr
indexes and maps its results back onto them. Records are keyed by URL,
which the compiler guarantees to be unique.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from lunr import lunr
from lunr.index import Index

from facetsite.config import SearchCfg

logger = logging.getLogger(__name__)

_REF_FIELD = "url"
_RECORD_FIELDS: frozenset[str] = frozenset(
    ["title", "content", "url", "tags", "category", "audience", "section"]
)


@dataclass
class SearchHit:
    ref: str
    score: float
    record: Mapping[str, Any]


def _field_specs(cfg: SearchCfg) -> list[Any]:
    unknown = [f for f in cfg.fields if f not in _RECORD_FIELDS]
    if unknown:
        raise ValueError(
            f"Unknown search field(s): {', '.join(unknown)}. "
            f"Choose from: {', '.join(sorted(_RECORD_FIELDS))}"
        )
    specs: list[Any] = []
    for name in cfg.fields:
        if name == "title" and cfg.title_boost != 1:
            specs.append({"field_name": name, "boost": cfg.title_boost})
        else:
            specs.append(name)
    return specs


def build_index(records: Sequence[Mapping[str, Any]], cfg: SearchCfg) -> Index:
    """Hand *records* to lunr and return the built index."""
    documents = [dict(r) for r in records]
    logger.debug("Building lunr index over %d record(s), fields=%s", len(documents), cfg.fields)
    return lunr(ref=_REF_FIELD, fields=_field_specs(cfg), documents=documents)


def build_search_index(records: Sequence[Mapping[str, Any]], cfg: SearchCfg) -> dict[str, Any]:
    """Return the serialized lunr index, ready to be written as JSON."""
    return build_index(records, cfg).serialize()


def search(
    index: Index | Mapping[str, Any],
    records: Sequence[Mapping[str, Any]],
    query: str,
    limit: int | None = None,
) -> list[SearchHit]:
    """Query *index* and return hits joined with their records.

    *index* may be a built lunr Index or its serialized form. Hits whose ref
    has no record (a stale prebuilt index) are dropped with a warning.

    Raises:
        lunr.exceptions.QueryParseError: If *query* is not valid lunr syntax.
    """
    if not isinstance(index, Index):
        index = Index.load(dict(index))

    by_url = {r[_REF_FIELD]: r for r in records}
    hits: list[SearchHit] = []
    for result in index.search(query):
        record = by_url.get(result["ref"])
        if record is None:
            logger.warning("Search result '%s' has no matching record; index may be stale", result["ref"])
            continue
        hits.append(SearchHit(ref=result["ref"], score=float(result["score"]), record=record))
        if limit is not None and len(hits) >= limit:
            break
    return hits
