"""Persisted copy of the visitor's filter selection (local storage)."""

from __future__ import annotations

import json
import logging

from facetsite.facets import FilterSelection
from facetsite.runtime.dom import Storage

logger = logging.getLogger(__name__)

FILTERS_KEY = "repository-filters"


class FilterStore:
    """save / load / clear over one local storage key.

    ``load`` fails closed: anything that does not parse back into a
    selection is reported as absent.
    """

    def __init__(self, storage: Storage, key: str = FILTERS_KEY) -> None:
        self._storage = storage
        self._key = key

    def save(self, selection: FilterSelection) -> None:
        self._storage.set_item(self._key, json.dumps(selection.to_dict()))

    def load(self) -> FilterSelection | None:
        raw = self._storage.get_item(self._key)
        if not raw:
            return None
        try:
            return FilterSelection.from_dict(json.loads(raw))
        except ValueError as exc:  # JSONDecodeError is a ValueError
            logger.warning("Failed to load saved filters: %s", exc)
            return None

    def clear(self) -> None:
        self._storage.remove_item(self._key)
