"""Facet definitions, filter selections and the visibility predicate.

A *facet* is one independent filter dimension. Selections compose with
AND across facets and OR within a facet: an item passes a facet when it
carries at least one of the selected values, and a facet with nothing
selected imposes no constraint.

A selection has two serialized forms that must stay equal after an
apply: the JSON mapping persisted under ``repository-filters`` (keyed by
facet name) and the URL query string (keyed by the shorter query
parameter, values joined with ``,``).

Usage:
    selection = FilterSelection.from_query("audience=parent&age=0-2")
    visible = evaluate({"audience": ["parent", "clinician"]}, selection)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping
from urllib.parse import parse_qsl, urlencode

VALUE_DELIMITER = ","


@dataclass(frozen=True)
class Facet:
    name: str          # key in the persisted JSON and on the filter controls
    param: str         # URL query parameter
    label: str         # shown in the active-filter banner
    data_attr: str     # data-* attribute on rendered content items


AUDIENCE = Facet(name="audience", param="audience", label="Audience", data_attr="audience")
EVIDENCE_LEVEL = Facet(name="evidenceLevel", param="evidence", label="Evidence", data_attr="evidence")
AGE_RANGE = Facet(name="ageRange", param="age", label="Age", data_attr="age")

FACETS: tuple[Facet, ...] = (AUDIENCE, EVIDENCE_LEVEL, AGE_RANGE)
FACETS_BY_NAME: dict[str, Facet] = {f.name: f for f in FACETS}


def split_values(raw: str | None) -> list[str]:
    """Split a delimiter-joined value list; empty segments are dropped."""
    if not raw:
        return []
    return [v for v in (part.strip() for part in raw.split(VALUE_DELIMITER)) if v]


class FilterSelection:
    """Selected values per facet.

    Values keep their selection order for display and serialization, but
    equality ignores order and duplicates.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Iterable[str]] | None = None) -> None:
        self._values: dict[str, tuple[str, ...]] = {f.name: () for f in FACETS}
        for name, selected in (values or {}).items():
            if name not in FACETS_BY_NAME:
                raise KeyError(f"Unknown facet '{name}'")
            self._values[name] = tuple(dict.fromkeys(selected))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get(self, facet: Facet | str) -> tuple[str, ...]:
        name = facet.name if isinstance(facet, Facet) else facet
        return self._values[name]

    @property
    def is_empty(self) -> bool:
        return not any(self._values.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterSelection):
            return NotImplemented
        return all(set(self.get(f)) == set(other.get(f)) for f in FACETS)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={list(v)!r}" for name, v in self._values.items())
        return f"FilterSelection({inner})"

    # ------------------------------------------------------------------
    # Persisted form
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, list[str]]:
        """Return the persisted shape: every facet present, possibly empty."""
        return {name: list(values) for name, values in self._values.items()}

    @classmethod
    def from_dict(cls, data: Any) -> FilterSelection:
        """Build a selection from persisted data.

        Missing facets are empty; unknown keys are ignored.

        Raises:
            ValueError: If *data* is not a mapping of facet name to a list
                of strings.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")
        values: dict[str, list[str]] = {}
        for facet in FACETS:
            raw = data.get(facet.name, [])
            if raw is None:
                raw = []
            if not isinstance(raw, list) or not all(isinstance(v, str) for v in raw):
                raise ValueError(f"'{facet.name}' must be a list of strings")
            values[facet.name] = raw
        return cls(values)

    # ------------------------------------------------------------------
    # URL form
    # ------------------------------------------------------------------

    def to_query(self) -> str:
        """Encode non-empty facets; an empty selection yields ``""``."""
        pairs = [
            (f.param, VALUE_DELIMITER.join(self._values[f.name]))
            for f in FACETS
            if self._values[f.name]
        ]
        return urlencode(pairs)

    @classmethod
    def from_query(cls, query: str) -> FilterSelection:
        """Decode a query string (with or without leading ``?``).

        Unrelated parameters are ignored. For a repeated parameter the first
        occurrence wins.
        """
        params: dict[str, str] = {}
        for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
            params.setdefault(key, value)
        return cls({f.name: split_values(params.get(f.param)) for f in FACETS})


def item_matches_facet(item_values: Iterable[str], selected: Iterable[str]) -> bool:
    """OR within a facet; an empty selection always matches."""
    wanted = set(selected)
    if not wanted:
        return True
    return not wanted.isdisjoint(item_values)


def evaluate(item: Mapping[str, Iterable[str]], selection: FilterSelection) -> bool:
    """Return True if *item* is visible under *selection*.

    *item* maps facet names to the item's values for that facet; a missing
    facet means the item carries no values for it.
    """
    return all(
        item_matches_facet(item.get(f.name, ()), selection.get(f))
        for f in FACETS
    )


def describe(selection: FilterSelection) -> str:
    """Human-readable summary, e.g. ``Audience: parent | Age: 0-2``."""
    parts = [
        f"{f.label}: {', '.join(selection.get(f))}"
        for f in FACETS
        if selection.get(f)
    ]
    return " | ".join(parts)
