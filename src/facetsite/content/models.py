"""Domain models for published content and the search index."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from facetsite.facets import AGE_RANGE, AUDIENCE, EVIDENCE_LEVEL


@dataclass(frozen=True)
class ContentItem:
    title: str
    url: str
    group: str
    path: Path
    body: str = ""
    tags: list[str] = field(default_factory=list)
    category: str | list[str] = ""
    audience: list[str] = field(default_factory=list)
    evidence_level: list[str] = field(default_factory=list)
    age_range: list[str] = field(default_factory=list)

    def facet_values(self) -> dict[str, list[str]]:
        """Values per facet name, the shape ``facets.evaluate`` expects."""
        return {
            AUDIENCE.name: self.audience,
            EVIDENCE_LEVEL.name: self.evidence_level,
            AGE_RANGE.name: self.age_range,
        }

    def in_category(self, category: str) -> bool:
        if not category:
            return False
        if isinstance(self.category, list):
            return category in self.category
        return self.category == category


@dataclass(frozen=True)
class IndexRecord:
    """One entry of the search index handed to lunr.

    The field set and names are a stable contract with the search page.
    """

    title: str
    content: str
    url: str
    tags: list[str]
    category: str | list[str]
    audience: list[str]
    section: str

    @classmethod
    def from_item(cls, item: ContentItem) -> IndexRecord:
        return cls(
            title=item.title,
            content=item.body,
            url=item.url,
            tags=list(item.tags),
            category=list(item.category) if isinstance(item.category, list) else item.category,
            audience=list(item.audience),
            section=item.group,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "url": self.url,
            "tags": self.tags,
            "category": self.category,
            "audience": self.audience,
            "section": self.section,
        }


def items_in_category(items: list[ContentItem], category: str) -> list[ContentItem]:
    """Return the items filed under *category*, in their original order."""
    return [item for item in items if item.in_category(category)]
