"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from facetsite.runtime.dom import Checkbox, Element, Location, MediaQueryList, Page, Window


def _write_doc(root: Path, relative: str, front: dict | None = None, body: str = "Body text.\n") -> Path:
    """Write a Markdown document with YAML front matter under *root*."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    if front is None:
        path.write_text(body, encoding="utf-8")
    else:
        path.write_text(f"---\n{yaml.safe_dump(front, sort_keys=False)}---\n{body}", encoding="utf-8")
    return path


def _listing_body(items: list[dict[str, str]] | None = None) -> Element:
    """A listing page: filter panel, three facets of controls, content items."""
    controls = [
        Checkbox("audience", "parent"),
        Checkbox("audience", "clinician"),
        Checkbox("evidenceLevel", "high"),
        Checkbox("evidenceLevel", "moderate"),
        Checkbox("ageRange", "0-2"),
        Checkbox("ageRange", "2-5"),
    ]
    options = [Element(tag="label", classes=["filter-option"], children=[c]) for c in controls]
    panel = Element("filter-panel", hidden=True, children=[
        *options,
        Element("filter-close", tag="button"),
        Element("apply-filters", tag="button"),
        Element("clear-filters", tag="button"),
    ])
    entries = [
        Element(
            f"item-{i}",
            tag="article",
            dataset={"contentItem": "", **data},
        )
        for i, data in enumerate(items or [])
    ]
    main = Element(classes=["main-content", "section-page"], children=entries)
    return Element(tag="body", children=[Element("filter-toggle", tag="button"), panel, main])


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    d = tmp_path / "content"
    d.mkdir()
    return d


@pytest.fixture
def os_dark() -> MediaQueryList:
    return MediaQueryList("(prefers-color-scheme: dark)", matches=False)


@pytest.fixture
def make_page(os_dark: MediaQueryList):
    """Factory: ``make_page(href, body)`` → Page with an OS dark-mode query."""

    def _make(href: str = "/guides/", body: Element | None = None) -> Page:
        return Page(
            location=Location(href),
            window=Window(media=[os_dark]),
            body=body if body is not None else Element(tag="body"),
        )

    return _make


@pytest.fixture
def write_doc():
    """``write_doc(root, relative, front, body)`` → path of the written document."""
    return _write_doc


@pytest.fixture
def listing_body():
    """``listing_body(items)`` → body element of a filterable listing page."""
    return _listing_body
