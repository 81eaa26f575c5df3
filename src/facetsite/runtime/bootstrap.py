"""Page-load entry point: wires every runtime feature present on the page.

Each feature looks up its own elements and does nothing when they are
missing, so a page without a filter panel still gets navigation, theme
and scroll restoration.
"""

from __future__ import annotations

from facetsite.runtime.dom import Element, Page, Window
from facetsite.runtime.filter_store import FilterStore
from facetsite.runtime.filters import FilterElements, init_filters
from facetsite.runtime.modal import ModalElements, init_policy_modal
from facetsite.runtime.navigation import NavElements, init_navigation, init_section_context
from facetsite.runtime.theme import ThemeContext, init_theme

SITE_HEADER_CLASS = "site-header"
HEADER_HEIGHT_PROPERTY = "--header-height"


def init_header_height(header: Element | None, root: Element, window: Window) -> None:
    """Expose the header height as a CSS custom property, kept fresh on resize."""
    if header is None:
        return

    def _set_header_height(event=None) -> None:
        root.style[HEADER_HEIGHT_PROPERTY] = f"{header.offset_height}px"

    _set_header_height()
    window.add_event_listener("resize", _set_header_height)


def init_page(page: Page) -> None:
    init_theme(ThemeContext.from_page(page))

    headers = page.query_class(SITE_HEADER_CLASS)
    init_header_height(headers[0] if headers else None, page.document, page.window)

    init_navigation(NavElements.from_page(page), page.local_storage)
    init_section_context(page)
    init_policy_modal(ModalElements.from_page(page), page.document, page.body)
    init_filters(FilterElements.from_page(page), FilterStore(page.local_storage), page.location)
