"""Site navigation state: collapsible nav panel and section scroll context.

Section context lifecycle (session storage, one context at a time):

  Empty ──entry link click──▶ Pending ──origin listing reloaded──▶ Empty
                                 │
                                 └─ detail page shows "← Back to …"; following
                                    it does not clear the context. The origin
                                    listing clears it when it restores scroll.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field

from facetsite.runtime.dom import Element, Location, Page, Storage, Window

logger = logging.getLogger(__name__)

NAV_STATE_KEY = "site-nav-collapsed"
SECTION_CONTEXT_KEY = "section-context"

NAV_TOGGLE_ID = "nav-toggle"
SITE_NAV_ID = "site-nav"
NAV_PANEL_ID = "site-nav-panel"
NAV_TOGGLE_LABEL_CLASS = "nav-toggle-label"
NAV_LINK_CLASS = "nav-link"
QUICK_LINKS_CLASS = "quick-links"
SECTION_ENTRY_LINK_CLASS = "section-entry-link"
SECTION_PAGE_CLASS = "section-page"
BACK_LINK_ID = "section-back-link"
BACK_BUTTON_ID = "section-back-button"

NAV_LABEL_COLLAPSED = "Show Menu"
NAV_LABEL_EXPANDED = "Hide Menu"


# ---------------------------------------------------------------------------
# Collapsible navigation
# ---------------------------------------------------------------------------


@dataclass
class NavElements:
    toggle: Element | None = None
    nav: Element | None = None
    panel: Element | None = None
    label: Element | None = None
    links: list[Element] = field(default_factory=list)

    @classmethod
    def from_page(cls, page: Page) -> NavElements:
        toggle = page.get_element_by_id(NAV_TOGGLE_ID)
        nav = page.get_element_by_id(SITE_NAV_ID)
        links: list[Element] = []
        if nav is not None:
            for el in nav.iter_descendants():
                if el.has_class(NAV_LINK_CLASS):
                    links.append(el)
                elif el.has_class(QUICK_LINKS_CLASS):
                    links.extend(a for a in el.iter_descendants() if a.tag == "a")
        return cls(
            toggle=toggle,
            nav=nav,
            panel=page.get_element_by_id(NAV_PANEL_ID),
            label=toggle.find_class(NAV_TOGGLE_LABEL_CLASS) if toggle is not None else None,
            links=list(dict.fromkeys(links)),
        )


def set_nav_collapsed(elements: NavElements, storage: Storage, collapsed: bool) -> None:
    nav, toggle = elements.nav, elements.toggle
    if nav is None or toggle is None:
        return
    nav.toggle_class("collapsed", collapsed)
    toggle.set_attribute("aria-expanded", str(not collapsed).lower())
    toggle.set_attribute("aria-label", "Expand navigation" if collapsed else "Collapse navigation")
    toggle.toggle_class("is-expanded", not collapsed)
    if elements.label is not None:
        elements.label.text_content = NAV_LABEL_COLLAPSED if collapsed else NAV_LABEL_EXPANDED
    storage.set_item(NAV_STATE_KEY, str(collapsed).lower())


def init_navigation(elements: NavElements, storage: Storage) -> None:
    """Restore the persisted collapse state and wire toggle + link clicks."""
    if elements.toggle is None or elements.nav is None or elements.panel is None:
        return
    nav = elements.nav

    set_nav_collapsed(elements, storage, storage.get_item(NAV_STATE_KEY) == "true")

    elements.toggle.add_event_listener(
        "click", lambda event: set_nav_collapsed(elements, storage, not nav.has_class("collapsed"))
    )

    def _collapse_on_follow(event) -> None:
        if event.is_modified:
            return
        set_nav_collapsed(elements, storage, True)

    for link in elements.links:
        link.add_event_listener("click", _collapse_on_follow)


# ---------------------------------------------------------------------------
# Section context
# ---------------------------------------------------------------------------


@dataclass
class SectionContext:
    section_id: str | None
    section_title: str | None
    section_url: str | None
    scroll_position: int = 0

    def to_json(self) -> str:
        return json.dumps({
            "sectionId": self.section_id,
            "sectionTitle": self.section_title,
            "sectionUrl": self.section_url,
            "scrollPosition": self.scroll_position,
        })

    @classmethod
    def from_json(cls, raw: str) -> SectionContext:
        """Raises ValueError on anything but a JSON object."""
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        scroll = data.get("scrollPosition") or 0
        if not isinstance(scroll, (int, float)) or not math.isfinite(scroll):
            raise ValueError(f"scrollPosition must be a finite number, got {scroll!r}")
        return cls(
            section_id=data.get("sectionId"),
            section_title=data.get("sectionTitle"),
            section_url=data.get("sectionUrl"),
            scroll_position=int(scroll),
        )


class SectionContextStore:
    def __init__(self, storage: Storage, key: str = SECTION_CONTEXT_KEY) -> None:
        self._storage = storage
        self._key = key

    def save(self, context: SectionContext) -> None:
        self._storage.set_item(self._key, context.to_json())

    def load(self) -> SectionContext | None:
        raw = self._storage.get_item(self._key)
        if not raw:
            return None
        try:
            return SectionContext.from_json(raw)
        except ValueError as exc:
            logger.error("Failed to read section context: %s", exc)
            return None

    def clear(self) -> None:
        self._storage.remove_item(self._key)


def setup_section_links(
    links: list[Element],
    store: SectionContextStore,
    location: Location,
    window: Window,
) -> None:
    """Record where the visitor came from when they open an entry."""
    for link in links:
        def _remember(event, link=link) -> None:
            store.save(SectionContext(
                section_id=link.dataset.get("section"),
                section_title=link.dataset.get("sectionTitle"),
                section_url=location.pathname,
                scroll_position=window.scroll_y,
            ))

        link.add_event_listener("click", _remember)


def restore_section_scroll(
    is_section_page: bool,
    store: SectionContextStore,
    location: Location,
    window: Window,
) -> bool:
    """On the origin listing, scroll back and consume the context.

    Returns True if the scroll position was restored.
    """
    if not is_section_page:
        return False
    context = store.load()
    if context is None or context.section_url != location.pathname:
        return False
    window.scroll_to(context.scroll_position)
    store.clear()
    return True


def setup_back_link(
    wrapper: Element | None,
    button: Element | None,
    store: SectionContextStore,
    location: Location,
) -> bool:
    """Offer a way back to the listing the visitor came from.

    The context is left in place; only the origin listing consumes it.
    Returns True if the back link was shown.
    """
    if wrapper is None or button is None:
        return False
    context = store.load()
    if context is None or not context.section_url:
        return False

    target = context.section_url
    wrapper.hidden = False
    button.text_content = f"← Back to {context.section_title or 'section'}"

    def _go_back(event) -> None:
        event.prevent_default()
        location.assign(target)

    button.add_event_listener("click", _go_back)
    return True


def init_section_context(page: Page) -> None:
    store = SectionContextStore(page.session_storage)
    links = page.query_class(SECTION_ENTRY_LINK_CLASS)
    if links:
        setup_section_links(links, store, page.location, page.window)
    restore_section_scroll(bool(page.query_class(SECTION_PAGE_CLASS)), store, page.location, page.window)
    setup_back_link(
        page.get_element_by_id(BACK_LINK_ID),
        page.get_element_by_id(BACK_BUTTON_ID),
        store,
        page.location,
    )
