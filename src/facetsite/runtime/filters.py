"""Facet filter engine for listing pages.

apply   — checked controls → persisted selection + query string, then reload.
clear   — uncheck every control, drop the persisted copy, reload bare.
load    — on page load, check the controls matching the persisted selection.
filter  — on page load with filter parameters, hide non-matching items and
          show an active-filter banner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from facetsite.facets import FACETS, FilterSelection, describe, evaluate, split_values
from facetsite.runtime.dom import Checkbox, Element, Location, Page
from facetsite.runtime.filter_store import FilterStore

logger = logging.getLogger(__name__)

FILTER_TOGGLE_ID = "filter-toggle"
FILTER_PANEL_ID = "filter-panel"
FILTER_CLOSE_ID = "filter-close"
APPLY_FILTERS_ID = "apply-filters"
CLEAR_FILTERS_ID = "clear-filters"
FILTER_OPTION_CLASS = "filter-option"
MAIN_CONTENT_CLASS = "main-content"
BANNER_CLASS = "filter-active-banner"
CONTENT_ITEM_DATA = "contentItem"  # data-content-item


@dataclass
class FilterElements:
    """Element handles the filter engine binds to. Any may be missing."""

    controls: list[Checkbox] = field(default_factory=list)
    items: list[Element] = field(default_factory=list)
    toggle: Element | None = None
    panel: Element | None = None
    close: Element | None = None
    apply_button: Element | None = None
    clear_button: Element | None = None
    main_content: Element | None = None

    @classmethod
    def from_page(cls, page: Page) -> FilterElements:
        main = page.query_class(MAIN_CONTENT_CLASS)
        return cls(
            controls=list(dict.fromkeys(
                c for opt in page.query_class(FILTER_OPTION_CLASS)
                for c in [opt, *opt.iter_descendants()]
                if isinstance(c, Checkbox)
            )),
            items=page.query(lambda e: CONTENT_ITEM_DATA in e.dataset),
            toggle=page.get_element_by_id(FILTER_TOGGLE_ID),
            panel=page.get_element_by_id(FILTER_PANEL_ID),
            close=page.get_element_by_id(FILTER_CLOSE_ID),
            apply_button=page.get_element_by_id(APPLY_FILTERS_ID),
            clear_button=page.get_element_by_id(CLEAR_FILTERS_ID),
            main_content=main[0] if main else None,
        )


# ------------------------------------------------------------------
# Controls ↔ selection
# ------------------------------------------------------------------


def selected_filters(controls: list[Checkbox]) -> FilterSelection:
    values: dict[str, list[str]] = {f.name: [] for f in FACETS}
    for control in controls:
        if control.checked and control.name in values:
            values[control.name].append(control.value)
    return FilterSelection(values)


def check_controls(controls: list[Checkbox], selection: FilterSelection) -> None:
    """Check every control whose value is selected. Unknown values are ignored."""
    for facet in FACETS:
        wanted = set(selection.get(facet))
        for control in controls:
            if control.name == facet.name and control.value in wanted:
                control.checked = True


def load_saved_filters(controls: list[Checkbox], store: FilterStore) -> FilterSelection | None:
    saved = store.load()
    if saved is not None:
        check_controls(controls, saved)
    return saved


# ------------------------------------------------------------------
# apply / clear
# ------------------------------------------------------------------


def apply_filters(controls: list[Checkbox], store: FilterStore, location: Location) -> FilterSelection:
    selection = selected_filters(controls)
    store.save(selection)
    query = selection.to_query()
    location.assign(location.pathname + (f"?{query}" if query else ""))
    return selection


def clear_filters(controls: list[Checkbox], store: FilterStore, location: Location) -> None:
    for control in controls:
        control.checked = False
    store.clear()
    location.assign(location.pathname)


# ------------------------------------------------------------------
# Item visibility
# ------------------------------------------------------------------


def item_values(item: Element) -> dict[str, list[str]]:
    """Facet values from a rendered item's comma-separated data attributes."""
    return {f.name: split_values(item.dataset.get(f.data_attr)) for f in FACETS}


def render_banner(selection: FilterSelection, location: Location) -> Element:
    button = Element(tag="button", text="Clear Filters")
    button.add_event_listener("click", lambda event: location.assign(location.pathname))
    return Element(
        classes=[BANNER_CLASS],
        text=f"Active Filters: {describe(selection)}",
        children=[button],
    )


def filter_content_items(
    items: list[Element],
    location: Location,
    main_content: Element | None = None,
) -> FilterSelection | None:
    """Show only matching items for the selection in the URL.

    Returns the selection applied, or None when the URL carries no filter
    (items are left untouched and no banner is shown).
    """
    selection = FilterSelection.from_query(location.search)
    if selection.is_empty:
        return None

    shown = 0
    for item in items:
        visible = evaluate(item_values(item), selection)
        item.style["display"] = "" if visible else "none"
        shown += visible
    logger.debug("Filter %s: %d of %d item(s) shown", describe(selection), shown, len(items))

    if main_content is not None:
        main_content.prepend(render_banner(selection, location))
    return selection


# ------------------------------------------------------------------
# Wiring
# ------------------------------------------------------------------


def init_filters(elements: FilterElements, store: FilterStore, location: Location) -> None:
    """Wire filter panel listeners and run page-load reconciliation."""
    panel = elements.panel
    if elements.toggle is not None and panel is not None:
        def _toggle_panel(event) -> None:
            panel.hidden = not panel.hidden

        elements.toggle.add_event_listener("click", _toggle_panel)

    if elements.close is not None and panel is not None:
        def _close_panel(event) -> None:
            panel.hidden = True

        elements.close.add_event_listener("click", _close_panel)

    if elements.apply_button is not None:
        elements.apply_button.add_event_listener(
            "click", lambda event: apply_filters(elements.controls, store, location)
        )

    if elements.clear_button is not None:
        elements.clear_button.add_event_listener(
            "click", lambda event: clear_filters(elements.controls, store, location)
        )

    load_saved_filters(elements.controls, store)

    if location.search:
        filter_content_items(elements.items, location, elements.main_content)
