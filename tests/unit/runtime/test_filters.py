"""Tests for runtime/filters.py — the facet filter engine on a listing page."""

from __future__ import annotations

import json

import pytest

from facetsite.facets import FilterSelection
from facetsite.runtime.dom import Checkbox, Element, Location, Storage
from facetsite.runtime.filter_store import FILTERS_KEY, FilterStore
from facetsite.runtime.filters import (
    BANNER_CLASS,
    FilterElements,
    apply_filters,
    clear_filters,
    filter_content_items,
    init_filters,
    item_values,
    load_saved_filters,
    selected_filters,
)

_ITEMS = [
    {"audience": "clinician"},                                  # A
    {"audience": "parent,clinician", "age": "0-2"},             # B
    {"audience": "parent", "evidence": "high", "age": "2-5"},   # C
]


def _load(page):
    """Run the filter engine the way a page load does."""
    elements = FilterElements.from_page(page)
    init_filters(elements, FilterStore(page.local_storage), page.location)
    return elements


def _check(elements: FilterElements, name: str, value: str) -> None:
    for control in elements.controls:
        if control.name == name and control.value == value:
            control.checked = True


def _checked(elements: FilterElements) -> set[tuple[str, str]]:
    return {(c.name, c.value) for c in elements.controls if c.checked}


def _storage_with(data) -> Storage:
    return Storage({FILTERS_KEY: json.dumps(data)})


# ------------------------------------------------------------------
# Element lookup
# ------------------------------------------------------------------


def test_from_page_finds_controls_and_items(make_page, listing_body):
    elements = FilterElements.from_page(make_page(body=listing_body(_ITEMS)))
    assert len(elements.controls) == 6
    assert len(elements.items) == 3
    assert elements.apply_button is not None
    assert elements.main_content is not None


def test_from_page_empty_page(make_page):
    elements = FilterElements.from_page(make_page())
    assert elements.controls == []
    assert elements.toggle is None


# ------------------------------------------------------------------
# Controls ↔ selection
# ------------------------------------------------------------------


def test_selected_filters_reads_checked_controls():
    controls = [
        Checkbox("audience", "parent", checked=True),
        Checkbox("audience", "clinician"),
        Checkbox("ageRange", "0-2", checked=True),
        Checkbox("unrelated", "x", checked=True),
    ]
    assert selected_filters(controls) == FilterSelection({"audience": ["parent"], "ageRange": ["0-2"]})


def test_load_saved_filters_checks_exactly_persisted(make_page, listing_body):
    page = make_page(body=listing_body(_ITEMS))
    page.local_storage.set_item(
        FILTERS_KEY, '{"audience":["parent"],"evidenceLevel":[],"ageRange":["0-2"]}'
    )
    elements = _load(page)
    assert _checked(elements) == {("audience", "parent"), ("ageRange", "0-2")}


def test_load_saved_filters_unknown_value_ignored():
    controls = [Checkbox("audience", "parent")]
    store = FilterStore(_storage_with({"audience": ["educator"], "evidenceLevel": [], "ageRange": []}))
    load_saved_filters(controls, store)
    assert not controls[0].checked


def test_load_saved_filters_malformed_leaves_controls(make_page, listing_body):
    page = make_page(body=listing_body(_ITEMS))
    page.local_storage.set_item(FILTERS_KEY, "{broken")
    elements = _load(page)
    assert _checked(elements) == set()


# ------------------------------------------------------------------
# apply
# ------------------------------------------------------------------


def test_apply_persists_and_navigates(make_page, listing_body):
    page = make_page("/guides/", listing_body(_ITEMS))
    elements = _load(page)
    _check(elements, "audience", "parent")
    _check(elements, "audience", "clinician")
    _check(elements, "ageRange", "0-2")

    elements.apply_button.click()

    expected = FilterSelection({"audience": ["parent", "clinician"], "ageRange": ["0-2"]})
    assert FilterStore(page.local_storage).load() == expected
    assert page.location.pathname == "/guides/"
    assert "evidence" not in page.location.search
    assert FilterSelection.from_query(page.location.search) == expected


def test_apply_nothing_selected_gives_bare_url(make_page, listing_body):
    page = make_page("/guides/?audience=parent", listing_body(_ITEMS))
    elements = _load(page)
    for c in elements.controls:
        c.checked = False

    elements.apply_button.click()

    assert page.location.history[-1] == "/guides/"
    assert FilterStore(page.local_storage).load() == FilterSelection()


def test_apply_then_reload_round_trip(make_page, listing_body):
    page = make_page("/guides/", listing_body(_ITEMS))
    elements = _load(page)
    _check(elements, "evidenceLevel", "high")
    _check(elements, "ageRange", "2-5")
    selection = apply_filters(elements.controls, FilterStore(page.local_storage), page.location)

    fresh = page.reload(body=listing_body(_ITEMS))
    fresh_elements = _load(fresh)

    assert FilterStore(fresh.local_storage).load() == selection
    assert FilterSelection.from_query(fresh.location.search) == selection
    assert _checked(fresh_elements) == {("evidenceLevel", "high"), ("ageRange", "2-5")}


# ------------------------------------------------------------------
# clear
# ------------------------------------------------------------------


def test_clear_unchecks_removes_and_navigates(make_page, listing_body):
    page = make_page("/guides/?audience=parent", listing_body(_ITEMS))
    FilterStore(page.local_storage).save(FilterSelection({"audience": ["parent"]}))
    elements = _load(page)
    assert _checked(elements)

    elements.clear_button.click()

    assert _checked(elements) == set()
    assert FILTERS_KEY not in page.local_storage
    assert page.location.href == "/guides/"


def test_clear_is_idempotent():
    controls = [Checkbox("audience", "parent", checked=True)]
    store = FilterStore(_storage_with({"audience": ["parent"]}))
    location = Location("/guides/?audience=parent")

    clear_filters(controls, store, location)
    once = ([c.checked for c in controls], store.load(), location.href)
    clear_filters(controls, store, location)
    twice = ([c.checked for c in controls], store.load(), location.href)

    assert once == twice == ([False], None, "/guides/")


# ------------------------------------------------------------------
# Item visibility
# ------------------------------------------------------------------


def test_item_values_from_data_attributes():
    item = Element(dataset={"contentItem": "", "audience": "parent, clinician", "evidence": "high"})
    assert item_values(item) == {
        "audience": ["parent", "clinician"],
        "evidenceLevel": ["high"],
        "ageRange": [],
    }


def test_audience_scenario_on_page(make_page, listing_body):
    page = make_page("/guides/?audience=parent", listing_body(_ITEMS))
    elements = _load(page)
    assert [item.displayed for item in elements.items] == [False, True, True]


def test_and_across_facets_on_page(make_page, listing_body):
    page = make_page("/guides/?audience=parent&age=0-2", listing_body(_ITEMS))
    elements = _load(page)
    assert [item.displayed for item in elements.items] == [False, True, False]


def test_banner_rendered_with_summary(make_page, listing_body):
    page = make_page("/guides/?audience=parent&evidence=high", listing_body(_ITEMS))
    elements = _load(page)
    banner = elements.main_content.children[0]
    assert banner.has_class(BANNER_CLASS)
    assert banner.text_content == "Active Filters: Audience: parent | Evidence: high"


def test_banner_button_navigates_to_bare_url(make_page, listing_body):
    page = make_page("/guides/?audience=parent", listing_body(_ITEMS))
    elements = _load(page)
    button = elements.main_content.children[0].children[0]
    button.click()
    assert page.location.href == "/guides/"


@pytest.mark.parametrize("href", ["/guides/", "/guides/?page=2", "/guides/?audience="])
def test_no_filter_params_leaves_items_and_no_banner(make_page, listing_body, href):
    page = make_page(href, listing_body(_ITEMS))
    elements = _load(page)
    assert all(item.displayed for item in elements.items)
    assert all(item.style == {} for item in elements.items)
    assert page.query_class(BANNER_CLASS) == []


def test_filter_content_items_without_main_content():
    items = [Element(dataset={"contentItem": "", "audience": "parent"})]
    selection = filter_content_items(items, Location("/x/?audience=clinician"), None)
    assert selection == FilterSelection({"audience": ["clinician"]})
    assert not items[0].displayed


def test_url_value_without_control_is_ignored(make_page, listing_body):
    page = make_page("/guides/?audience=educator", listing_body(_ITEMS))
    elements = _load(page)
    assert _checked(elements) == set()
    assert not any(item.displayed for item in elements.items)


# ------------------------------------------------------------------
# Panel
# ------------------------------------------------------------------


def test_panel_toggle_and_close(make_page, listing_body):
    page = make_page(body=listing_body())
    elements = _load(page)
    assert elements.panel.hidden
    elements.toggle.click()
    assert not elements.panel.hidden
    elements.toggle.click()
    assert elements.panel.hidden
    elements.toggle.click()
    elements.close.click()
    assert elements.panel.hidden


def test_missing_elements_no_op():
    elements = FilterElements()
    init_filters(elements, FilterStore(_storage_with({})), Location("/x/?audience=parent"))
