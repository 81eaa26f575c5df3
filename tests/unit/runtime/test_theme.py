"""Tests for runtime/theme.py."""

from __future__ import annotations

import logging

import pytest

from facetsite.runtime.dom import Element, MediaQueryList, Storage
from facetsite.runtime.theme import (
    THEME_ATTRIBUTE,
    THEME_KEY,
    THEME_TOGGLE_ID,
    ThemeContext,
    apply_theme,
    init_theme,
    resolve_theme,
    toggle_theme,
)


def _ctx(stored: str | None = None, os_dark: bool | None = False, toggle: bool = True) -> ThemeContext:
    storage = Storage({THEME_KEY: stored} if stored is not None else None)
    return ThemeContext(
        root=Element(tag="html"),
        storage=storage,
        toggle=Element(THEME_TOGGLE_ID, tag="button") if toggle else None,
        os_dark=MediaQueryList("(prefers-color-scheme: dark)", os_dark) if os_dark is not None else None,
    )


def _shown(ctx: ThemeContext) -> str | None:
    return ctx.root.get_attribute(THEME_ATTRIBUTE)


# ------------------------------------------------------------------
# resolve
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "stored,os_dark,expected",
    [
        ("dark", False, "dark"),
        ("light", True, "light"),
        (None, True, "dark"),
        (None, False, "light"),
        (None, None, "light"),
    ],
)
def test_resolve_theme_priority(stored, os_dark, expected):
    assert resolve_theme(_ctx(stored, os_dark)) == expected


def test_unknown_stored_theme_ignored(caplog):
    ctx = _ctx("sepia", os_dark=True)
    with caplog.at_level(logging.WARNING, logger="facetsite.runtime.theme"):
        assert resolve_theme(ctx) == "dark"
    assert "sepia" in caplog.text


# ------------------------------------------------------------------
# apply / toggle
# ------------------------------------------------------------------


def test_apply_theme_renders_and_persists():
    ctx = _ctx()
    apply_theme(ctx, "dark")
    assert _shown(ctx) == "dark"
    assert ctx.storage.get_item(THEME_KEY) == "dark"
    assert ctx.toggle.get_attribute("aria-label") == "Switch to light mode"
    assert ctx.toggle.text_content == "☀️"


def test_apply_light_offers_dark():
    ctx = _ctx()
    apply_theme(ctx, "light")
    assert ctx.toggle.get_attribute("aria-label") == "Switch to dark mode"
    assert ctx.toggle.text_content == "🌙"


def test_apply_unknown_theme_rejected():
    ctx = _ctx()
    with pytest.raises(ValueError, match="Unknown theme"):
        apply_theme(ctx, "sepia")
    assert THEME_KEY not in ctx.storage


def test_apply_without_toggle():
    ctx = _ctx(toggle=False)
    apply_theme(ctx, "dark")
    assert _shown(ctx) == "dark"


def test_toggle_starts_from_shown_theme():
    # OS says dark, nothing stored: the first toggle goes to light.
    ctx = _ctx(os_dark=True)
    init_theme(ctx)
    assert toggle_theme(ctx) == "light"
    assert ctx.storage.get_item(THEME_KEY) == "light"
    assert toggle_theme(ctx) == "dark"


def test_toggle_without_rendered_attribute_uses_resolved():
    ctx = _ctx("dark")
    assert toggle_theme(ctx) == "light"


# ------------------------------------------------------------------
# init / OS tracking
# ------------------------------------------------------------------


def test_init_renders_without_persisting():
    ctx = _ctx(os_dark=True)
    init_theme(ctx)
    assert _shown(ctx) == "dark"
    assert THEME_KEY not in ctx.storage


def test_follows_os_while_unset():
    ctx = _ctx(os_dark=False)
    init_theme(ctx)
    assert _shown(ctx) == "light"

    ctx.os_dark.set_matches(True)
    assert _shown(ctx) == "dark"
    ctx.os_dark.set_matches(False)
    assert _shown(ctx) == "light"
    assert THEME_KEY not in ctx.storage


def test_stops_following_os_after_choice():
    ctx = _ctx(os_dark=False)
    init_theme(ctx)
    ctx.toggle.click()
    assert _shown(ctx) == "dark"

    ctx.os_dark.set_matches(True)
    ctx.os_dark.set_matches(False)
    assert _shown(ctx) == "dark"


def test_resumes_following_os_when_storage_cleared():
    ctx = _ctx("light", os_dark=False)
    init_theme(ctx)
    ctx.storage.clear()
    ctx.os_dark.set_matches(True)
    assert _shown(ctx) == "dark"


def test_init_without_media_support():
    ctx = _ctx(os_dark=None)
    init_theme(ctx)
    assert _shown(ctx) == "light"


def test_from_page_and_reload_keeps_choice(make_page, os_dark):
    page = make_page(body=Element(tag="body", children=[Element(THEME_TOGGLE_ID, tag="button")]))
    ctx = ThemeContext.from_page(page)
    assert ctx.os_dark is os_dark
    init_theme(ctx)
    ctx.toggle.click()

    again = page.reload(body=Element(tag="body", children=[Element(THEME_TOGGLE_ID, tag="button")]))
    again_ctx = ThemeContext.from_page(again)
    init_theme(again_ctx)
    assert _shown(again_ctx) == "dark"
