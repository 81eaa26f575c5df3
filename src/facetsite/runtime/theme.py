"""Theme preference — light/dark mode.

Priority: explicit choice in local storage > OS preference > light.

Nothing is written to storage until the visitor picks a theme. Until then
the page follows the OS preference live; afterwards OS changes are ignored
until storage is cleared.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from facetsite.runtime.dom import Element, MediaQueryList, Page, Storage

logger = logging.getLogger(__name__)

THEME_KEY = "site-theme"
THEME_LIGHT = "light"
THEME_DARK = "dark"
THEMES = (THEME_LIGHT, THEME_DARK)

THEME_TOGGLE_ID = "theme-toggle"
THEME_ATTRIBUTE = "data-theme"
DARK_SCHEME_QUERY = "(prefers-color-scheme: dark)"

_GLYPHS = {THEME_LIGHT: "🌙", THEME_DARK: "☀️"}


@dataclass
class ThemeContext:
    """Handles the theme manager needs; ``toggle`` and ``os_dark`` may be absent."""

    root: Element
    storage: Storage
    toggle: Element | None = None
    os_dark: MediaQueryList | None = None

    @classmethod
    def from_page(cls, page: Page) -> ThemeContext:
        return cls(
            root=page.document,
            storage=page.local_storage,
            toggle=page.get_element_by_id(THEME_TOGGLE_ID),
            os_dark=page.window.match_media(DARK_SCHEME_QUERY),
        )


def stored_theme(storage: Storage) -> str | None:
    stored = storage.get_item(THEME_KEY)
    if stored is None:
        return None
    if stored not in THEMES:
        logger.warning("Ignoring unknown stored theme %r", stored)
        return None
    return stored


def resolve_theme(ctx: ThemeContext) -> str:
    stored = stored_theme(ctx.storage)
    if stored is not None:
        return stored
    if ctx.os_dark is not None and ctx.os_dark.matches:
        return THEME_DARK
    return THEME_LIGHT


def render_theme(ctx: ThemeContext, theme: str) -> None:
    """Show *theme* without recording it as the visitor's choice."""
    ctx.root.set_attribute(THEME_ATTRIBUTE, theme)
    if ctx.toggle is not None:
        # The control offers the other theme.
        other = THEME_DARK if theme == THEME_LIGHT else THEME_LIGHT
        ctx.toggle.set_attribute("aria-label", f"Switch to {other} mode")
        ctx.toggle.text_content = _GLYPHS[theme]


def apply_theme(ctx: ThemeContext, theme: str) -> None:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme '{theme}'; expected one of {THEMES}")
    render_theme(ctx, theme)
    ctx.storage.set_item(THEME_KEY, theme)


def toggle_theme(ctx: ThemeContext) -> str:
    # Start from what is shown, which may come from the OS rather than storage.
    current = ctx.root.get_attribute(THEME_ATTRIBUTE) or resolve_theme(ctx)
    next_theme = THEME_DARK if current == THEME_LIGHT else THEME_LIGHT
    apply_theme(ctx, next_theme)
    return next_theme


def init_theme(ctx: ThemeContext) -> None:
    """Render the resolved theme and wire the OS subscription and toggle.

    The OS subscription lives as long as the page.
    """
    render_theme(ctx, resolve_theme(ctx))

    if ctx.os_dark is not None:
        def _on_os_change(event) -> None:
            if stored_theme(ctx.storage) is None:
                render_theme(ctx, THEME_DARK if event.matches else THEME_LIGHT)

        ctx.os_dark.add_event_listener("change", _on_os_change)

    if ctx.toggle is not None:
        ctx.toggle.add_event_listener("click", lambda event: toggle_theme(ctx))
