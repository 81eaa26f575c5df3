"""Minimal page model the runtime components bind to.

Only what the filter, navigation and theme components touch is modelled:
elements with ids, classes, data attributes and listeners; checkbox
inputs; Web Storage style key/value stores; the page location; the
window's scroll offset and media queries.

Navigation is modelled as a recorded ``Location.assign``. A full page
load is a new Page over the same storages, see ``Page.reload``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator
from urllib.parse import urlsplit

Listener = Callable[["Event"], None]


@dataclass
class Event:
    type: str
    target: EventTarget | None = None
    key: str = ""
    button: int = 0
    meta_key: bool = False
    ctrl_key: bool = False
    shift_key: bool = False
    alt_key: bool = False
    matches: bool | None = None  # media query change events
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    @property
    def is_modified(self) -> bool:
        """Middle-click or any modifier key: the visitor wants a new tab/window."""
        return self.button == 1 or self.meta_key or self.ctrl_key or self.shift_key or self.alt_key


class EventTarget:
    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    def dispatch(self, event: Event | str, **fields) -> Event:
        if isinstance(event, str):
            event = Event(type=event, **fields)
        if event.target is None:
            event.target = self
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)
        return event


class Element(EventTarget):
    def __init__(
        self,
        id: str = "",
        *,
        tag: str = "div",
        classes: Iterable[str] = (),
        dataset: dict[str, str] | None = None,
        attributes: dict[str, str] | None = None,
        text: str = "",
        hidden: bool = False,
        children: Iterable[Element] = (),
        offset_height: int = 0,
    ) -> None:
        super().__init__()
        self.id = id
        self.tag = tag
        self.classes: set[str] = set(classes)
        self.dataset: dict[str, str] = dict(dataset or {})
        self.attributes: dict[str, str] = dict(attributes or {})
        self.style: dict[str, str] = {}
        self.text_content = text
        self.hidden = hidden
        self.children: list[Element] = list(children)
        self.offset_height = offset_height

    def __repr__(self) -> str:
        ident = f"#{self.id}" if self.id else ""
        cls = "".join(f".{c}" for c in sorted(self.classes))
        return f"<{self.tag}{ident}{cls}>"

    # ---- attributes / classes ----

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def toggle_class(self, name: str, force: bool | None = None) -> bool:
        present = (name not in self.classes) if force is None else force
        if present:
            self.classes.add(name)
        else:
            self.classes.discard(name)
        return present

    @property
    def displayed(self) -> bool:
        return not self.hidden and self.style.get("display") != "none"

    # ---- tree ----

    def append(self, child: Element) -> None:
        self.children.append(child)

    def prepend(self, child: Element) -> None:
        self.children.insert(0, child)

    def iter_descendants(self) -> Iterator[Element]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def find_class(self, name: str) -> Element | None:
        return next((e for e in self.iter_descendants() if e.has_class(name)), None)

    def click(self, **fields) -> Event:
        return self.dispatch("click", **fields)


class Checkbox(Element):
    def __init__(self, name: str, value: str, *, checked: bool = False, **kwargs) -> None:
        kwargs.setdefault("tag", "input")
        super().__init__(**kwargs)
        self.name = name
        self.value = value
        self.checked = checked

    def __repr__(self) -> str:
        mark = "x" if self.checked else " "
        return f"<input {self.name}={self.value} [{mark}]>"


class Storage:
    """Web Storage semantics: string keys, string values."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: object) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


class Location:
    def __init__(self, href: str = "/") -> None:
        self.pathname = "/"
        self.search = ""
        self.history: list[str] = []
        self._set(href)

    def _set(self, href: str) -> None:
        parts = urlsplit(href)
        if parts.path:
            self.pathname = parts.path
        self.search = f"?{parts.query}" if parts.query else ""

    @property
    def href(self) -> str:
        return self.pathname + self.search

    def assign(self, href: str) -> None:
        """Navigate. The current page's state is gone after this."""
        self._set(href)
        self.history.append(self.href)

    @property
    def navigated(self) -> bool:
        return bool(self.history)


class MediaQueryList(EventTarget):
    def __init__(self, media: str, matches: bool = False) -> None:
        super().__init__()
        self.media = media
        self.matches = matches

    def set_matches(self, matches: bool) -> None:
        """Simulate the OS flipping the preference; fires ``change``."""
        if matches == self.matches:
            return
        self.matches = matches
        self.dispatch("change", matches=matches)


class Window(EventTarget):
    def __init__(self, media: Iterable[MediaQueryList] | None = None) -> None:
        super().__init__()
        self.scroll_y = 0
        # None: the browser cannot evaluate media queries at all.
        self._media: dict[str, MediaQueryList] | None = (
            {m.media: m for m in media} if media is not None else None
        )

    def scroll_to(self, top: int) -> None:
        self.scroll_y = top

    def match_media(self, query: str) -> MediaQueryList | None:
        if self._media is None:
            return None
        if query not in self._media:
            self._media[query] = MediaQueryList(query)
        return self._media[query]

    def media_queries(self) -> list[MediaQueryList] | None:
        return list(self._media.values()) if self._media is not None else None


@dataclass
class Page:
    location: Location
    local_storage: Storage = field(default_factory=Storage)
    session_storage: Storage = field(default_factory=Storage)
    window: Window = field(default_factory=lambda: Window(media=[]))
    document: Element = field(default_factory=lambda: Element(tag="html"))
    body: Element = field(default_factory=lambda: Element(tag="body"))

    def get_element_by_id(self, element_id: str) -> Element | None:
        return next((e for e in self.body.iter_descendants() if e.id == element_id), None)

    def query_class(self, name: str) -> list[Element]:
        return [e for e in self.body.iter_descendants() if e.has_class(name)]

    def query(self, predicate: Callable[[Element], bool]) -> list[Element]:
        return [e for e in self.body.iter_descendants() if predicate(e)]

    def reload(self, body: Element | None = None, href: str | None = None) -> Page:
        """A fresh page load over the same storages and OS preferences.

        Listeners registered by the old page do not carry over.
        """
        media = self.window.media_queries()
        return Page(
            location=Location(href if href is not None else self.location.href),
            local_storage=self.local_storage,
            session_storage=self.session_storage,
            window=Window(
                media=[MediaQueryList(m.media, m.matches) for m in media] if media is not None else None
            ),
            body=body if body is not None else Element(tag="body"),
        )
