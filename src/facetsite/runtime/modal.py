"""Policy viewer modal: open from a link; close via button, backdrop or Escape."""

from __future__ import annotations

from dataclasses import dataclass

from facetsite.runtime.dom import Element, Page

POLICY_LINK_ID = "policy-viewer-link"
POLICY_MODAL_ID = "policy-modal"
POLICY_CLOSE_ID = "policy-modal-close"
BACKDROP_CLASS = "modal-backdrop"


@dataclass
class ModalElements:
    link: Element | None = None
    modal: Element | None = None
    close: Element | None = None
    backdrop: Element | None = None

    @classmethod
    def from_page(cls, page: Page) -> ModalElements:
        modal = page.get_element_by_id(POLICY_MODAL_ID)
        return cls(
            link=page.get_element_by_id(POLICY_LINK_ID),
            modal=modal,
            close=page.get_element_by_id(POLICY_CLOSE_ID),
            backdrop=modal.find_class(BACKDROP_CLASS) if modal is not None else None,
        )


def init_policy_modal(elements: ModalElements, document: Element, body: Element) -> None:
    link, modal = elements.link, elements.modal
    if link is None or modal is None:
        return

    def _open(event) -> None:
        event.prevent_default()
        modal.hidden = False
        body.style["overflow"] = "hidden"

    def _close(event=None) -> None:
        modal.hidden = True
        body.style["overflow"] = ""

    def _on_key(event) -> None:
        if event.key == "Escape" and not modal.hidden:
            _close()

    link.add_event_listener("click", _open)
    if elements.close is not None:
        elements.close.add_event_listener("click", _close)
    if elements.backdrop is not None:
        elements.backdrop.add_event_listener("click", _close)
    document.add_event_listener("keydown", _on_key)
