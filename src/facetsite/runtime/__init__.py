"""facetsite runtime — filter, navigation and theme state for rendered pages."""

from facetsite.runtime.bootstrap import init_page
from facetsite.runtime.dom import Checkbox, Element, Location, MediaQueryList, Page, Storage, Window
from facetsite.runtime.filter_store import FilterStore

__all__ = [
    "Checkbox",
    "Element",
    "FilterStore",
    "Location",
    "MediaQueryList",
    "Page",
    "Storage",
    "Window",
    "init_page",
]
