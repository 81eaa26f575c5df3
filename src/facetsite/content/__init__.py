"""facetsite content layer — documents, index records, front matter loader."""

from facetsite.content.loader import ContentError, load_document
from facetsite.content.models import ContentItem, IndexRecord, items_in_category

__all__ = [
    "ContentError",
    "ContentItem",
    "IndexRecord",
    "items_in_category",
    "load_document",
]
