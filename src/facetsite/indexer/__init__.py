"""facetsite indexer — compile content groups into the search index."""

from facetsite.indexer.compiler import IndexResult, collect_group, compile_index
from facetsite.indexer.search import SearchHit, build_search_index, search
from facetsite.indexer.writer import load_records, write_atomic, write_index

__all__ = [
    "IndexResult",
    "SearchHit",
    "build_search_index",
    "collect_group",
    "compile_index",
    "load_records",
    "search",
    "write_atomic",
    "write_index",
]
