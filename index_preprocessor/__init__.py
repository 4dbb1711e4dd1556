"""
Index preprocessor: builds a back-of-book index for an mdBook from inline markers.

Use as a library:

    from index_preprocessor import IndexPreprocessor, IndexConfig
    book = IndexPreprocessor(IndexConfig(see_instead={"unit type": "`()`"})).run(book)

Or let mdBook run it, via book.toml:

    [preprocessor.indexing]
    command = "index-preprocessor"
"""

from index_preprocessor.api import IndexPreprocessor
from index_preprocessor.builder import build_index
from index_preprocessor.config import ConfigError, IndexConfig
from index_preprocessor.models import Book, Chapter, Index, IndexEntry
from index_preprocessor.protocol import ProtocolError

__all__ = [
    "IndexPreprocessor",
    "IndexConfig",
    "ConfigError",
    "ProtocolError",
    "build_index",
    "Book",
    "Chapter",
    "Index",
    "IndexEntry",
]
