"""
Public API: run the indexing pass from code.

    from index_preprocessor import IndexPreprocessor, IndexConfig
    book = IndexPreprocessor(IndexConfig()).run(book, renderer="html")

The pass scans every chapter once (rewriting markers and collecting occurrences),
builds the index, then replaces the content of the chapter named "Index".
"""

import logging
from enum import Enum

from index_preprocessor.backends import IndexBackend, get_backend
from index_preprocessor.builder import build_index
from index_preprocessor.config import IndexConfig, config_from_book
from index_preprocessor.markers import Extraction, rewrite_markers
from index_preprocessor.models import Book, Chapter, Index, Occurrence, PreprocessorContext
from index_preprocessor.protocol import MDBOOK_VERSION
from index_preprocessor.tracker import AnchorCounter, LocationTracker

log = logging.getLogger(__name__)

NAME = "index-preprocessor"
INDEX_CHAPTER = "Index"


class PassState(Enum):
    IDLE = "idle"
    SCANNING_CHAPTERS = "scanning_chapters"
    BUILDING_INDEX = "building_index"
    SUBSTITUTING = "substituting"
    DONE = "done"


class IndexPreprocessor:
    """One indexing pass over a book. Create a new instance (or call run again) per build."""

    name = NAME

    def __init__(self, config: IndexConfig | None = None):
        self.config = config or IndexConfig()
        self.state = PassState.IDLE
        self.occurrences: list[Occurrence] = []
        self.index: Index | None = None

    @classmethod
    def from_context(cls, ctx: PreprocessorContext) -> "IndexPreprocessor":
        """Build from the host context. Raises ConfigError on invalid options."""
        if ctx.mdbook_version and ctx.mdbook_version != MDBOOK_VERSION:
            log.warning(
                "The %s plugin was written against version %s of mdbook, "
                "but we're being called from version %s",
                NAME, MDBOOK_VERSION, ctx.mdbook_version,
            )
        return cls(config_from_book(ctx.config))

    def run(self, book: Book, renderer: str = "html") -> Book:
        """Index the book in place for the given renderer and return it."""
        backend = get_backend(renderer, self.config)
        log.info("Indexing for renderer '%s' with the %s backend", renderer, backend.name)
        tracker = LocationTracker(AnchorCounter(), use_chapter_names=self.config.use_chapter_names)
        self.occurrences = []
        self.index = None

        self.state = PassState.SCANNING_CHAPTERS
        index_chapters: list[Chapter] = []
        for chapter in tracker.walk(book.sections):
            if chapter.name == INDEX_CHAPTER:
                index_chapters.append(chapter)
                continue
            log.info("Indexing chapter '%s'", chapter.name)
            chapter.content = self._process_chapter(chapter.content, tracker, backend)

        self.state = PassState.BUILDING_INDEX
        self.index = build_index(self.occurrences, self.config.see_instead, self.config.nest_under)

        self.state = PassState.SUBSTITUTING
        if not index_chapters:
            log.info("No chapter named '%s'; index not rendered", INDEX_CHAPTER)
        else:
            content = backend.render_index(self.index)
            if content is not None:
                for chapter in index_chapters:
                    log.debug("Replacing chapter named '%s' with contents", chapter.name)
                    chapter.content = content

        self.state = PassState.DONE
        return book

    def _process_chapter(self, content: str, tracker: LocationTracker, backend: IndexBackend) -> str:
        def replace(extraction: Extraction) -> str:
            location = tracker.locate()
            log.debug("Index entry '%s' (%s) found at %s", extraction.display, extraction.kind.value, location)
            self.occurrences.append(Occurrence(extraction.term, extraction.display, location))
            return backend.occurrence(extraction, location)

        return rewrite_markers(content, replace)
