"""Pass-through backend for renderers listed in skip_renderer: markers become plain text, no index."""

from index_preprocessor.backends.base import IndexBackend
from index_preprocessor.markers import Extraction
from index_preprocessor.models import EntryLocation, Index


class PlainBackend(IndexBackend):

    def occurrence(self, extraction: Extraction, location: EntryLocation) -> str:
        return extraction.visible

    def render_index(self, index: Index) -> str | None:
        return None

    @property
    def name(self) -> str:
        return "plain"
