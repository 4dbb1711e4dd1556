"""Abstract interface for index rendering backends."""

from abc import ABC, abstractmethod

from index_preprocessor.config import IndexConfig
from index_preprocessor.markers import Extraction
from index_preprocessor.models import EntryLocation, Index


class IndexBackend(ABC):
    """Interface that each rendering backend must implement."""

    def __init__(self, config: IndexConfig):
        self.config = config

    @abstractmethod
    def occurrence(self, extraction: Extraction, location: EntryLocation) -> str:
        """Markup that replaces one marker in the chapter text, including any invisible anchor."""
        ...

    @abstractmethod
    def render_index(self, index: Index) -> str | None:
        """
        Content for the chapter named "Index".
        None leaves that chapter untouched.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier (e.g. 'html')."""
        ...
