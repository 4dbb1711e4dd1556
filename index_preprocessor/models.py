"""Data models for the book tree, the host context, and the index built from it."""

from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import BaseModel, Field


class Chapter(BaseModel):
    """One chapter of the book. Owns its nested sub-chapters."""

    name: str = Field(description="Chapter title as listed in SUMMARY.md")
    content: str = Field(default="", description="Raw markdown of the chapter")
    number: list[int] | None = Field(
        default=None,
        description="Section number, e.g. [2, 3] for 2.3; None for unnumbered chapters",
    )
    sub_items: list["BookItem"] = Field(default_factory=list, description="Nested items in display order")
    path: str | None = Field(default=None, description="Rendered location relative to src/; None for draft chapters")
    source_path: str | None = Field(default=None, description="Markdown source relative to src/")
    parent_names: list[str] = Field(default_factory=list)

    model_config = {"extra": "allow"}


class Separator(BaseModel):
    """A horizontal rule in the summary."""


class PartTitle(BaseModel):
    """A part heading in the summary (not a chapter)."""

    title: str


BookItem = Union[Chapter, Separator, PartTitle]

Chapter.model_rebuild()


class Book(BaseModel):
    """The whole book: ordered top-level items."""

    sections: list[BookItem] = Field(default_factory=list)
    passthrough: dict[str, Any] = Field(
        default_factory=dict,
        description="Top-level host fields carried through unchanged (e.g. __non_exhaustive)",
    )


class PreprocessorContext(BaseModel):
    """Build context the host sends alongside the book."""

    root: str = Field(default="", description="Book root directory")
    config: dict[str, Any] = Field(default_factory=dict, description="Parsed book.toml")
    renderer: str = Field(default="html", description="Renderer the book is being built for")
    mdbook_version: str = Field(default="", description="Version of the calling host")

    model_config = {"extra": "allow"}


# ---------------------------------------------------------------------------
# Index records (build-scoped)
# ---------------------------------------------------------------------------

@dataclass
class EntryLocation:
    """One occurrence of a term in the book."""
    number: str
    anchor: str
    title: str | None = None
    file: str | None = None


@dataclass
class Occurrence:
    """A marker found in chapter text, stamped with where it was found."""
    term: str
    display: str
    location: EntryLocation


@dataclass
class IndexEntry:
    """One line of the index: a merged term with its locations or a 'see' pointer."""
    term: str
    display: str
    sort_key: str
    locations: list[EntryLocation] = field(default_factory=list)
    see: str | None = None
    children: list["IndexEntry"] = field(default_factory=list)

    @property
    def is_redirect(self) -> bool:
        return self.see is not None


@dataclass
class Index:
    """Top-level entries in display order, each carrying its nested sub-entries."""
    entries: list[IndexEntry] = field(default_factory=list)

    def get(self, display: str) -> IndexEntry | None:
        """Find an entry (top-level or nested) by its display text."""
        stack = list(self.entries)
        while stack:
            entry = stack.pop(0)
            if entry.display == display:
                return entry
            stack.extend(entry.children)
        return None

    def __len__(self) -> int:
        return len(self.entries)
