"""Walk the book in display order and stamp each marker occurrence with its location."""

from typing import Iterable, Iterator

from index_preprocessor.models import BookItem, Chapter, EntryLocation


class AnchorCounter:
    """Source of anchor ids for one pass: a001, a002, ... unique across the whole book."""

    def __init__(self, start: int = 1):
        self._next = start

    def next_anchor(self) -> str:
        anchor = f"a{self._next:03d}"
        self._next += 1
        return anchor


def format_number(number: Iterable[int]) -> str:
    """[2, 3] -> '2.3'"""
    return ".".join(str(n) for n in number)


class LocationTracker:
    """
    Depth-first walk over chapters: a parent before its sub-chapters, part titles and
    separators skipped. Only the host's section numbers are used: prefix and suffix
    chapters have none, so their locations carry the chapter title instead.
    """

    def __init__(self, counter: AnchorCounter, use_chapter_names: bool = False):
        self.counter = counter
        self.use_chapter_names = use_chapter_names
        self.chapter: Chapter | None = None
        self.number = ""

    def walk(self, items: list[BookItem]) -> Iterator[Chapter]:
        """Yield every chapter; while a chapter is current, locate() stamps occurrences in it."""
        for item in items:
            if not isinstance(item, Chapter):
                continue
            self.chapter = item
            self.number = format_number(item.number or ())
            yield item
            yield from self.walk(item.sub_items)
        self.chapter = None

    def locate(self) -> EntryLocation:
        """Location of a new occurrence in the current chapter, with a fresh anchor."""
        if self.chapter is None:
            raise RuntimeError("locate() called outside of a chapter walk")
        named = self.use_chapter_names or not self.number
        return EntryLocation(
            number=self.number,
            anchor=self.counter.next_anchor(),
            title=self.chapter.name if named else None,
            file=self.chapter.path,
        )
