"""HTML backend: zero-width anchors in the chapters, and an Index chapter of links back to them."""

from index_preprocessor.backends.base import IndexBackend
from index_preprocessor.markers import COPYRIGHT_RE, Extraction
from index_preprocessor.models import EntryLocation, Index, IndexEntry

# Indentation for a nest-under entry, e.g.:
#
#   testing,
#         fuzz testing
#   ^^^^^^
NEST_UNDER_INDENT = "&nbsp;" * 6

# Indentation for use_chapter_names locations, e.g.:
#
#   testing,
#         Introduction,
#         Tooling
#   ^^^^^^
USE_NAMES_INDENT = "&nbsp;" * 6

LINE_END = "<br/>\n"


def protect_copyright(text: str) -> str:
    """Spell out the '(' of '(C)' so no renderer turns it into a copyright sign."""
    return COPYRIGHT_RE.sub(lambda m: "&#40;" + m.group(0)[1:], text)


def anchor_tag(anchor: str) -> str:
    return f'<a name="{anchor}"></a>'


class HtmlBackend(IndexBackend):

    def occurrence(self, extraction: Extraction, location: EntryLocation) -> str:
        return extraction.visible + anchor_tag(location.anchor)

    def render_index(self, index: Index) -> str | None:
        parts: list[str] = []
        if not self.config.suppress_head:
            parts.append("# Index\n\n")
        for entry in index.entries:
            self._append_entry(parts, entry, depth=0)
        return "".join(parts)

    def _append_entry(self, parts: list[str], entry: IndexEntry, depth: int) -> None:
        indent = NEST_UNDER_INDENT * depth
        parts.append(indent + protect_copyright(entry.display))
        if entry.see is not None:
            parts.append(f", see {protect_copyright(entry.see)}")
        else:
            for loc in entry.locations:
                parts.append(self._location(loc, indent))
        parts.append(LINE_END)
        for child in entry.children:
            self._append_entry(parts, child, depth + 1)

    def _location(self, loc: EntryLocation, indent: str) -> str:
        if self.config.use_chapter_names and loc.title is not None:
            separator = f",{LINE_END}{indent}{USE_NAMES_INDENT}"
            label = protect_copyright(loc.title)
        else:
            separator = ", "
            # Unnumbered (prefix/suffix) chapters are labeled by title.
            label = loc.number or protect_copyright(loc.title or "")
        if loc.file:
            return f"{separator}[{label}]({loc.file}#{loc.anchor})"
        return separator + label

    @property
    def name(self) -> str:
        return "html"
