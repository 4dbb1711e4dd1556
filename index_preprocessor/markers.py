"""
Find index markers in chapter text and turn them into index terms.

Markers:
  {{i:text}}   text stays in the chapter, and is indexed
  {{ii:text}}  text stays in the chapter in italics, and is indexed
  {{hi:text}}  text is removed from the chapter, but is indexed anyway

Markers never nest: the first ``}}`` after an opener closes it. An opener with
no closer is left in the text as-is.

Tip: keep links inside the marker, i.e. prefer ``{{i:[text](dest)}}`` to
``[{{i:text}}](dest)``; the latter breaks the link.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator

log = logging.getLogger(__name__)


class MarkerKind(str, Enum):
    INCLUDE = "i"
    INCLUDE_ITALIC = "ii"
    HIDDEN = "hi"


# Longest opener first so "{{i:" is never tried where "{{ii:" or "{{hi:" fits.
OPENERS: tuple[tuple[str, MarkerKind], ...] = (
    ("{{ii:", MarkerKind.INCLUDE_ITALIC),
    ("{{hi:", MarkerKind.HIDDEN),
    ("{{i:", MarkerKind.INCLUDE),
)
CLOSER = "}}"

MD_LINK_RE = re.compile(r"\[(?P<text>[^\]]+)\]\((?P<link>[^)]+)\)", re.S)
WHITESPACE_RE = re.compile(r"\s+")
# _word_ or _several words_, but not the underscores inside snake_case
ITALIC_UNDERSCORE_RE = re.compile(r"(?<!\w)_(?=[^\s_])(.+?)(?<=[^\s_])_(?!\w)", re.S)
COPYRIGHT_RE = re.compile(r"\(c\)", re.I)

# Markup characters ignored when ordering the index.
SORT_IGNORED = frozenset("*{}`[]@'")


@dataclass(frozen=True)
class Marker:
    """A marker span in source text; ``start``/``end`` cover opener through closer."""
    kind: MarkerKind
    text: str
    start: int
    end: int

    @property
    def content(self) -> str:
        """Inner text with the whitespace after the opener's colon skipped."""
        return self.text.lstrip()


@dataclass(frozen=True)
class Extraction:
    """What a marker contributes: the index term and the text left in the chapter."""
    marker: Marker
    term: str
    display: str
    visible: str

    @property
    def kind(self) -> MarkerKind:
        return self.marker.kind


def scan_markers(text: str) -> Iterator[Marker]:
    """Yield the markers in ``text`` left to right, without overlap."""
    pos = 0
    while True:
        pos = text.find("{{", pos)
        if pos < 0:
            return
        for opener, kind in OPENERS:
            if text.startswith(opener, pos):
                break
        else:
            pos += 1
            continue
        inner = pos + len(opener)
        close = text.find(CLOSER, inner)
        if close < 0:
            # No closer anywhere after this point, so nothing further can match.
            log.warning("Unterminated index marker at offset %d left as text: %r", pos, text[pos:pos + 40])
            return
        yield Marker(kind=kind, text=text[inner:close], start=pos, end=close + len(CLOSER))
        pos = close + len(CLOSER)


def canonicalize(text: str) -> str:
    """Index text in display form: links reduced to their text, whitespace collapsed and trimmed."""
    delinked = MD_LINK_RE.sub(r"\g<text>", text)
    return WHITESPACE_RE.sub(" ", delinked).strip()


def normalize_term(text: str) -> str:
    """
    Merge key for an index term: the canonical text with _italic_ underscores removed.

    A literal "(C)" is kept as typed; backends protect it from copyright-glyph substitution.
    """
    return ITALIC_UNDERSCORE_RE.sub(r"\1", canonicalize(text))


def sort_key(term: str) -> str:
    """Case-sensitive ordering key: the term without markup characters."""
    return "".join(c for c in term if c not in SORT_IGNORED)


def has_copyright_mark(text: str) -> bool:
    return COPYRIGHT_RE.search(text) is not None


def extract(marker: Marker) -> Extraction:
    """Derive the index term, display text and visible replacement for one marker."""
    content = marker.content
    if marker.kind is MarkerKind.INCLUDE_ITALIC:
        visible = f"*{content}*"
    elif marker.kind is MarkerKind.HIDDEN:
        visible = ""
    else:
        visible = content
    return Extraction(
        marker=marker,
        term=normalize_term(content),
        display=canonicalize(content),
        visible=visible,
    )


def rewrite_markers(text: str, replace: Callable[[Extraction], str]) -> str:
    """
    Rewrite every marker in ``text`` with whatever ``replace`` returns for it.

    Markers with no text inside (``{{i:}}``) produce no entry and are dropped.
    """
    parts: list[str] = []
    pos = 0
    for marker in scan_markers(text):
        parts.append(text[pos:marker.start])
        extraction = extract(marker)
        if extraction.term:
            log.debug(
                "found %s index entry '%s' which maps to '%s'",
                marker.kind.value, marker.content, extraction.term,
            )
            parts.append(replace(extraction))
        else:
            log.warning("Empty index marker at offset %d dropped", marker.start)
        pos = marker.end
    parts.append(text[pos:])
    return "".join(parts)
