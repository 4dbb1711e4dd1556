"""
AsciiDoc backend: each occurrence becomes an ``indexterm:[...]`` macro and the AsciiDoc
toolchain builds the printed index itself, so the Index chapter only gets an
``[index]`` section header.
"""

import logging

from index_preprocessor.backends.base import IndexBackend
from index_preprocessor.markers import Extraction, has_copyright_mark, normalize_term
from index_preprocessor.models import EntryLocation, Index

log = logging.getLogger(__name__)

INDEX_SECTION = "[index]\n== Index\n"


def text_to_asciidoc(text: str) -> str:
    """Strip surrounding markdown emphasis and code ticks, and escape markup characters."""
    return (
        text.replace("`", "")
        .strip("*")
        .strip("_")
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def asciidoc_protect(text: str) -> str:
    """
    Protect a term from AsciiDoc interpretation:
    - quote it if it contains commas, which would otherwise start a nested entry;
    - wrap it in a passthrough if it contains (C), which would otherwise become a copyright sign.
    """
    if "," in text:
        text = f'"{text}"'
    if has_copyright_mark(text):
        text = f"pass:[{text}]"
    return text


class AsciidocBackend(IndexBackend):

    def occurrence(self, extraction: Extraction, location: EntryLocation) -> str:
        entry = extraction.display
        term = extraction.term
        target = self.config.see_instead_terms.get(term)
        if target is not None:
            # No 'see' entries in the macro form: index the occurrence under its target.
            entry, term = target, normalize_term(target)
            log.debug("...or in fact '%s'", entry)

        macro_text = text_to_asciidoc(entry)
        parent = self.config.nest_under_terms.get(term)
        if parent is not None:
            macro_text = f'{asciidoc_protect(text_to_asciidoc(parent))},"{macro_text}"'
            log.debug("nested entry '%s'", macro_text)
        else:
            macro_text = asciidoc_protect(macro_text)

        # The macro needs a space before the visible text.
        return f"indexterm:[{macro_text}] {extraction.visible}"

    def render_index(self, index: Index) -> str | None:
        return INDEX_SECTION

    @property
    def name(self) -> str:
        return "asciidoc"
