"""
Build the index from marker occurrences.

Pipeline:
  1. Group occurrences by term, in document order; the first occurrence's display text wins.
  2. Redirects (see_instead): the entry drops its locations and points at the target.
     A configured redirect is listed even when no marker references it.
  3. Nesting (nest_under): the entry moves under its parent, matched by display text.
     A missing parent is synthesized as an entry with no locations.
  4. Sort top-level entries, and each entry's sub-entries, by sort key.
     The sort is stable, so ties keep first-seen order.

A term that is both redirected and nested stays a redirect and is nested as one.
"""

import logging
from typing import Iterable, Mapping

from index_preprocessor.markers import canonicalize, normalize_term, sort_key
from index_preprocessor.models import Index, IndexEntry, Occurrence

log = logging.getLogger(__name__)


def _new_entry(term: str, display: str) -> IndexEntry:
    return IndexEntry(term=term, display=display, sort_key=sort_key(term))


def _group(occurrences: Iterable[Occurrence]) -> dict[str, IndexEntry]:
    groups: dict[str, IndexEntry] = {}
    for occ in occurrences:
        entry = groups.get(occ.term)
        if entry is None:
            entry = groups[occ.term] = _new_entry(occ.term, occ.display)
        entry.locations.append(occ.location)
    return groups


def _apply_redirects(groups: dict[str, IndexEntry], see_instead: Mapping[str, str]) -> None:
    for key, target in see_instead.items():
        term = normalize_term(key)
        entry = groups.get(term)
        if entry is None:
            entry = groups[term] = _new_entry(term, canonicalize(key))
        elif entry.locations:
            log.debug("Dropping %d locations of '%s' in favour of 'see %s'", len(entry.locations), key, target)
        entry.locations = []
        entry.see = target
    for key, target in see_instead.items():
        if normalize_term(target) not in groups:
            log.warning("Destination of see_instead '%s' => '%s' not in index!", key, target)


def _find_parent(groups: dict[str, IndexEntry], name: str) -> IndexEntry | None:
    for entry in groups.values():
        if entry.display == name:
            return entry
    return groups.get(normalize_term(name))


def _creates_cycle(parent_of: dict[str, str], child: str, parent: str) -> bool:
    node: str | None = parent
    while node is not None:
        if node == child:
            return True
        node = parent_of.get(node)
    return False


def _resolve_nesting(groups: dict[str, IndexEntry], nest_under: Mapping[str, str]) -> dict[str, str]:
    """Map child term -> parent term, synthesizing parents that have no entry of their own."""
    parent_of: dict[str, str] = {}
    for child_key, parent_name in nest_under.items():
        child_term = normalize_term(child_key)
        if child_term not in groups:
            log.debug("nest_under '%s' has no index entry; ignored", child_term)
            continue
        parent = _find_parent(groups, parent_name)
        if parent is None:
            log.info("Synthesizing index entry '%s' to nest '%s' under", parent_name, child_term)
            parent = groups[normalize_term(parent_name)] = _new_entry(normalize_term(parent_name), parent_name)
        if _creates_cycle(parent_of, child_term, parent.term):
            log.warning("Ignoring nest_under '%s' => '%s': nesting would form a cycle", child_term, parent_name)
            continue
        parent_of[child_term] = parent.term
    return parent_of


def _sort(entries: list[IndexEntry]) -> list[IndexEntry]:
    ordered = sorted(entries, key=lambda e: e.sort_key)
    for entry in ordered:
        entry.children = _sort(entry.children)
    return ordered


def build_index(
    occurrences: Iterable[Occurrence],
    see_instead: Mapping[str, str] | None = None,
    nest_under: Mapping[str, str] | None = None,
) -> Index:
    """Merge occurrences into an ordered, nested index. Rule keys are matched to terms after normalization."""
    groups = _group(occurrences)
    _apply_redirects(groups, see_instead or {})
    parent_of = _resolve_nesting(groups, nest_under or {})

    top: list[IndexEntry] = []
    for entry in groups.values():
        parent_term = parent_of.get(entry.term)
        if parent_term is None:
            top.append(entry)
        else:
            groups[parent_term].children.append(entry)

    index = Index(entries=_sort(top))
    log.info("Index built: %d entries, %d top-level", len(groups), len(index.entries))
    return index
