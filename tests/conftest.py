"""
Pytest configuration and shared book fixtures.
"""
import re

import pytest

from index_preprocessor.models import Book, Chapter, PartTitle, Separator
from index_preprocessor.protocol import MDBOOK_VERSION

ANCHOR_RE = re.compile(r'<a name="a\d+"></a>')

SCENARIO_TEXT = "See the {{i:unit type}} {{ii:Option}} and {{hi:internal}} detail."


@pytest.fixture
def make_chapter():
    """Factory for chapters with sensible defaults."""
    def _make(name, content="", number=None, path=None, sub_items=None):
        return Chapter(
            name=name,
            content=content,
            number=number,
            path=path,
            source_path=path,
            sub_items=sub_items or [],
        )
    return _make


@pytest.fixture
def sample_book(make_chapter):
    """Intro (unnumbered), two numbered chapters (one nested), a part title, and the Index."""
    return Book(sections=[
        make_chapter("Introduction", "Welcome to {{i:Rust}}.", path="intro.md"),
        PartTitle(title="Basics"),
        make_chapter(
            "Basics", SCENARIO_TEXT, number=[1], path="basics.md",
            sub_items=[
                make_chapter("Types", "The {{i:unit type}} again, and {{i:generics}}.", number=[1, 1], path="basics/types.md"),
            ],
        ),
        Separator(),
        make_chapter("Generics", "A {{i:generic type}} and another {{i:generic type}}.", number=[2], path="generics.md"),
        make_chapter("Index", "placeholder", path="indexing.md"),
    ])


@pytest.fixture
def strip_anchors():
    """Remove HTML anchors so chapter text can be compared as the reader sees it."""
    return lambda text: ANCHOR_RE.sub("", text)


@pytest.fixture
def mdbook_payload():
    """A [context, book] message as the host sends it."""
    def chapter(name, content, number, path):
        return {"Chapter": {
            "name": name,
            "content": content,
            "number": number,
            "sub_items": [],
            "path": path,
            "source_path": path,
            "parent_names": [],
        }}

    context = {
        "root": "/tmp/book",
        "config": {
            "book": {"title": "Test Book", "authors": []},
            "preprocessor": {"indexing": {"command": "index-preprocessor"}},
        },
        "renderer": "html",
        "mdbook_version": MDBOOK_VERSION,
    }
    book = {
        "sections": [
            chapter("Basics", SCENARIO_TEXT, [1], "basics.md"),
            "Separator",
            {"PartTitle": "Reference"},
            chapter("Index", "placeholder", None, "indexing.md"),
        ],
        "__non_exhaustive": None,
    }
    return [context, book]
