"""
Host message glue: mdBook sends ``[context, book]`` as JSON on stdin and reads the
processed book back as JSON on stdout.

Book items on the wire are ``{"Chapter": {...}}``, ``"Separator"`` or
``{"PartTitle": "..."}``; unknown chapter fields are carried through unchanged.
"""

import json
from typing import Any, TextIO

from pydantic import ValidationError

from index_preprocessor.models import Book, BookItem, Chapter, PartTitle, PreprocessorContext, Separator

# mdBook version this preprocessor is written against.
MDBOOK_VERSION = "0.4.40"


class ProtocolError(ValueError):
    """Raised when the host input is not a valid [context, book] message."""


def item_from_json(raw: Any) -> BookItem:
    if raw == "Separator":
        return Separator()
    if isinstance(raw, dict) and "Chapter" in raw:
        return chapter_from_json(raw["Chapter"])
    if isinstance(raw, dict) and "PartTitle" in raw:
        return PartTitle(title=raw["PartTitle"])
    raise ProtocolError(f"Unknown book item: {raw!r:.80}")


def chapter_from_json(raw: Any) -> Chapter:
    if not isinstance(raw, dict):
        raise ProtocolError(f"Chapter must be an object, got {type(raw).__name__}")
    data = dict(raw)
    sub_items = [item_from_json(sub) for sub in data.pop("sub_items", None) or []]
    try:
        return Chapter.model_validate({**data, "sub_items": sub_items})
    except ValidationError as e:
        raise ProtocolError(f"Invalid chapter {data.get('name')!r}: {e}") from e


def item_to_json(item: BookItem) -> Any:
    if isinstance(item, Chapter):
        data = item.model_dump(mode="json", exclude={"sub_items"})
        data["sub_items"] = [item_to_json(sub) for sub in item.sub_items]
        return {"Chapter": data}
    if isinstance(item, PartTitle):
        return {"PartTitle": item.title}
    return "Separator"


def book_from_json(raw: Any) -> Book:
    if not isinstance(raw, dict) or not isinstance(raw.get("sections"), list):
        raise ProtocolError("Book must be an object with a 'sections' list")
    passthrough = {k: v for k, v in raw.items() if k != "sections"}
    return Book(sections=[item_from_json(item) for item in raw["sections"]], passthrough=passthrough)


def book_to_json(book: Book) -> dict[str, Any]:
    return {"sections": [item_to_json(item) for item in book.sections], **book.passthrough}


def parse_payload(payload: Any) -> tuple[PreprocessorContext, Book]:
    """Split a decoded ``[context, book]`` message into models."""
    if not isinstance(payload, list) or len(payload) != 2:
        raise ProtocolError("Expected a JSON array [context, book]")
    raw_ctx, raw_book = payload
    try:
        ctx = PreprocessorContext.model_validate(raw_ctx)
    except ValidationError as e:
        raise ProtocolError(f"Invalid preprocessor context: {e}") from e
    return ctx, book_from_json(raw_book)


def parse_input(stream: TextIO) -> tuple[PreprocessorContext, Book]:
    """Read and parse the host message from a text stream."""
    try:
        payload = json.load(stream)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Input is not valid JSON: {e}") from e
    return parse_payload(payload)


def dump_book(book: Book) -> str:
    return json.dumps(book_to_json(book), ensure_ascii=False)
