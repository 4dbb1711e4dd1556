"""
Indexing options from the ``[preprocessor.indexing]`` table of book.toml.

    [preprocessor.indexing]
    use_chapter_names = true
    skip_renderer = "markdown,linkcheck"

    [preprocessor.indexing.see_instead]
    "unit type" = "`()`"

    [preprocessor.indexing.nest_under]
    "generic type" = "generics"

A value of the wrong type is fatal: the book author's intent cannot be honored.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from index_preprocessor.markers import normalize_term

log = logging.getLogger(__name__)

CONFIG_SECTION = "indexing"


class ConfigError(ValueError):
    """Raised when the indexing configuration holds a value of the wrong type."""


class IndexConfig(BaseModel):
    """
    Validated indexing options. Rule keys are kept as written, so a redirect that no marker
    references is listed under the key the author typed; lookups go through the *_terms maps.
    """

    see_instead: dict[str, str] = Field(
        default_factory=dict,
        description="Term -> target: the term's entry reads 'term, see target' instead of listing locations",
    )
    nest_under: dict[str, str] = Field(
        default_factory=dict,
        description="Term -> parent: the term is listed only as an indented sub-entry of the parent",
    )
    use_chapter_names: bool = Field(default=False, description="Label locations by chapter title instead of number")
    suppress_head: bool = Field(
        default=False,
        description=(
            "Omit the '# Index' heading line of the generated HTML Index chapter. "
            "Anchors and entries are unaffected; the AsciiDoc index section keeps its heading"
        ),
    )
    skip_renderer: frozenset[str] = Field(
        default_factory=frozenset,
        description="Renderers for which markers are only stripped and no index is generated",
    )

    model_config = {"strict": True, "extra": "ignore", "frozen": True}

    @field_validator("skip_renderer", mode="before")
    @classmethod
    def _split_renderers(cls, value: Any) -> Any:
        if isinstance(value, str):
            return frozenset(s.strip() for s in value.split(",") if s.strip())
        if isinstance(value, (list, tuple, set)) and all(isinstance(s, str) for s in value):
            return frozenset(value)
        return value

    @property
    def see_instead_terms(self) -> dict[str, str]:
        """see_instead keyed by normalized index term."""
        return {normalize_term(key): target for key, target in self.see_instead.items()}

    @property
    def nest_under_terms(self) -> dict[str, str]:
        """nest_under keyed by normalized index term."""
        return {normalize_term(key): parent for key, parent in self.nest_under.items()}


def config_from_book(book_config: Mapping[str, Any]) -> IndexConfig:
    """
    Build IndexConfig from a parsed book.toml (the host's ``context.config``).
    Missing table means defaults. Raises ConfigError on a wrong value type.
    """
    preprocessors = book_config.get("preprocessor", {})
    if not isinstance(preprocessors, Mapping):
        raise ConfigError(f"[preprocessor] must be a table, got {type(preprocessors).__name__}")
    section = preprocessors.get(CONFIG_SECTION, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[preprocessor.{CONFIG_SECTION}] must be a table, got {type(section).__name__}")
    try:
        config = IndexConfig.model_validate(dict(section))
    except ValidationError as e:
        raise ConfigError(f"Invalid [preprocessor.{CONFIG_SECTION}] configuration: {e}") from e

    if config.skip_renderer:
        log.info("Skipping output for renderers in: %s", ",".join(sorted(config.skip_renderer)))
    for key, value in config.see_instead.items():
        log.info("Index entry '%s' will be 'see %s'", key, value)
    for key, value in config.nest_under.items():
        log.info("Index entry '%s' will be nested under '%s'", key, value)
    return config


def load_book_config(path: Path) -> IndexConfig:
    """Read a book.toml from disk and return its indexing options."""
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: not valid TOML: {e}") from e
    return config_from_book(data)
