"""Rendering backends: each turns markers and the built index into markup for one renderer family."""

import logging

from index_preprocessor.backends.asciidoc import AsciidocBackend
from index_preprocessor.backends.base import IndexBackend
from index_preprocessor.backends.html import HtmlBackend
from index_preprocessor.backends.plain import PlainBackend
from index_preprocessor.config import IndexConfig

log = logging.getLogger(__name__)

__all__ = ["IndexBackend", "HtmlBackend", "AsciidocBackend", "PlainBackend", "get_backend", "supports_renderer"]

REGISTRY: dict[str, type[IndexBackend]] = {
    "html": HtmlBackend,
    "asciidoc": AsciidocBackend,
    "asciidoctor": AsciidocBackend,
}

DEFAULT_BACKEND = "html"
UNSUPPORTED_RENDERER = "not-supported"


def get_backend(renderer: str, config: IndexConfig) -> IndexBackend:
    """
    Return the backend for a renderer. Renderers in skip_renderer get the pass-through
    backend; unrecognized renderers fall back to the default rather than failing the build.
    """
    if renderer in config.skip_renderer:
        return PlainBackend(config)
    backend_cls = REGISTRY.get(renderer)
    if backend_cls is None and renderer.startswith("asciidoc"):
        backend_cls = AsciidocBackend
    if backend_cls is None:
        log.info("No dedicated index output for renderer '%s'; using %s", renderer, DEFAULT_BACKEND)
        backend_cls = REGISTRY[DEFAULT_BACKEND]
    return backend_cls(config)


def supports_renderer(renderer: str) -> bool:
    return renderer != UNSUPPORTED_RENDERER
