"""
CLI entry point. mdBook runs it with no arguments (book on stdin, processed book on
stdout) and with ``supports <renderer>``; the other commands are for book authors.

    index-preprocessor                       # preprocess: [context, book] JSON on stdin
    index-preprocessor supports html         # exit 0 if the renderer is supported
    index-preprocessor check-config book.toml
    index-preprocessor render-index saved-input.json --renderer html
"""

import logging
import os
import sys
from pathlib import Path

import typer

from index_preprocessor.api import IndexPreprocessor
from index_preprocessor.backends import get_backend, supports_renderer
from index_preprocessor.config import ConfigError, load_book_config
from index_preprocessor.protocol import ProtocolError, dump_book, parse_input

LOG_LEVEL_ENV = "INDEX_PREPROCESSOR_LOG"

app = typer.Typer(
    name="index-preprocessor",
    help="An mdBook preprocessor which collates an index.",
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    # stdout carries the processed book, so logs go to stderr.
    name = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, name, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log every marker found (to stderr)"),
) -> None:
    """Without a command: read [context, book] from stdin and write the indexed book to stdout."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return
    try:
        context, book = parse_input(sys.stdin)
        preprocessor = IndexPreprocessor.from_context(context)
        processed = preprocessor.run(book, context.renderer)
    except (ConfigError, ProtocolError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(dump_book(processed))


@app.command("supports")
def supports_cmd(
    renderer: str = typer.Argument(..., help="Renderer name, e.g. html"),
) -> None:
    """Check whether a renderer is supported by this preprocessor (exit status 0 or 1)."""
    raise typer.Exit(0 if supports_renderer(renderer) else 1)


@app.command("check-config")
def check_config_cmd(
    book_toml: Path = typer.Argument(Path("book.toml"), help="Path to book.toml", path_type=Path),
) -> None:
    """Validate [preprocessor.indexing] and show the resolved options."""
    if not book_toml.is_file():
        typer.echo(f"Error: not found: {book_toml}", err=True)
        raise typer.Exit(1)
    try:
        config = load_book_config(book_toml)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Config file: {book_toml}")
    typer.echo(f"Use chapter names: {config.use_chapter_names}")
    typer.echo(f"Suppress head: {config.suppress_head}")
    typer.echo(f"Skip renderers: {', '.join(sorted(config.skip_renderer)) or '(none)'}")
    typer.echo(f"See instead: {len(config.see_instead)}")
    for term, target in config.see_instead.items():
        typer.echo(f"  {term} → see {target}")
    typer.echo(f"Nest under: {len(config.nest_under)}")
    for term, parent in config.nest_under.items():
        typer.echo(f"  {term} → under {parent}")


@app.command("render-index")
def render_index_cmd(
    input_json: Path = typer.Argument(..., help="Saved [context, book] message", path_type=Path),
    renderer: str | None = typer.Option(None, "--renderer", "-r", help="Override the renderer in the context"),
) -> None:
    """Run the pass on a saved host message and print the generated Index chapter."""
    if not input_json.is_file():
        typer.echo(f"Error: not found: {input_json}", err=True)
        raise typer.Exit(1)
    try:
        with open(input_json, "r", encoding="utf-8") as f:
            context, book = parse_input(f)
        preprocessor = IndexPreprocessor.from_context(context)
        renderer = renderer or context.renderer
        preprocessor.run(book, renderer)
    except (ConfigError, ProtocolError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    content = get_backend(renderer, preprocessor.config).render_index(preprocessor.index)
    if content is None:
        typer.echo(f"Renderer '{renderer}' is in skip_renderer; no index generated.", err=True)
        return
    typer.echo(content, nl=False)


def main() -> None:
    """Entry point for the index-preprocessor console script."""
    app()


if __name__ == "__main__":
    main()
