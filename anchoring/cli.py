"""Command-line interface for building and resolving anchors."""

import logging
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from anchoring import __version__
from anchoring.adapters import ChatGPTAdapter, HtmlAdapter, create_default_registry
from anchoring.adapters.chatgpt import message_node_id
from anchoring.config import EXACT_THRESHOLD, FUZZY_THRESHOLD, ResolverConfig
from anchoring.document import Document
from anchoring.errors import AnchoringError, ScrapeError
from anchoring.linearizer import linearize
from anchoring.logging_config import setup_logging
from anchoring.materializer import materialize
from anchoring.resolver import resolve
from anchoring.selectors import Selector, build_selector

app = typer.Typer(
    name="anchor",
    help="Build and resolve durable text anchors in chat transcripts.",
)
console = Console()

HTML_SUFFIXES = {".html", ".htm"}


def load_document(path: Path, url: str | None = None) -> Document:
    """Load a transcript file as a Document.

    HTML files go through the adapter for ``url`` when one is given;
    otherwise the ChatGPT adapter is tried first and the generic HTML
    adapter is the fallback. Any other file is read as plain text.
    """
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() not in HTML_SUFFIXES:
        return Document.from_text(content)

    if url:
        adapter = create_default_registry().get_adapter(url) or HtmlAdapter()
        return adapter.to_document(content, url)

    try:
        return ChatGPTAdapter().to_document(content)
    except ScrapeError:
        return HtmlAdapter().to_document(content)


def _scope(document: Document, message: int | None) -> Document:
    return document if message is None else document.scoped(message_node_id(message))


def _configure_logging(verbose: bool) -> None:
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command(name="linearize")
def linearize_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Transcript file"),
    message: int | None = typer.Option(None, "--message", "-m", help="Message index"),
    url: str | None = typer.Option(None, "--url", help="Page URL (selects adapter)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Print the normalized text of a transcript."""
    _configure_logging(verbose)
    try:
        linearized = linearize(_scope(load_document(path, url), message))
    except AnchoringError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print(linearized.text, markup=False, highlight=False, soft_wrap=True)
    console.print(
        f"[dim]{len(linearized.text)} characters, {len(linearized.map)} map entries[/dim]"
    )


@app.command()
def build(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Transcript file"),
    start: int = typer.Option(..., "--start", "-s", help="Linear start offset"),
    end: int = typer.Option(..., "--end", "-e", help="Linear end offset"),
    message: int | None = typer.Option(None, "--message", "-m", help="Message index"),
    url: str | None = typer.Option(None, "--url", help="Page URL (selects adapter)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Build a selector for a linear range and print it as annotation YAML."""
    _configure_logging(verbose)
    try:
        linearized = linearize(_scope(load_document(path, url), message))
        selector = build_selector(linearized, start, end)
    except AnchoringError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print(
        selector.to_yaml(), markup=False, highlight=False, soft_wrap=True, end=""
    )


@app.command(name="resolve")
def resolve_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Transcript file"),
    selector_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Annotation YAML with the selector"
    ),
    fuzzy_threshold: float = typer.Option(
        FUZZY_THRESHOLD, "--fuzzy-threshold", "-t", help="Minimum fuzzy confidence"
    ),
    message: int | None = typer.Option(None, "--message", "-m", help="Message index"),
    url: str | None = typer.Option(None, "--url", help="Page URL (selects adapter)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Resolve a stored selector against a transcript."""
    _configure_logging(verbose)
    try:
        selector = Selector.from_annotation(selector_path.read_text(encoding="utf-8"))
        config = ResolverConfig(fuzzy_threshold=min(fuzzy_threshold, EXACT_THRESHOLD))
        linearized = linearize(_scope(load_document(path, url), message))
        result = resolve(linearized, selector, config)
        if result.orphaned:
            console.print("[bold yellow]Orphaned:[/bold yellow] quote not found")
            raise typer.Exit(1)
        resolved = result.require(selector.exact)
        native = materialize(linearized, resolved)
    except (AnchoringError, ValueError, yaml.YAMLError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    table = Table(show_header=False)
    table.add_row("method", resolved.method.value)
    table.add_row("confidence", f"{resolved.confidence:.3f}")
    table.add_row("range", f"[{resolved.start}, {resolved.end})")
    table.add_row("text", Text(resolved.matched_text))
    table.add_row("start node", f"{native.start.node.node_id} @ {native.start.offset}")
    table.add_row("end node", f"{native.end.node.node_id} @ {native.end.offset}")
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"anchor {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
