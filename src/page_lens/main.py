"""
Page Lens - CLI Entry Point.

SOURCE is an HTML file, or an http(s) URL rendered with Playwright.

Configuration Priority:
    1. CLI options (--max-chars, --min-importance, etc.)
    2. Environment variables (PAGE_LENS__EXTRACTION__MAX_CHARS, etc.)
    3. Config file (page-lens.yaml)

Usage:
    page-lens overview article.html
    page-lens extract https://example.com/docs --structured --max-chars 4000
    page-lens section article.html "Pricing"
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from page_lens import __version__
from page_lens.config import Settings, get_settings, load_config
from page_lens.exceptions import PageLensError
from page_lens.extraction.options import ExtractionOptions, PriorityOrder
from page_lens.interfaces.provider import DocumentSnapshot
from page_lens.pipeline import PageAnalyzer
from page_lens.providers import HtmlSnapshotProvider, capture_url
from page_lens.reporting import format_extraction, format_top_nodes, format_tree_stats
from page_lens.utils.logging import setup_logging_from_settings

# Create the CLI app
app = typer.Typer(
    name="page-lens",
    help="Semantic page-content extraction for agents",
    add_completion=False,
)

console = Console(stderr=True)

_state = {"config": None, "verbose": False}


@app.callback()
def main(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
):
    """Semantic page-content extraction for agents."""
    _state["config"] = config
    _state["verbose"] = verbose


def _settings() -> Settings:
    try:
        settings = load_config(_state["config"]) if _state["config"] else get_settings()
    except PageLensError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)
    setup_logging_from_settings(settings.logging, verbose=_state["verbose"])
    return settings


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _snapshot(source: str, settings: Settings, visible: bool) -> DocumentSnapshot:
    if _is_url(source):
        return asyncio.run(capture_url(
            source,
            headless=settings.provider.headless and not visible,
            timeout_ms=settings.provider.timeout_ms,
            max_depth=settings.provider.max_depth,
            wait_for_load=settings.provider.wait_for_load,
        ))
    
    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {source}")
    return HtmlSnapshotProvider.from_file(path).parse()


def _analyze(source: str, visible: bool = False):
    """Load settings, capture SOURCE and build a scored document."""
    settings = _settings()
    analyzer = PageAnalyzer(settings=settings)
    try:
        snapshot = _snapshot(source, settings, visible)
    except (OSError, PageLensError) as e:
        console.print(f"[red]✗ Could not read {source}: {e}[/red]")
        raise typer.Exit(1)
    return analyzer, analyzer.analyze_snapshot(snapshot)


def _emit(text: str) -> None:
    # Extracted text can contain [brackets]; keep it away from Rich markup
    typer.echo(text)


@app.command()
def extract(
    source: str = typer.Argument(..., help="HTML file or http(s) URL"),
    options: Optional[str] = typer.Option(
        None, "--options", "-o",
        help="Tool-style options, e.g. 'structured,main-only,importance=0.7,max=10000'",
    ),
    structured: bool = typer.Option(False, "--structured", "-s", help="Keep heading structure"),
    main_only: bool = typer.Option(False, "--main-only", help="Skip supplementary content"),
    max_chars: Optional[int] = typer.Option(None, "--max-chars", "-m", help="Character budget"),
    min_importance: Optional[float] = typer.Option(None, "--min-importance", help="Importance threshold"),
    priority: Optional[PriorityOrder] = typer.Option(None, "--priority", "-p", help="Node ordering"),
    sections: Optional[List[str]] = typer.Option(None, "--section", help="Only headings matching NAME"),
    visible: bool = typer.Option(False, "--visible", help="Show the browser for URLs"),
):
    """
    Extract page content within a character budget.
    
    Examples:
        page-lens extract article.html --structured
        page-lens extract article.html -o "main-only,importance=0.7,max=2000"
    """
    analyzer, document = _analyze(source, visible)
    
    request = ExtractionOptions.from_settings(analyzer.settings.extraction)
    if options:
        request = ExtractionOptions.from_option_string(options, defaults=request)
    if structured:
        request.include_structure = True
    if main_only:
        request.main_content_only = True
    if max_chars is not None:
        request.max_chars = max_chars
    if min_importance is not None:
        request.min_importance = min_importance
    if priority is not None:
        request.priority_order = priority
    if sections:
        request.sections = sections
    
    result = analyzer.extract(document, request)
    _emit(format_extraction(result))


@app.command()
def overview(
    source: str = typer.Argument(..., help="HTML file or http(s) URL"),
    visible: bool = typer.Option(False, "--visible", help="Show the browser for URLs"),
):
    """Show title, size, reading time and main sections."""
    analyzer, document = _analyze(source, visible)
    _emit(analyzer.overview(document))


@app.command()
def summary(
    source: str = typer.Argument(..., help="HTML file or http(s) URL"),
    max_length: Optional[int] = typer.Option(None, "--max-length", "-l", help="Summary length"),
    visible: bool = typer.Option(False, "--visible", help="Show the browser for URLs"),
):
    """Title plus the first paragraph of each major section."""
    analyzer, document = _analyze(source, visible)
    _emit(analyzer.summary(document, max_length))


@app.command()
def section(
    source: str = typer.Argument(..., help="HTML file or http(s) URL"),
    name: str = typer.Argument(..., help="Heading text to look for"),
    visible: bool = typer.Option(False, "--visible", help="Show the browser for URLs"),
):
    """Print one section (heading and its content) in structured form."""
    analyzer, document = _analyze(source, visible)
    result = analyzer.section(document, name)
    if result is None:
        _emit(f'Section "{name}" not found. Available sections:\n' + analyzer.overview(document))
        raise typer.Exit(1)
    _emit(result.content)


@app.command()
def stats(
    source: str = typer.Argument(..., help="HTML file or http(s) URL"),
    visible: bool = typer.Option(False, "--visible", help="Show the browser for URLs"),
):
    """Show node counts, importance distribution and page metadata."""
    _, document = _analyze(source, visible)
    _emit(format_tree_stats(document))


@app.command()
def top(
    source: str = typer.Argument(..., help="HTML file or http(s) URL"),
    n: int = typer.Option(10, "--count", "-n", help="Number of nodes"),
    visible: bool = typer.Option(False, "--visible", help="Show the browser for URLs"),
):
    """Show the most important content nodes."""
    _, document = _analyze(source, visible)
    _emit(format_top_nodes(document, n))


@app.command()
def dump(
    source: str = typer.Argument(..., help="HTML file or http(s) URL"),
    visible: bool = typer.Option(False, "--visible", help="Show the browser for URLs"),
):
    """Print the scored page document as JSON."""
    _, document = _analyze(source, visible)
    _emit(document.to_json())


@app.command()
def version():
    """Show version information."""
    _emit(f"page-lens v{__version__}")


if __name__ == "__main__":
    app()
