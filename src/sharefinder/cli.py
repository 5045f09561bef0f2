"""Command line interface for ShareFinder."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Optional

import openai
import typer
from rich.console import Console
from rich.table import Table

from sharefinder.config import AppConfig
from sharefinder.errors import AuthorizationError, SearchProviderError
from sharefinder.models import MetadataRecord, PipelineOutcome
from sharefinder.pipeline.service import SearchMode, run_search
from sharefinder.web.app import app as web_app


console = Console()
app = typer.Typer(help="ShareFinder - search SharePoint documents and extract relevant content")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_config(
    token: Optional[str],
    model: Optional[str],
    page_size: Optional[int],
    max_window_tokens: Optional[int],
) -> AppConfig:
    overrides: dict[str, object] = {}
    if token:
        overrides["credential_mode"] = "passthrough"
    if model:
        overrides["model_name"] = model
    if page_size:
        overrides["page_size"] = page_size
    if max_window_tokens:
        overrides["max_window_tokens"] = max_window_tokens
    return replace(AppConfig.from_env(), **overrides)


def _execute(
    mode: SearchMode,
    search_term: str,
    query: Optional[str],
    token: Optional[str],
    model: Optional[str],
    page_size: Optional[int],
    max_window_tokens: Optional[int],
) -> PipelineOutcome:
    try:
        config = _build_config(token, model, page_size, max_window_tokens)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        return asyncio.run(
            run_search(config, mode, search_term, query=query, bearer_token=token)
        )
    except AuthorizationError as exc:
        console.print(f"[red]Error generating Graph token: {exc}[/red]")
        raise typer.Exit(code=1)
    except SearchProviderError as exc:
        console.print(f"[red]Error performing search: {exc}[/red]")
        raise typer.Exit(code=1)
    except openai.OpenAIError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1)


def _print_records(outcome: PipelineOutcome, *, content_limit: int | None = None) -> None:
    if not outcome.records:
        console.print(f"[yellow]{outcome.message or 'No results found'}.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Rank")
    table.add_column("Document")
    table.add_column("Status")
    table.add_column("Content")

    for record in outcome.records:
        content = record.content
        if content_limit is not None:
            content = content.replace("\n", " ")[:content_limit]
        table.add_row(str(record.rank), record.name, record.status.value, content)

    console.print(table)


_TOKEN_HELP = "Graph access token; when omitted the configured credential mode is used"


@app.command()
def docs(
    search_term: str = typer.Argument(..., help="Keywords to search for"),
    token: Optional[str] = typer.Option(None, "--token", envvar="GRAPH_TOKEN", help=_TOKEN_HELP),
    page_size: Optional[int] = typer.Option(None, help="Number of hits to process"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List the documents matching a search."""
    _setup_logging(verbose)
    outcome = _execute(SearchMode.METADATA, search_term, None, token, None, page_size, None)
    if not outcome.records:
        console.print(f"[yellow]{outcome.message or 'No results found'}.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Title")
    table.add_column("Last modified")
    table.add_column("Modified by")
    table.add_column("URL")
    for record in outcome.records:
        if not isinstance(record, MetadataRecord):
            continue
        table.add_row(
            record.title or "",
            record.last_modified or "",
            record.modified_by or record.error or "",
            record.url or "",
        )
    console.print(table)


@app.command()
def text(
    search_term: str = typer.Argument(..., help="Keywords to search for"),
    token: Optional[str] = typer.Option(None, "--token", envvar="GRAPH_TOKEN", help=_TOKEN_HELP),
    page_size: Optional[int] = typer.Option(None, help="Number of hits to process"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show the extracted text of the documents matching a search."""
    _setup_logging(verbose)
    outcome = _execute(SearchMode.TEXT, search_term, None, token, None, page_size, None)
    _print_records(outcome, content_limit=180)


@app.command()
def ask(
    search_term: str = typer.Argument(..., help="Keywords to search for"),
    query: str = typer.Argument(..., help="Question to answer from the documents"),
    token: Optional[str] = typer.Option(None, "--token", envvar="GRAPH_TOKEN", help=_TOKEN_HELP),
    model: Optional[str] = typer.Option(None, help="OpenAI chat model name"),
    page_size: Optional[int] = typer.Option(None, help="Number of hits to process"),
    max_window_tokens: Optional[int] = typer.Option(None, help="Words per extraction call"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Extract the parts of matching documents relevant to a question."""
    _setup_logging(verbose)
    outcome = _execute(
        SearchMode.RELEVANCE, search_term, query, token, model, page_size, max_window_tokens
    )
    _print_records(outcome)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting ShareFinder API on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
