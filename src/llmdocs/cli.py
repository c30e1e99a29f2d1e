"""Command line interface for llmdocs."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape

from llmdocs.config import STAGES, AppConfig
from llmdocs.errors import LlmDocsError
from llmdocs.index.generator import Generator
from llmdocs.retrieval.reader import CallInfo, Reader
from llmdocs.retrieval.search import SearchFilters, Searcher
from llmdocs.retrieval.store import DocsStore, VersionStore, dump_chunk
from llmdocs.utils.text import parse_csv


console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="llmdocs - export API docs as Markdown and chunks for LLM retrieval")

ROOT_HELP = "Generated docs root (default: ./llm-docs)"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except LlmDocsError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _docs_root(root: Optional[Path]) -> Path:
    config = AppConfig(docs_root=root if root is not None else AppConfig().docs_root)
    return config.resolve_docs_root(Path.cwd())


def _open_version(root: Optional[Path], version: Optional[str], quiet: bool) -> VersionStore:
    store = DocsStore(_docs_root(root)).open_version(version)
    if not quiet:
        err_console.print(f"[dim]Using {escape(str(store.version_dir))}[/dim]")
    return store


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _echo_call(info: CallInfo, as_json: bool) -> None:
    if as_json:
        _echo_json(info.to_dict())
        return
    typer.echo(info.id)
    typer.echo(f"call: {info.call or '(none)'}")
    typer.echo(f"takes_table: {str(info.takes_table).lower()}")
    typer.echo(f"table_optional: {str(info.table_optional).lower()}")


@app.command()
def generate(
    input_dir: Path = typer.Option(AppConfig().input_dir, "--input", help="Directory holding the API JSON documents"),
    out: Path = typer.Option(AppConfig().docs_root, "--out", help="Output docs root"),
    version: Optional[str] = typer.Option(None, "--version", help="Override the detected version (X.Y.Z)"),
    only: Optional[str] = typer.Option(None, "--only", help="Comma-separated subset of runtime,prototype,auxiliary"),
    force: bool = typer.Option(False, "--force", help="Replace an existing version directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Convert an API documentation drop into Markdown pages and a chunk corpus."""
    _setup_logging(verbose)
    config = AppConfig(input_dir=input_dir, docs_root=out)
    families = parse_csv(only)
    unknown = [value for value in families if value not in STAGES]
    if unknown:
        raise typer.BadParameter(f"Unknown value(s): {', '.join(unknown)}", param_hint="--only")

    with _handle_errors():
        generator = Generator(
            config.resolve_input_dir(Path.cwd()),
            config.resolve_docs_root(Path.cwd()),
            version=version,
            only=families or None,
            force=force,
            max_search_depth=config.max_search_depth,
        )
        result = generator.run()

    counts = result.manifest["counts"]
    console.print(f"Generated [bold]{escape(result.version)}[/bold] into {escape(str(result.version_dir))}")
    console.print(
        f"Pages: {result.pages}, chunks: {counts['chunks']}, "
        f"auxiliary pages: {counts['auxiliary']['pages']}"
    )


@app.command()
def versions(
    root: Optional[Path] = typer.Option(None, "--root", envvar="LLMDOCS_ROOT", help=ROOT_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """List generated versions, oldest first."""
    with _handle_errors():
        store = DocsStore(_docs_root(root))
        found = store.versions()
        if not found:
            raise LlmDocsError(f"No versions found under: {store.root}")

    if as_json:
        _echo_json({"root": str(store.root), "versions": found, "latest": found[-1]})
        return
    for name in found:
        typer.echo(name)


@app.command()
def search(
    query: str = typer.Argument(..., help="Case-insensitive substring to look for"),
    root: Optional[Path] = typer.Option(None, "--root", envvar="LLMDOCS_ROOT", help=ROOT_HELP),
    version: Optional[str] = typer.Option(None, "--version", help="Version to search (default: latest)"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
    limit: int = typer.Option(AppConfig().search_limit, "--limit", help="Maximum number of hits"),
    stage: Optional[str] = typer.Option(None, "--stage", help="Comma-separated stages"),
    kind: Optional[str] = typer.Option(None, "--kind", help="Comma-separated chunk kinds"),
    name: Optional[str] = typer.Option(None, "--name", help="Comma-separated symbol names"),
    member: Optional[str] = typer.Option(None, "--member", help="Comma-separated member names"),
    open_hits: bool = typer.Option(False, "--open", help="Open the top hit and print its page section"),
    print_ids: bool = typer.Option(False, "--print-ids", help="Print only chunk ids"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress notes on stderr"),
) -> None:
    """Rank chunks by a deterministic substring score."""
    if limit <= 0:
        raise typer.BadParameter(f"Invalid --limit: {limit}", param_hint="--limit")
    if not query.strip():
        raise typer.BadParameter("Query must not be empty", param_hint="QUERY")
    filters = SearchFilters.from_csv(stage=stage, kind=kind, name=name, member=member)

    with _handle_errors():
        store = _open_version(root, version, quiet)
        hits = Searcher(store).search(query, filters=filters, limit=limit)

        if as_json:
            _echo_json({"version": store.version, "query": query, "hits": [hit.to_dict() for hit in hits]})
            return
        if not hits:
            if not quiet:
                err_console.print("[yellow]No matches found.[/yellow]")
            return

        if print_ids:
            for hit in hits:
                typer.echo(hit.id)
            return
        if open_hits:
            top = hits[0]
            typer.echo(f"{top.score}\t{top.stage}\t{top.kind}\t{top.id}\t{top.location}")
            typer.echo(Reader(store).open(top.id).text)
            return
        for hit in hits:
            typer.echo(f"{hit.score}\t{hit.stage}\t{hit.kind}\t{hit.id}\t{hit.location}")
            typer.echo(f"  {hit.snippet}")


@app.command()
def get(
    chunk_id: str = typer.Argument(..., metavar="ID", help="Chunk id"),
    root: Optional[Path] = typer.Option(None, "--root", envvar="LLMDOCS_ROOT", help=ROOT_HELP),
    version: Optional[str] = typer.Option(None, "--version", help="Version (default: latest)"),
    as_json: bool = typer.Option(False, "--json", help="Print the full record as JSON"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress notes on stderr"),
) -> None:
    """Print one chunk by id."""
    with _handle_errors():
        record = Reader(_open_version(root, version, quiet)).get(chunk_id)
    if as_json:
        typer.echo(dump_chunk(record))
    else:
        typer.echo(record.text)


@app.command("open")
def open_(
    target: str = typer.Argument(..., metavar="TARGET", help="Chunk id, RELPATH[#ANCHOR] or symbols key"),
    root: Optional[Path] = typer.Option(None, "--root", envvar="LLMDOCS_ROOT", help=ROOT_HELP),
    version: Optional[str] = typer.Option(None, "--version", help="Version (default: latest)"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
    show_call: bool = typer.Option(False, "--call", help="Print call-convention metadata instead"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress notes on stderr"),
) -> None:
    """Print a page, or the section of a page a chunk or symbol points at."""
    with _handle_errors():
        reader = Reader(_open_version(root, version, quiet))
        if show_call:
            _echo_call(reader.call(target), as_json)
            return
        result = reader.open(target)
    if as_json:
        _echo_json(result.to_dict())
    else:
        typer.echo(result.text.rstrip("\n"))


@app.command()
def call(
    target: str = typer.Argument(..., metavar="TARGET", help="Chunk id or symbols key"),
    root: Optional[Path] = typer.Option(None, "--root", envvar="LLMDOCS_ROOT", help=ROOT_HELP),
    version: Optional[str] = typer.Option(None, "--version", help="Version (default: latest)"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress notes on stderr"),
) -> None:
    """Show how a method or global function is called."""
    with _handle_errors():
        info = Reader(_open_version(root, version, quiet)).call(target)
    _echo_call(info, as_json)
