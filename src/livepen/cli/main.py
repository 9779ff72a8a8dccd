"""Livepen CLI: autocomplete engine for live-coding playgrounds."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from livepen import __version__
from livepen.config.dialects import Dialect, get_dialect, resolve_dialect
from livepen.core.parsers.base import Position
from livepen.errors import UnknownDialectError

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="livepen",
    help="Livepen: autocomplete engine for live-coding playgrounds.",
    no_args_is_help=True,
)

_LINE = typer.Option(..., "--line", "-l", help="Cursor line (1-based).")
_COLUMN = typer.Option(..., "--column", "-c", help="Cursor column (0-based).")
_DIALECT = typer.Option(
    None,
    "--dialect",
    "-d",
    help="Dialect name or alias (js, ts, react, vue). Defaults from the file extension.",
)


def _version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"Livepen v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Optional[bool] = typer.Option(  # noqa: N803
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log pipeline stages to stderr."),
) -> None:
    """Livepen: autocomplete engine for live-coding playgrounds."""
    _configure_logging(verbose)


def _read_source(path: Path) -> str:
    """Read *path* or exit with code 1."""
    if not path.is_file():
        console.print(f"[red]Error:[/red] {path} is not a file.")
        raise typer.Exit(code=1)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Error:[/red] cannot read {path}: {exc}")
        raise typer.Exit(code=1) from exc


def _pick_dialect(path: Path, dialect: str | None) -> Dialect:
    """Explicit ``--dialect`` wins; otherwise derive from the extension."""
    if dialect is not None:
        try:
            return resolve_dialect(dialect)
        except UnknownDialectError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(code=1) from exc
    detected = get_dialect(path)
    if detected is None:
        console.print(
            f"[red]Error:[/red] cannot infer a dialect for {path.name}; pass --dialect."
        )
        raise typer.Exit(code=1)
    return detected


@app.command()
def complete(
    path: Path = typer.Argument(..., help="Source file to complete in."),
    line: int = _LINE,
    column: int = _COLUMN,
    dialect: Optional[str] = _DIALECT,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of suggestions."),
) -> None:
    """Show ranked completions at a cursor position."""
    from livepen.core.session import CompletionSession

    source = _read_source(path)
    resolved = _pick_dialect(path, dialect)
    session = CompletionSession()
    items = session.complete(source, Position(line, column), resolved)[:limit]

    if as_json:
        console.print_json(json.dumps([item.to_dict() for item in items]))
        return

    if not items:
        console.print("No completions.")
        return

    table = Table(title=f"Completions at {path.name}:{line}:{column}")
    table.add_column("Label", style="bold")
    table.add_column("Kind")
    table.add_column("Detail", style="dim")
    table.add_column("Score", justify="right")
    for item in items:
        table.add_row(item.label, item.kind, item.detail or "", str(item.rank_score))
    console.print(table)


@app.command()
def context(
    path: Path = typer.Argument(..., help="Source file to analyse."),
    line: int = _LINE,
    column: int = _COLUMN,
    dialect: Optional[str] = _DIALECT,
) -> None:
    """Classify the edit context at a cursor position."""
    from livepen.core.session import CompletionSession

    source = _read_source(path)
    resolved = _pick_dialect(path, dialect)
    descriptor = CompletionSession().analyze(source, Position(line, column), resolved)

    console.print(f"[bold]Context:[/bold]       {descriptor.object_type.value}")
    console.print(f"  Dialect:      {descriptor.dialect.value}")
    console.print(f"  Access path:  {'.'.join(descriptor.access_path) or '-'}")
    console.print(f"  Token:        {descriptor.token!r}")
    if descriptor.node is not None:
        console.print(f"  Node:         {descriptor.node.kind}")
    if descriptor.from_fallback:
        console.print("  [yellow]No syntax tree; pattern fallback used.[/yellow]")


@app.command()
def scope(
    path: Path = typer.Argument(..., help="Source file to analyse."),
    dialect: Optional[str] = _DIALECT,
) -> None:
    """List the declarations collected from a file."""
    from livepen.core.pipeline import analyze_source

    source = _read_source(path)
    resolved = _pick_dialect(path, dialect)
    descriptor, parsed = analyze_source(source, Position(1, 0), resolved)
    table_data = descriptor.scope

    if table_data.is_empty():
        console.print("No declarations found.")
        return

    console.print(f"[bold]Scope of[/bold] {path.name}" + ("" if parsed else " (pattern fallback)"))
    for name, var in table_data.variables.items():
        console.print(f"  {var.kind} {name}: {var.type}")
        for prop, prop_type in var.properties.items():
            console.print(f"      .{prop}: {prop_type}")
    for func in table_data.functions.values():
        console.print(f"  {func.signature()}")
    for cls in table_data.classes.values():
        console.print(f"  {cls.signature()}")
    for imp in table_data.imports:
        console.print(f"  import {', '.join(imp.members) or '-'} from '{imp.module}'")


@app.command()
def locate(
    path: Path = typer.Argument(..., help="Source file to analyse."),
    line: int = _LINE,
    column: int = _COLUMN,
    dialect: Optional[str] = _DIALECT,
) -> None:
    """Show the syntax node the locator picks at a cursor position."""
    from livepen.core.analysis.locator import locate as locate_node
    from livepen.core.parsers import get_parser
    from livepen.core.pipeline import parse_source

    source = _read_source(path)
    resolved = _pick_dialect(path, dialect)
    unit = parse_source(source, get_parser(resolved))
    if unit is None:
        console.print("No syntax tree (blank source or dangling trailing token).")
        return

    node, parent = locate_node(unit.root, Position(line, column))
    if node is None:
        console.print(f"No node contains {line}:{column}.")
        return

    span = node.span
    console.print(f"[bold]Node:[/bold]   {node.kind}")
    console.print(
        f"  Span:   {span.start_line}:{span.start_column}-{span.end_line}:{span.end_column}"
    )
    if node.text:
        console.print(f"  Text:   {node.text!r}")
    console.print(f"  Parent: {parent.kind if parent is not None else '-'}")


@app.command()
def watch(
    path: Path = typer.Argument(..., help="Source file to watch."),
    line: int = _LINE,
    column: int = _COLUMN,
    dialect: Optional[str] = _DIALECT,
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum number of suggestions."),
) -> None:
    """Re-run completion whenever the file changes."""
    import asyncio

    from livepen.core.completion.ranker import CompletionItem
    from livepen.core.watcher import watch_file

    _read_source(path)
    resolved = _pick_dialect(path, dialect)

    def on_result(changed: Path, items: list[CompletionItem]) -> None:
        labels = ", ".join(item.label for item in items[:limit])
        console.print(f"[bold]{changed.name}:{line}:{column}[/bold] {labels or '(none)'}")

    console.print(f"[bold]Watching[/bold] {path} for changes (Ctrl+C to stop)")
    try:
        asyncio.run(watch_file(path, Position(line, column), on_result, dialect=resolved))
    except KeyboardInterrupt:
        console.print("\n[bold]Watch stopped.[/bold]")


@app.command()
def mcp() -> None:
    """Start MCP server (stdio transport)."""
    import asyncio

    from livepen.mcp.server import main as mcp_main

    asyncio.run(mcp_main())
