# ABOUTME: The `shelfkeeper lookup` command for resolving an ISBN to metadata.
# ABOUTME: Runs the full lookup pipeline and prints the result as a table or JSON.

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfkeeper.cli.options import db_option, settings_for
from shelfkeeper.core.lookup import InvalidIsbnError, LookupTrace, MetadataNotFoundError
from shelfkeeper.core.services import build_services
from shelfkeeper.metadata.types import ResolvedMetadata


def _metadata_table(resolved: ResolvedMetadata) -> Table:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=12)
    table.add_column("Value")

    table.add_row("ISBN-13", resolved.isbn13)
    if resolved.isbn10:
        table.add_row("ISBN-10", resolved.isbn10)
    table.add_row("Title", resolved.title)
    table.add_row("Author", resolved.authors or "unknown")
    if resolved.publisher:
        table.add_row("Publisher", resolved.publisher)
    if resolved.published_year:
        table.add_row("Year", resolved.published_year)
    table.add_row("Language", resolved.language or "?")
    if resolved.page_count:
        table.add_row("Pages", str(resolved.page_count))
    if resolved.cover_url:
        table.add_row("Cover", resolved.cover_url)
    if resolved.description:
        table.add_row("Description", resolved.description)
    table.add_row("Source", resolved.source.value)
    return table


def _trace_table(trace: LookupTrace) -> Table:
    table = Table(title="Sources tried", title_justify="left")
    table.add_column("Source")
    table.add_column("ISBN")
    table.add_column("Result")
    for attempt in trace.attempts:
        if attempt.error:
            result = f"[red]error[/red] {attempt.error}"
        elif attempt.found:
            result = "[green]found[/green]"
        else:
            result = "[dim]none[/dim]"
        table.add_row(attempt.source, attempt.isbn, result)
    return table


@click.command("lookup")
@click.argument("isbn")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the flat JSON object.")
@click.option("--trace", "show_trace", is_flag=True, default=False, help="Show every source attempt.")
@db_option
def lookup(isbn: str, as_json: bool, show_trace: bool, db_path: Path | None) -> None:
    """Look up book metadata by ISBN-10 or ISBN-13."""
    console = Console()
    services = build_services(settings_for(db_path))
    try:
        resolved, trace = services.lookup.lookup_with_trace(isbn)
    except InvalidIsbnError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc
    except MetadataNotFoundError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise SystemExit(1) from exc
    finally:
        services.close()

    if as_json:
        click.echo(json.dumps(resolved.to_dict(), ensure_ascii=False, indent=2))
        return

    console.print(_metadata_table(resolved))
    if trace.cache_hit:
        console.print("\n[dim]from cache[/dim]")
    elif show_trace:
        console.print()
        console.print(_trace_table(trace))
