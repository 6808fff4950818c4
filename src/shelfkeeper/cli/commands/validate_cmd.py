# ABOUTME: The `shelfkeeper validate` command for checking ISBN input offline.
# ABOUTME: Reports checksum validity and the canonical ISBN-13 without touching the network.

import click
from rich.console import Console
from rich.table import Table

from shelfkeeper.isbn import (
    clean,
    derived_isbn10,
    is_valid_isbn10,
    is_valid_isbn13,
    normalize_to_isbn13,
)


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


@click.command("validate")
@click.argument("isbn")
def validate(isbn: str) -> None:
    """Check an ISBN's checksum and show its canonical form."""
    console = Console()
    cleaned = clean(isbn)
    canonical = normalize_to_isbn13(isbn)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=12)
    table.add_column("Value")
    table.add_row("Cleaned", cleaned or "[dim](empty)[/dim]")
    table.add_row("ISBN-10", _yes_no(len(cleaned) == 10 and is_valid_isbn10(cleaned)))
    table.add_row("ISBN-13", _yes_no(is_valid_isbn13(cleaned)))
    console.print(table)

    if canonical is None:
        console.print(f"[red]Not a valid ISBN:[/red] {isbn}")
        raise SystemExit(1)

    console.print(f"Canonical: [bold]{canonical}[/bold]")
    isbn10 = derived_isbn10(canonical)
    if isbn10:
        console.print(f"ISBN-10 form: {isbn10}")
