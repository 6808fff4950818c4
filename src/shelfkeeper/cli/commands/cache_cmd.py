# ABOUTME: The `shelfkeeper cache` command group for inspecting the metadata cache.
# ABOUTME: Shows cache size, forgets single ISBNs, and clears the cache.

from pathlib import Path

import click
from rich.console import Console

from shelfkeeper.cli.options import db_option, settings_for
from shelfkeeper.db.cache import MetadataCache
from shelfkeeper.db.connection import open_database
from shelfkeeper.isbn import normalize_to_isbn13


@click.group("cache")
def cache() -> None:
    """Inspect or reset the ISBN metadata cache."""


@cache.command("stats")
@db_option
def stats(db_path: Path | None) -> None:
    """Show how many ISBNs are cached."""
    conn = open_database(settings_for(db_path).db_path)
    try:
        count = MetadataCache(conn).count()
    finally:
        conn.close()
    Console().print(f"{count} cached ISBN{'s' if count != 1 else ''}")


@cache.command("forget")
@click.argument("isbn")
@db_option
def forget(isbn: str, db_path: Path | None) -> None:
    """Remove one ISBN so the next lookup queries the sources again."""
    console = Console()
    isbn13 = normalize_to_isbn13(isbn)
    if isbn13 is None:
        console.print(f"[red]Not a valid ISBN:[/red] {isbn}")
        raise SystemExit(1)

    conn = open_database(settings_for(db_path).db_path)
    try:
        MetadataCache(conn).delete(isbn13)
    except ValueError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise SystemExit(1) from exc
    finally:
        conn.close()
    console.print(f"[green]Forgot[/green] {isbn13}")


@cache.command("clear")
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@db_option
def clear(yes: bool, db_path: Path | None) -> None:
    """Delete every cached lookup."""
    if not yes:
        click.confirm("Delete all cached metadata?", abort=True)
    conn = open_database(settings_for(db_path).db_path)
    try:
        removed = MetadataCache(conn).clear()
    finally:
        conn.close()
    Console().print(f"Removed {removed} cached ISBN{'s' if removed != 1 else ''}")
