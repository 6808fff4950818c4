# ABOUTME: The `shelfkeeper export` command for writing a user's shelf to a file.
# ABOUTME: Produces CSV or JSON with the same field whitelist as the web export.

from pathlib import Path

import click
from rich.console import Console

from shelfkeeper.cli.options import db_option, settings_for
from shelfkeeper.core.export import FORMATS, ExportError, export_user_books
from shelfkeeper.core.services import build_services


@click.command("export")
@click.argument("user_id")
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(FORMATS, case_sensitive=False),
    default="csv",
    help="Output format (default: csv).",
)
@click.option("--fields", default=None, help="Comma-separated columns to include.")
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory to write the export into (default: current directory).",
)
@db_option
def export(
    user_id: str, fmt: str, fields: str | None, output_dir: Path, db_path: Path | None
) -> None:
    """Export USER_ID's books to CSV or JSON."""
    console = Console()
    services = build_services(settings_for(db_path))
    try:
        export_file = export_user_books(
            services.user_books, user_id, fmt, fields, storage=services.storage
        )
    except ExportError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc
    finally:
        services.close()

    output_dir.mkdir(parents=True, exist_ok=True)
    dest = output_dir / export_file.filename
    dest.write_bytes(export_file.content)
    console.print(f"[green]Written:[/green] {dest}")
