# ABOUTME: Shared Click options and helpers for shelfkeeper CLI commands.
# ABOUTME: Provides the --db option and settings resolution from it.

from dataclasses import replace
from pathlib import Path

import click

from shelfkeeper.config import DEFAULT_DB_PATH, Settings

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    help=f"Path to the database (default: $SHELFKEEPER_DB or {DEFAULT_DB_PATH})",
)


def settings_for(db_path: Path | None) -> Settings:
    """Environment settings with the --db override applied."""
    settings = Settings.from_env()
    if db_path is not None:
        settings = replace(settings, db_path=db_path)
    return settings
