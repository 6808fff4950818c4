# ABOUTME: CLI package for shelfkeeper, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from shelfkeeper.cli.commands import cache_cmd, export_cmd, lookup_cmd, serve_cmd, validate_cmd


@click.group()
@click.version_option(package_name="shelfkeeper")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log source attempts and failures.")
def cli(verbose: bool) -> None:
    """shelfkeeper - ISBN lookup and personal library backend."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


cli.add_command(lookup_cmd.lookup)
cli.add_command(validate_cmd.validate)
cli.add_command(cache_cmd.cache)
cli.add_command(export_cmd.export)
cli.add_command(serve_cmd.serve)
