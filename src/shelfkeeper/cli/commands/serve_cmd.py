# ABOUTME: The `shelfkeeper serve` command for running the HTTP API.
# ABOUTME: Starts the Flask development server on the configured host and port.

import os
from dataclasses import replace
from pathlib import Path

import click

from shelfkeeper.cli.options import db_option, settings_for
from shelfkeeper.config import DEFAULT_HOST, DEFAULT_PORT, default_public_url
from shelfkeeper.web import create_app


@click.command("serve")
@click.option("--host", default=DEFAULT_HOST, show_default=True)
@click.option("--port", type=int, default=DEFAULT_PORT, show_default=True)
@click.option("--debug", is_flag=True, default=False)
@db_option
def serve(host: str, port: int, debug: bool, db_path: Path | None) -> None:
    """Serve the lookup, library, and export API.

    Stored covers and exports are published under /storage on this server
    unless SHELFKEEPER_PUBLIC_URL points elsewhere.
    """
    settings = settings_for(db_path)
    if not os.environ.get("SHELFKEEPER_PUBLIC_URL"):
        settings = replace(settings, public_url=default_public_url(host, port))

    app = create_app(settings)
    app.run(host=host, port=port, debug=debug)
