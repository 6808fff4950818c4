# ABOUTME: Builds the collaborators one process needs from Settings.
# ABOUTME: The CLI and web app share this wiring instead of module-level clients.

import sqlite3
from dataclasses import dataclass

from shelfkeeper.config import Settings
from shelfkeeper.core.covers import LocalBlobStorage
from shelfkeeper.core.lookup import IsbnLookup, build_sources
from shelfkeeper.db.cache import MetadataCache
from shelfkeeper.db.connection import open_database
from shelfkeeper.db.library import SharedLibrary, UserBooks
from shelfkeeper.metadata.http import HttpClient, ShelfHttpClient


@dataclass
class Services:
    """Everything wired to one database connection and one HTTP client."""

    conn: sqlite3.Connection
    cache: MetadataCache
    lookup: IsbnLookup
    storage: LocalBlobStorage
    library: SharedLibrary
    user_books: UserBooks

    def close(self) -> None:
        self.conn.close()


def build_services(settings: Settings, http_client: HttpClient | None = None) -> Services:
    """Open the database and construct the lookup pipeline and tables."""
    http = http_client or ShelfHttpClient(timeout=settings.timeout)
    conn = open_database(settings.db_path)
    cache = MetadataCache(conn)
    storage = LocalBlobStorage(settings.storage_dir, settings.public_url, http)
    lookup = IsbnLookup(cache, build_sources(http, settings), storage=storage)
    return Services(
        conn=conn,
        cache=cache,
        lookup=lookup,
        storage=storage,
        library=SharedLibrary(conn),
        user_books=UserBooks(conn),
    )
