# ABOUTME: The ISBN metadata cache, keyed by canonical ISBN-13.
# ABOUTME: Reads cached lookups and upserts resolved metadata with last-writer-wins semantics.

import sqlite3

from shelfkeeper.db.mapping import CACHE_COLUMNS, resolved_to_row, row_to_resolved
from shelfkeeper.metadata.types import ResolvedMetadata

_UPDATE_COLUMNS = [c for c in CACHE_COLUMNS if c != "isbn13"]

_UPSERT_SQL = (
    f"INSERT INTO isbn_cache ({', '.join(CACHE_COLUMNS)}) "
    f"VALUES ({', '.join(':' + c for c in CACHE_COLUMNS)}) "
    "ON CONFLICT(isbn13) DO UPDATE SET "
    + ", ".join(f"{c} = excluded.{c}" for c in _UPDATE_COLUMNS)
    + ", updated_at = strftime('%Y-%m-%dT%H:%M:%S', 'now')"
)


class MetadataCache:
    """Wraps a sqlite3 connection and provides typed access to isbn_cache.

    There is at most one row per ISBN-13. Concurrent writers are not
    coordinated; the last upsert wins.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_by_isbn13(self, isbn13: str) -> ResolvedMetadata | None:
        """Retrieve the cached metadata for a canonical ISBN-13."""
        cursor = self._conn.execute("SELECT * FROM isbn_cache WHERE isbn13 = ?", (isbn13,))
        row = cursor.fetchone()
        return row_to_resolved(row) if row else None

    def upsert(self, resolved: ResolvedMetadata) -> None:
        """Insert or overwrite the row for resolved.isbn13."""
        self._conn.execute(_UPSERT_SQL, resolved_to_row(resolved))
        self._conn.commit()

    def delete(self, isbn13: str) -> None:
        """Delete a cached row.

        Raises:
            ValueError: If nothing is cached for isbn13.
        """
        cursor = self._conn.execute("DELETE FROM isbn_cache WHERE isbn13 = ?", (isbn13,))
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ValueError(f"No cached metadata for {isbn13}")

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM isbn_cache").fetchone()[0]

    def clear(self) -> int:
        """Drop every cached row and return how many were removed."""
        cursor = self._conn.execute("DELETE FROM isbn_cache")
        self._conn.commit()
        return cursor.rowcount
