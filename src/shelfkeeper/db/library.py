# ABOUTME: The shared book library and per-user shelves.
# ABOUTME: Duplicate-aware inserts on normalized title/author, title search, and shelf listing.

import sqlite3
from dataclasses import dataclass
from typing import Any

MIN_QUERY_LENGTH = 2
DEFAULT_SEARCH_LIMIT = 5

# Columns of user_books a caller may set or read.
USER_BOOK_COLUMNS = (
    "id",
    "title",
    "author",
    "status",
    "rating",
    "started_at",
    "finished_at",
    "added_at",
    "comment",
    "category",
    "tags",
    "cover_url",
    "isbn13",
)


def normalize_title(value: str) -> str:
    """Trim, collapse internal whitespace, and lowercase."""
    return " ".join(value.split()).lower()


def normalize_author(value: str) -> str:
    """Normalize like a title, then sort the name tokens.

    "Tolstoy Leo" and "leo  tolstoy" compare equal.
    """
    return " ".join(sorted(normalize_title(value).split(" ")))


def _check_writable(fields: dict[str, Any]) -> None:
    """Reject column names a caller may not set (id and user_id included)."""
    unknown = set(fields) - set(USER_BOOK_COLUMNS[1:])
    if unknown:
        raise ValueError(f"Unknown user_books fields: {', '.join(sorted(unknown))}")


@dataclass
class LibraryBook:
    """A title suggestion from the shared library."""

    title: str
    author: str
    cover_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "author": self.author, "cover_url": self.cover_url}


class SharedLibrary:
    """Books added by any user, deduplicated by normalized title and author."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def check_and_insert(self, title: str, author: str, cover_url: str | None = None) -> bool:
        """Add a book unless an equivalent one is already present.

        Returns:
            True if a row was inserted, False if it was a duplicate.

        Raises:
            ValueError: If title or author is blank.
        """
        if not title or not title.strip() or not author or not author.strip():
            raise ValueError("Both title and author are required")

        norm_title = normalize_title(title)
        norm_author = normalize_author(author)
        cursor = self._conn.execute("SELECT title, author FROM books_library")
        for row in cursor.fetchall():
            if (
                normalize_title(row["title"]) == norm_title
                and normalize_author(row["author"]) == norm_author
            ):
                return False

        self._conn.execute(
            "INSERT INTO books_library (title, author, cover_url) VALUES (?, ?, ?)",
            (title, author, cover_url),
        )
        self._conn.commit()
        return True

    def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[LibraryBook]:
        """Case-insensitive title substring search.

        Matching is done in Python so that non-ASCII titles fold case too.

        Raises:
            ValueError: If the query is shorter than MIN_QUERY_LENGTH.
        """
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            raise ValueError(f"Query must be at least {MIN_QUERY_LENGTH} characters")

        needle = query.strip().casefold()
        cursor = self._conn.execute("SELECT title, author, cover_url FROM books_library ORDER BY id")
        results: list[LibraryBook] = []
        for row in cursor:
            if needle in row["title"].casefold():
                results.append(LibraryBook(row["title"], row["author"], row["cover_url"]))
                if len(results) >= limit:
                    break
        return results


class ShelfEntryNotFoundError(ValueError):
    """Raised when a shelf entry id does not exist (or belongs to another user)."""


class UserBooks:
    """A user's shelf entries, the data behind library exports."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def add(self, user_id: str, title: str, **fields: Any) -> int:
        """Add a shelf entry and return its row ID.

        Raises:
            ValueError: On an unknown column name.
        """
        _check_writable(fields)

        row = {"user_id": user_id, "title": title, **fields}
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        cursor = self._conn.execute(
            f"INSERT INTO user_books ({columns}) VALUES ({placeholders})",
            list(row.values()),
        )
        self._conn.commit()
        return cursor.lastrowid  # type: ignore[return-value]

    def list_for_user(
        self, user_id: str, fields: list[str] | None = None
    ) -> list[dict[str, Any]]:
        """Return a user's entries, newest first, restricted to fields.

        Raises:
            ValueError: On an unknown column name.
        """
        selected = list(fields or USER_BOOK_COLUMNS)
        unknown = set(selected) - set(USER_BOOK_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown user_books fields: {', '.join(sorted(unknown))}")

        cursor = self._conn.execute(
            f"SELECT {', '.join(selected)} FROM user_books "
            "WHERE user_id = ? ORDER BY added_at DESC, id DESC",
            (user_id,),
        )
        return [dict(row) for row in cursor.fetchall()]

    def update(self, book_id: int, **fields: Any) -> None:
        """Update one or more columns of a shelf entry.

        Raises:
            ValueError: On an unknown column name.
            ShelfEntryNotFoundError: If book_id does not exist.
        """
        if not fields:
            return
        _check_writable(fields)

        set_clause = ", ".join(f"{name} = ?" for name in fields)
        cursor = self._conn.execute(
            f"UPDATE user_books SET {set_clause} WHERE id = ?",
            [*fields.values(), book_id],
        )
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ShelfEntryNotFoundError(f"Book with id {book_id} not found")

    def delete(self, book_id: int) -> None:
        """Remove a shelf entry.

        Raises:
            ShelfEntryNotFoundError: If book_id does not exist.
        """
        cursor = self._conn.execute("DELETE FROM user_books WHERE id = ?", (book_id,))
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ShelfEntryNotFoundError(f"Book with id {book_id} not found")

    def set_comment(self, book_id: int, user_id: str, comment: str | None) -> None:
        """Replace the comment on one of user_id's entries.

        Raises:
            ShelfEntryNotFoundError: If user_id has no entry with book_id.
        """
        cursor = self._conn.execute(
            "UPDATE user_books SET comment = ? WHERE id = ? AND user_id = ?",
            (comment, book_id, user_id),
        )
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ShelfEntryNotFoundError(f"Book with id {book_id} not found for {user_id}")
