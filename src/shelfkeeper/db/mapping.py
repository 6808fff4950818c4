# ABOUTME: Converts between ResolvedMetadata and SQLite row dictionaries.
# ABOUTME: Keeps column names in one place for the cache table.

from dataclasses import asdict
from typing import Any

from shelfkeeper.metadata.types import ResolvedMetadata, Source

CACHE_COLUMNS = (
    "isbn13",
    "isbn10",
    "source",
    "title",
    "authors",
    "publisher",
    "published_year",
    "language",
    "page_count",
    "description",
    "cover_url",
)


def resolved_to_row(resolved: ResolvedMetadata) -> dict[str, Any]:
    """Convert a ResolvedMetadata instance to a dict suitable for INSERT."""
    data = asdict(resolved)
    data["source"] = resolved.source.value
    return {column: data[column] for column in CACHE_COLUMNS}


def row_to_resolved(row: Any) -> ResolvedMetadata:
    """Convert a cache row (dict-like) back to a ResolvedMetadata instance."""
    return ResolvedMetadata(
        source=Source(row["source"]),
        isbn13=row["isbn13"],
        isbn10=row["isbn10"],
        title=row["title"],
        authors=row["authors"] or "",
        publisher=row["publisher"],
        published_year=row["published_year"],
        language=row["language"],
        page_count=row["page_count"],
        description=row["description"],
        cover_url=row["cover_url"],
    )
