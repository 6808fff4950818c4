# ABOUTME: Parsing functions for Open Library API JSON responses.
# ABOUTME: Converts the edition, books-data, and search payloads into CandidateMetadata.

import re
from typing import Any

from shelfkeeper.metadata.types import CandidateMetadata, Source

_COVERS_BASE_URL = "https://covers.openlibrary.org/b"
_YEAR_RE = re.compile(r"\d{4}")

# MARC language codes used by Open Library, mapped to ISO 639-1.
_MARC_LANGUAGES: dict[str, str] = {
    "eng": "en",
    "rus": "ru",
    "ukr": "uk",
    "bel": "be",
    "ger": "de",
    "fre": "fr",
    "spa": "es",
    "ita": "it",
    "pol": "pl",
    "jpn": "ja",
    "chi": "zh",
}


def normalize_language(code: str | None) -> str | None:
    """Reduce an Open Library language key or MARC code to ISO 639-1.

    "/languages/rus" and "rus" both become "ru". Unknown codes are returned
    lowercased as-is; empty values become None.
    """
    if not code:
        return None
    code = code.rsplit("/", 1)[-1].strip().lower()
    if not code:
        return None
    return _MARC_LANGUAGES.get(code, code)


def extract_year(date: Any) -> str | None:
    """Pull a four-digit year out of a free-form publish date."""
    if date is None:
        return None
    match = _YEAR_RE.search(str(date))
    return match.group() if match else None


def _first(values: list[Any] | None) -> Any:
    return values[0] if values else None


def _text_value(value: Any) -> str | None:
    """Open Library text fields are either a plain string or {"value": ...}."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        return value.get("value") or None
    return None


def _positive_int(value: Any) -> int | None:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def build_cover_url(cover_id: int | str, size: str = "L") -> str:
    """Build an Open Library cover URL from a numeric cover id.

    Args:
        cover_id: The cover id from an edition's "covers" or a search doc's "cover_i".
        size: Image size, "S" (small), "M" (medium), or "L" (large).
    """
    return f"{_COVERS_BASE_URL}/id/{cover_id}-{size}.jpg"


def parse_isbn_response(data: dict[str, Any]) -> CandidateMetadata:
    """Parse an Open Library /isbn/{isbn}.json edition response.

    Authors are only referenced by key in this payload; the provider resolves
    them separately and replaces the empty authors string.
    """
    covers = [c for c in data.get("covers", []) if isinstance(c, int) and c > 0]
    languages = data.get("languages", [])
    language_key = languages[0].get("key", "") if languages else None

    return CandidateMetadata(
        source=Source.OPENLIBRARY,
        title=data.get("title", "Unknown"),
        isbn13=_first(data.get("isbn_13")),
        isbn10=_first(data.get("isbn_10")),
        publisher=_first(data.get("publishers")),
        published_year=extract_year(data.get("publish_date")),
        language=normalize_language(language_key),
        page_count=_positive_int(data.get("number_of_pages")),
        description=_text_value(data.get("description")),
        cover_url=build_cover_url(covers[0]) if covers else None,
    )


def author_keys(data: dict[str, Any]) -> list[str]:
    """Author keys referenced by an edition response."""
    return [entry["key"] for entry in data.get("authors", []) if entry.get("key")]


def parse_author_name(data: dict[str, Any]) -> str:
    """Extract the author name from an Open Library Author response."""
    return data.get("name", "Unknown")


def parse_data_response(data: dict[str, Any], isbn: str) -> CandidateMetadata | None:
    """Parse an /api/books?bibkeys=ISBN:...&jscmd=data response.

    The payload is keyed by the requested bibkey; a missing key means the
    catalog has no record for that ISBN.
    """
    book = data.get(f"ISBN:{isbn}")
    if not book:
        return None

    identifiers = book.get("identifiers", {})
    authors = ", ".join(a.get("name", "") for a in book.get("authors", []) if a.get("name"))
    publishers = [p.get("name", "") for p in book.get("publishers", []) if p.get("name")]
    cover = book.get("cover", {})

    return CandidateMetadata(
        source=Source.OPENLIBRARY_DATA,
        title=book.get("title", "Unknown"),
        isbn13=_first(identifiers.get("isbn_13")),
        isbn10=_first(identifiers.get("isbn_10")),
        authors=authors,
        publisher=", ".join(publishers) or None,
        published_year=extract_year(book.get("publish_date")),
        page_count=_positive_int(book.get("number_of_pages")),
        description=_text_value(book.get("notes")),
        cover_url=cover.get("large") or cover.get("medium") or None,
    )


def parse_search_response(data: dict[str, Any]) -> CandidateMetadata | None:
    """Parse a /search.json?isbn=... response, taking the first doc."""
    docs = data.get("docs", [])
    if not docs:
        return None
    doc = docs[0]

    isbns = doc.get("isbn", [])
    cover_id = doc.get("cover_i")

    return CandidateMetadata(
        source=Source.OPENLIBRARY_SEARCH,
        title=doc.get("title", "Unknown"),
        isbn13=next((i for i in isbns if len(i) == 13), None),
        isbn10=next((i for i in isbns if len(i) == 10), None),
        authors=", ".join(doc.get("author_name", [])),
        publisher=_first(doc.get("publisher")),
        published_year=extract_year(doc.get("first_publish_year")),
        language=normalize_language(_first(doc.get("language"))),
        page_count=_positive_int(doc.get("number_of_pages_median")),
        cover_url=build_cover_url(cover_id) if cover_id else None,
    )
