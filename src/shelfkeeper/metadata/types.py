# ABOUTME: Core metadata data structures for ISBN lookup.
# ABOUTME: CandidateMetadata is one catalog's answer; ResolvedMetadata is the chosen, cached result.

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any


class Source(str, Enum):
    """Catalogs a candidate can originate from."""

    GOOGLE_BOOKS = "google_books"
    OPENLIBRARY = "openlibrary"
    OPENLIBRARY_DATA = "openlibrary_data"
    OPENLIBRARY_SEARCH = "openlibrary_search"
    RETAILER = "retailer"


@dataclass(frozen=True)
class CandidateMetadata:
    """One source's view of a book.

    Built fresh for every external call and never mutated afterwards. The
    isbn13 field carries whatever the source reported, which may be empty;
    the pipeline fills it in when resolving.
    """

    source: Source
    title: str
    isbn13: str | None = None
    isbn10: str | None = None
    authors: str = ""
    publisher: str | None = None
    published_year: str | None = None
    language: str | None = None
    page_count: int | None = None
    description: str | None = None
    cover_url: str | None = None

    @property
    def has_cover(self) -> bool:
        """Whether a non-empty cover URL is present."""
        return bool(self.cover_url)


# Wire names of the flattened JSON object, in field order.
_WIRE_NAMES: dict[str, str] = {
    "source": "source",
    "isbn13": "isbn13",
    "isbn10": "isbn10",
    "title": "title",
    "authors": "authors",
    "publisher": "publisher",
    "published_year": "publishedYear",
    "language": "language",
    "page_count": "pageCount",
    "description": "description",
    "cover_url": "coverUrl",
}


@dataclass(frozen=True)
class ResolvedMetadata:
    """The single chosen candidate for an ISBN, as persisted to the cache."""

    source: Source
    isbn13: str
    title: str
    isbn10: str | None = None
    authors: str = ""
    publisher: str | None = None
    published_year: str | None = None
    language: str | None = None
    page_count: int | None = None
    description: str | None = None
    cover_url: str | None = None

    @classmethod
    def from_candidate(cls, candidate: CandidateMetadata, isbn13: str) -> "ResolvedMetadata":
        """Promote a candidate, forcing the canonical ISBN-13."""
        fields = asdict(candidate)
        fields["isbn13"] = isbn13
        return cls(**fields)

    def with_changes(self, **changes: Any) -> "ResolvedMetadata":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the JSON wire object (camelCase keys, no envelope)."""
        data = asdict(self)
        data["source"] = self.source.value
        return {_WIRE_NAMES[name]: data[name] for name in _WIRE_NAMES}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResolvedMetadata":
        """Inverse of to_dict."""
        fields = {name: data.get(wire) for name, wire in _WIRE_NAMES.items()}
        fields["source"] = Source(fields["source"])
        fields["authors"] = fields["authors"] or ""
        return cls(**fields)
