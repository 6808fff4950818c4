# ABOUTME: Open Library catalog source in its three ISBN lookup variants.
# ABOUTME: Direct edition lookup, keyed books-data batch, and search-by-isbn.

import logging
from dataclasses import replace
from enum import Enum

from shelfkeeper.metadata.http import HttpClient, MetadataFetchError
from shelfkeeper.metadata.openlibrary_parser import (
    author_keys,
    parse_author_name,
    parse_data_response,
    parse_isbn_response,
    parse_search_response,
)
from shelfkeeper.metadata.types import CandidateMetadata

logger = logging.getLogger(__name__)

_OL_BASE = "https://openlibrary.org"


class OpenLibraryMode(str, Enum):
    """Which Open Library endpoint a source instance queries."""

    DIRECT = "direct"
    DATA = "data"
    SEARCH = "search"


_SOURCE_NAMES: dict[OpenLibraryMode, str] = {
    OpenLibraryMode.DIRECT: "openlibrary",
    OpenLibraryMode.DATA: "openlibrary_data",
    OpenLibraryMode.SEARCH: "openlibrary_search",
}


class OpenLibrarySource:
    """Catalog source backed by the Open Library API.

    One instance queries one endpoint. All three endpoints index both ISBN
    forms, so the lookup pipeline may call them again with the ISBN-10.
    """

    accepts_isbn10 = True

    def __init__(
        self, http_client: HttpClient, mode: OpenLibraryMode = OpenLibraryMode.DIRECT
    ) -> None:
        self._http = http_client
        self._mode = mode

    @property
    def name(self) -> str:
        return _SOURCE_NAMES[self._mode]

    def fetch_by_isbn(self, isbn: str) -> CandidateMetadata | None:
        """Query this instance's endpoint; None when nothing usable comes back."""
        try:
            if self._mode is OpenLibraryMode.DATA:
                return self._fetch_data(isbn)
            if self._mode is OpenLibraryMode.SEARCH:
                return self._fetch_search(isbn)
            return self._fetch_direct(isbn)
        except MetadataFetchError as exc:
            logger.warning("%s lookup failed for %s: %s", self.name, isbn, exc)
            return None

    def _fetch_direct(self, isbn: str) -> CandidateMetadata | None:
        data = self._http.get(f"{_OL_BASE}/isbn/{isbn}.json")
        if not data.get("title"):
            return None
        candidate = parse_isbn_response(data)
        authors = self._resolve_authors(author_keys(data))
        if authors:
            candidate = replace(candidate, authors=", ".join(authors))
        return candidate

    def _fetch_data(self, isbn: str) -> CandidateMetadata | None:
        params = {"bibkeys": f"ISBN:{isbn}", "jscmd": "data", "format": "json"}
        data = self._http.get(f"{_OL_BASE}/api/books", params=params)
        return parse_data_response(data, isbn)

    def _fetch_search(self, isbn: str) -> CandidateMetadata | None:
        data = self._http.get(f"{_OL_BASE}/search.json", params={"isbn": isbn, "limit": "1"})
        return parse_search_response(data)

    def _resolve_authors(self, keys: list[str]) -> list[str]:
        """Fetch author names; authors that fail to resolve are skipped."""
        authors: list[str] = []
        for key in keys:
            try:
                authors.append(parse_author_name(self._http.get(f"{_OL_BASE}{key}.json")))
            except MetadataFetchError:
                continue
        return authors
