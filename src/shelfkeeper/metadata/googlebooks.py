# ABOUTME: Google Books catalog source, the primary ISBN lookup.
# ABOUTME: Queries volumes?q=isbn: and parses the first volume into CandidateMetadata.

import logging
from typing import Any

from shelfkeeper.metadata.http import HttpClient, MetadataFetchError
from shelfkeeper.metadata.openlibrary_parser import extract_year
from shelfkeeper.metadata.types import CandidateMetadata, Source

logger = logging.getLogger(__name__)

_GB_VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"


def _secure(url: str | None) -> str | None:
    """Google hands out http:// thumbnail links; prefer https."""
    if not url:
        return None
    if url.startswith("http://"):
        return "https://" + url[len("http://") :]
    return url


def parse_volume(item: dict[str, Any]) -> CandidateMetadata:
    """Parse one entry of a volumes response into CandidateMetadata."""
    info = item.get("volumeInfo", {})
    idents = {
        i.get("type"): i.get("identifier") for i in info.get("industryIdentifiers", [])
    }
    images = info.get("imageLinks", {})
    page_count = info.get("pageCount")

    return CandidateMetadata(
        source=Source.GOOGLE_BOOKS,
        title=info.get("title", "Unknown"),
        isbn13=idents.get("ISBN_13"),
        isbn10=idents.get("ISBN_10"),
        authors=", ".join(info.get("authors", [])),
        publisher=info.get("publisher"),
        published_year=extract_year(info.get("publishedDate")),
        language=(info.get("language") or "").lower() or None,
        page_count=page_count if isinstance(page_count, int) and page_count > 0 else None,
        description=info.get("description"),
        cover_url=_secure(images.get("thumbnail") or images.get("smallThumbnail")),
    )


class GoogleBooksSource:
    """Catalog source backed by the Google Books volumes API."""

    def __init__(self, http_client: HttpClient, api_key: str | None = None) -> None:
        self._http = http_client
        self._api_key = api_key

    @property
    def name(self) -> str:
        return Source.GOOGLE_BOOKS.value

    def fetch_by_isbn(self, isbn: str) -> CandidateMetadata | None:
        """Look up a volume by ISBN. Returns None when there is no match."""
        params = {"q": f"isbn:{isbn}"}
        if self._api_key:
            params["key"] = self._api_key
        try:
            data = self._http.get(_GB_VOLUMES_URL, params=params)
        except MetadataFetchError as exc:
            logger.warning("Google Books lookup failed for %s: %s", isbn, exc)
            return None

        items = data.get("items") or []
        if not items:
            return None
        return parse_volume(items[0])
