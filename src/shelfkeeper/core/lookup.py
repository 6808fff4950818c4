# ABOUTME: ISBN metadata lookup pipeline: cache, catalog fallbacks, scoring, mirroring, persist.
# ABOUTME: Sources are queried sequentially in priority order; individual failures never abort a lookup.

import logging
from dataclasses import dataclass, field

from shelfkeeper.config import Settings
from shelfkeeper.core.covers import BlobStorage, mirror_cover
from shelfkeeper.db.cache import MetadataCache
from shelfkeeper.isbn.normalizer import InvalidIsbnError, derived_isbn10, require_isbn13
from shelfkeeper.metadata.googlebooks import GoogleBooksSource
from shelfkeeper.metadata.http import HttpClient
from shelfkeeper.metadata.openlibrary import OpenLibraryMode, OpenLibrarySource
from shelfkeeper.metadata.provider import CatalogSource
from shelfkeeper.metadata.retailer import RetailerSource
from shelfkeeper.metadata.scoring import reconcile
from shelfkeeper.metadata.types import CandidateMetadata, ResolvedMetadata

logger = logging.getLogger(__name__)

__all__ = [
    "Attempt",
    "InvalidIsbnError",
    "IsbnLookup",
    "LookupTrace",
    "MetadataNotFoundError",
    "build_sources",
    "plan_attempts",
]


class MetadataNotFoundError(LookupError):
    """Raised when the cache misses and no source knows the ISBN."""

    def __init__(self, isbn13: str) -> None:
        super().__init__(f"No metadata found for ISBN {isbn13}")
        self.isbn13 = isbn13


@dataclass
class Attempt:
    """One call to one source during a lookup."""

    source: str
    isbn: str
    found: bool
    error: str | None = None


@dataclass
class LookupTrace:
    """What a lookup did, for diagnostics."""

    isbn13: str
    cache_hit: bool = False
    attempts: list[Attempt] = field(default_factory=list)


def build_sources(http_client: HttpClient, settings: Settings) -> list[CatalogSource]:
    """The default sources in priority order.

    Google Books first, then the three Open Library variants, then the
    retailer scraper if enabled.
    """
    sources: list[CatalogSource] = [
        GoogleBooksSource(http_client, api_key=settings.google_api_key),
        OpenLibrarySource(http_client, OpenLibraryMode.DIRECT),
        OpenLibrarySource(http_client, OpenLibraryMode.DATA),
        OpenLibrarySource(http_client, OpenLibraryMode.SEARCH),
    ]
    if settings.retailer_enabled:
        sources.append(RetailerSource(http_client, url_template=settings.retailer_url))
    return sources


def _accepts_isbn10(source: CatalogSource) -> bool:
    return bool(getattr(source, "accepts_isbn10", False))


def plan_attempts(
    sources: list[CatalogSource], isbn13: str
) -> list[tuple[CatalogSource, str]]:
    """Order the (source, isbn) calls for one lookup.

    Every source is called with the ISBN-13. When an ISBN-10 exists, each run
    of consecutive ISBN-10-capable sources is repeated with it right after
    the run, before the next source.
    """
    isbn10 = derived_isbn10(isbn13)
    if isbn10 is None:
        return [(source, isbn13) for source in sources]

    attempts: list[tuple[CatalogSource, str]] = []
    pending: list[CatalogSource] = []
    for source in sources:
        if pending and not _accepts_isbn10(source):
            attempts.extend((s, isbn10) for s in pending)
            pending = []
        attempts.append((source, isbn13))
        if _accepts_isbn10(source):
            pending.append(source)
    attempts.extend((s, isbn10) for s in pending)
    return attempts


class IsbnLookup:
    """Resolves raw ISBN input to one ResolvedMetadata.

    All collaborators are passed in: the cache, the ordered sources, and an
    optional blob storage for cover mirroring (no mirroring without one).
    """

    def __init__(
        self,
        cache: MetadataCache,
        sources: list[CatalogSource],
        storage: BlobStorage | None = None,
    ) -> None:
        self._cache = cache
        self._sources = list(sources)
        self._storage = storage

    def lookup(self, raw_isbn: str) -> ResolvedMetadata:
        """Resolve an ISBN, consulting the cache before any source.

        Raises:
            InvalidIsbnError: If raw_isbn is not a valid ISBN-10 or ISBN-13.
            MetadataNotFoundError: If the cache misses and every source is empty.
        """
        resolved, _ = self.lookup_with_trace(raw_isbn)
        return resolved

    def lookup_with_trace(self, raw_isbn: str) -> tuple[ResolvedMetadata, LookupTrace]:
        """Like lookup, also returning a record of the sources tried."""
        isbn13 = require_isbn13(raw_isbn)
        trace = LookupTrace(isbn13=isbn13)

        cached = self._cache.get_by_isbn13(isbn13)
        if cached is not None:
            logger.debug("Cache hit for %s", isbn13)
            trace.cache_hit = True
            return cached, trace

        candidates = self._collect_candidates(isbn13, trace)
        resolved = reconcile(candidates, isbn13)
        if resolved is None:
            logger.info("No source had metadata for %s", isbn13)
            raise MetadataNotFoundError(isbn13)

        if self._storage is not None:
            resolved = mirror_cover(resolved, self._storage)

        self._cache.upsert(resolved)
        return resolved, trace

    def _collect_candidates(self, isbn13: str, trace: LookupTrace) -> list[CandidateMetadata]:
        """Call every planned source in order and keep whatever they return."""
        candidates: list[CandidateMetadata] = []
        for source, isbn in plan_attempts(self._sources, isbn13):
            candidate, error = self._try_source(source, isbn)
            trace.attempts.append(
                Attempt(source=source.name, isbn=isbn, found=candidate is not None, error=error)
            )
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def _try_source(
        self, source: CatalogSource, isbn: str
    ) -> tuple[CandidateMetadata | None, str | None]:
        """Call one source, converting any failure into "no candidate"."""
        try:
            return source.fetch_by_isbn(isbn), None
        except Exception as exc:  # source failures are never propagated
            logger.warning("Source %s failed for %s: %s", source.name, isbn, exc)
            return None, str(exc)
