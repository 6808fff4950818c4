# ABOUTME: CatalogSource protocol defining the contract for ISBN metadata sources.
# ABOUTME: Google Books, the Open Library variants, and the retailer scraper implement this.

from typing import Protocol, runtime_checkable

from shelfkeeper.metadata.types import CandidateMetadata


@runtime_checkable
class CatalogSource(Protocol):
    """Protocol for a single catalog queried by ISBN.

    Implementations return None when the catalog has no match, responds with
    an error, or cannot be reached. They should not raise for those cases.
    """

    @property
    def name(self) -> str: ...

    def fetch_by_isbn(self, isbn: str) -> CandidateMetadata | None: ...
