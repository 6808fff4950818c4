# ABOUTME: Unit tests for Open Library response parsing.
# ABOUTME: Validates edition, books-data, and search payload conversion to CandidateMetadata.

from shelfkeeper.metadata.openlibrary_parser import (
    author_keys,
    build_cover_url,
    extract_year,
    normalize_language,
    parse_data_response,
    parse_isbn_response,
    parse_search_response,
)
from shelfkeeper.metadata.types import Source
from tests.fixtures.catalog_responses import (
    EN_ISBN10,
    EN_ISBN13,
    OL_DATA_RU,
    OL_EDITION_RU,
    OL_SEARCH_EMPTY,
    OL_SEARCH_EN,
    RU_ISBN10,
    RU_ISBN13,
)


class TestHelpers:
    """Tests for small parsing helpers."""

    def test_normalize_language_key(self) -> None:
        """Open Library keys and MARC codes reduce to ISO 639-1."""
        assert normalize_language("/languages/rus") == "ru"
        assert normalize_language("eng") == "en"

    def test_normalize_language_unknown_and_empty(self) -> None:
        assert normalize_language("/languages/xyz") == "xyz"
        assert normalize_language("") is None
        assert normalize_language(None) is None

    def test_extract_year(self) -> None:
        assert extract_year("March 2015") == "2015"
        assert extract_year(1986) == "1986"
        assert extract_year("n.d.") is None
        assert extract_year(None) is None

    def test_build_cover_url(self) -> None:
        assert build_cover_url(42) == "https://covers.openlibrary.org/b/id/42-L.jpg"
        assert build_cover_url(42, "M").endswith("42-M.jpg")


class TestParseIsbnResponse:
    """Tests for the /isbn/ edition payload."""

    def test_fields(self) -> None:
        candidate = parse_isbn_response(OL_EDITION_RU)
        assert candidate.source is Source.OPENLIBRARY
        assert candidate.title == "The Master and Margarita"
        assert candidate.isbn13 == RU_ISBN13
        assert candidate.isbn10 == RU_ISBN10
        assert candidate.publisher == "AST"
        assert candidate.published_year == "2015"
        assert candidate.language == "en"
        assert candidate.page_count == 480
        assert candidate.cover_url == "https://covers.openlibrary.org/b/id/8231856-L.jpg"

    def test_authors_left_for_resolution(self) -> None:
        """Authors are keys only; the provider fills the names in."""
        assert parse_isbn_response(OL_EDITION_RU).authors == ""
        assert author_keys(OL_EDITION_RU) == ["/authors/OL42A"]

    def test_placeholder_cover_ids_ignored(self) -> None:
        """Open Library uses -1 for a missing cover."""
        candidate = parse_isbn_response({**OL_EDITION_RU, "covers": [-1]})
        assert candidate.cover_url is None

    def test_description_dict(self) -> None:
        data = {**OL_EDITION_RU, "description": {"type": "/type/text", "value": "About."}}
        assert parse_isbn_response(data).description == "About."


class TestParseDataResponse:
    """Tests for the keyed /api/books payload."""

    def test_fields(self) -> None:
        candidate = parse_data_response(OL_DATA_RU, RU_ISBN13)
        assert candidate is not None
        assert candidate.source is Source.OPENLIBRARY_DATA
        assert candidate.title == "Мастер и Маргарита"
        assert candidate.authors == "Булгаков Михаил"
        assert candidate.publisher == "АСТ"
        assert candidate.published_year == "2015"
        assert candidate.cover_url == "https://covers.openlibrary.org/b/id/8231856-L.jpg"
        assert candidate.description == "Перевод не требуется."
        assert candidate.language is None

    def test_missing_key(self) -> None:
        """A response without the requested bibkey means no match."""
        assert parse_data_response(OL_DATA_RU, RU_ISBN10) is None
        assert parse_data_response({}, RU_ISBN13) is None


class TestParseSearchResponse:
    """Tests for the /search.json payload."""

    def test_fields(self) -> None:
        candidate = parse_search_response(OL_SEARCH_EN)
        assert candidate is not None
        assert candidate.source is Source.OPENLIBRARY_SEARCH
        assert candidate.title == "Programming Pearls"
        assert candidate.authors == "Jon Bentley"
        assert candidate.isbn13 == EN_ISBN13
        assert candidate.isbn10 == EN_ISBN10
        assert candidate.language == "en"
        assert candidate.published_year == "1986"
        assert candidate.page_count == 195
        assert candidate.cover_url == "https://covers.openlibrary.org/b/id/1234-L.jpg"

    def test_no_docs(self) -> None:
        assert parse_search_response(OL_SEARCH_EMPTY) is None
