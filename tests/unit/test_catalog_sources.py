# ABOUTME: Unit tests for the Google Books, Open Library, and retailer sources.
# ABOUTME: Uses a FakeHttpClient to test request shapes, parsing, and failure handling.

import logging
from typing import Any

import pytest

from shelfkeeper.metadata.googlebooks import GoogleBooksSource, parse_volume
from shelfkeeper.metadata.http import MetadataFetchError
from shelfkeeper.metadata.openlibrary import OpenLibraryMode, OpenLibrarySource
from shelfkeeper.metadata.provider import CatalogSource
from shelfkeeper.metadata.retailer import RetailerSource, extract_page_fields, parse_product_page
from shelfkeeper.metadata.types import Source
from tests.fixtures.catalog_responses import (
    EN_ISBN13,
    GOOGLE_VOLUMES_EMPTY,
    GOOGLE_VOLUMES_EN,
    GOOGLE_VOLUMES_RU,
    OL_AUTHOR,
    OL_DATA_RU,
    OL_EDITION_RU,
    OL_SEARCH_EMPTY,
    OL_SEARCH_EN,
    RETAILER_PAGE_NOT_FOUND,
    RETAILER_PAGE_RU,
    RU_ISBN13,
)
from tests.fixtures.fakes import FakeHttpClient


class TestProtocol:
    """All sources satisfy CatalogSource."""

    @pytest.mark.parametrize(
        "source",
        [
            GoogleBooksSource(FakeHttpClient()),
            OpenLibrarySource(FakeHttpClient()),
            RetailerSource(FakeHttpClient()),
        ],
    )
    def test_satisfies_protocol(self, source: Any) -> None:
        assert isinstance(source, CatalogSource)

    def test_names(self) -> None:
        http = FakeHttpClient()
        assert GoogleBooksSource(http).name == "google_books"
        assert OpenLibrarySource(http, OpenLibraryMode.DIRECT).name == "openlibrary"
        assert OpenLibrarySource(http, OpenLibraryMode.DATA).name == "openlibrary_data"
        assert OpenLibrarySource(http, OpenLibraryMode.SEARCH).name == "openlibrary_search"
        assert RetailerSource(http).name == "retailer"


class TestGoogleBooksSource:
    """Tests for GoogleBooksSource."""

    def test_fetch_russian_volume(self) -> None:
        http = FakeHttpClient({"googleapis.com": GOOGLE_VOLUMES_RU})
        candidate = GoogleBooksSource(http).fetch_by_isbn(RU_ISBN13)
        assert candidate is not None
        assert candidate.source is Source.GOOGLE_BOOKS
        assert candidate.title == "Мастер и Маргарита"
        assert candidate.authors == "Михаил Булгаков"
        assert candidate.language == "ru"
        assert candidate.published_year == "2015"
        assert candidate.page_count == 480
        assert candidate.cover_url is None

    def test_query_uses_isbn_prefix(self) -> None:
        http = FakeHttpClient({"googleapis.com": GOOGLE_VOLUMES_EMPTY})
        GoogleBooksSource(http).fetch_by_isbn(EN_ISBN13)
        assert f"q=isbn%3A{EN_ISBN13}" in http.request_log[0]

    def test_api_key_passed(self) -> None:
        http = FakeHttpClient({"googleapis.com": GOOGLE_VOLUMES_EMPTY})
        GoogleBooksSource(http, api_key="secret").fetch_by_isbn(EN_ISBN13)
        assert "key=secret" in http.request_log[0]

    def test_thumbnail_upgraded_to_https(self) -> None:
        candidate = parse_volume(GOOGLE_VOLUMES_EN["items"][0])
        assert candidate.cover_url == "https://books.google.com/books/content?id=x&zoom=1"

    def test_no_items(self) -> None:
        http = FakeHttpClient({"googleapis.com": GOOGLE_VOLUMES_EMPTY})
        assert GoogleBooksSource(http).fetch_by_isbn(EN_ISBN13) is None

    def test_fetch_error_returns_none_and_logs(self, caplog: Any) -> None:
        http = FakeHttpClient({"googleapis.com": MetadataFetchError("connection refused")})
        with caplog.at_level(logging.WARNING):
            assert GoogleBooksSource(http).fetch_by_isbn(EN_ISBN13) is None
        assert any("connection refused" in r.message for r in caplog.records)


class TestOpenLibrarySource:
    """Tests for the three OpenLibrarySource modes."""

    def test_direct_resolves_authors(self) -> None:
        http = FakeHttpClient({"/isbn/": OL_EDITION_RU, "/authors/": OL_AUTHOR})
        candidate = OpenLibrarySource(http, OpenLibraryMode.DIRECT).fetch_by_isbn(RU_ISBN13)
        assert candidate is not None
        assert candidate.authors == "Mikhail Bulgakov"
        assert http.request_log[0] == f"https://openlibrary.org/isbn/{RU_ISBN13}.json"

    def test_direct_author_failure_keeps_candidate(self) -> None:
        http = FakeHttpClient(
            {"/isbn/": OL_EDITION_RU, "/authors/": MetadataFetchError("boom")}
        )
        candidate = OpenLibrarySource(http, OpenLibraryMode.DIRECT).fetch_by_isbn(RU_ISBN13)
        assert candidate is not None
        assert candidate.authors == ""

    def test_direct_not_found(self, caplog: Any) -> None:
        """A 404 from the edition endpoint is logged and yields None."""
        http = FakeHttpClient({})
        with caplog.at_level(logging.WARNING):
            assert OpenLibrarySource(http).fetch_by_isbn(RU_ISBN13) is None
        assert any("404" in r.message for r in caplog.records)

    def test_data_mode(self) -> None:
        http = FakeHttpClient({"/api/books": OL_DATA_RU})
        candidate = OpenLibrarySource(http, OpenLibraryMode.DATA).fetch_by_isbn(RU_ISBN13)
        assert candidate is not None
        assert candidate.source is Source.OPENLIBRARY_DATA
        assert f"bibkeys=ISBN%3A{RU_ISBN13}" in http.request_log[0]

    def test_search_mode(self) -> None:
        http = FakeHttpClient({"/search.json": OL_SEARCH_EN})
        candidate = OpenLibrarySource(http, OpenLibraryMode.SEARCH).fetch_by_isbn(EN_ISBN13)
        assert candidate is not None
        assert candidate.title == "Programming Pearls"
        assert f"isbn={EN_ISBN13}" in http.request_log[0]

    def test_search_mode_empty(self) -> None:
        http = FakeHttpClient({"/search.json": OL_SEARCH_EMPTY})
        assert OpenLibrarySource(http, OpenLibraryMode.SEARCH).fetch_by_isbn(EN_ISBN13) is None

    def test_accepts_isbn10(self) -> None:
        assert OpenLibrarySource(FakeHttpClient()).accepts_isbn10


class TestRetailerSource:
    """Tests for the retailer scraper."""

    def test_extract_page_fields(self) -> None:
        fields = extract_page_fields(RETAILER_PAGE_RU)
        assert fields["og:title"] == "Мастер и Маргарита"
        assert fields["og:locale"] == "ru_RU"
        assert fields["author"] == "Булгаков Михаил"
        assert fields["description"] == "Купить книгу «Мастер и Маргарита»"

    def test_parse_product_page(self) -> None:
        candidate = parse_product_page(RETAILER_PAGE_RU, RU_ISBN13)
        assert candidate is not None
        assert candidate.source is Source.RETAILER
        assert candidate.isbn13 == RU_ISBN13
        assert candidate.language == "ru"
        assert candidate.publisher == "АСТ"
        assert candidate.page_count == 480
        assert candidate.published_year == "2015"
        assert candidate.cover_url == "https://img.example-shop.ru/books/825.jpg"

    def test_apostrophe_in_content(self) -> None:
        page = '<meta property="og:title" content="Finnegan\'s Wake">'
        candidate = parse_product_page(page, EN_ISBN13)
        assert candidate is not None
        assert candidate.title == "Finnegan's Wake"

    def test_commented_and_scripted_tags_ignored(self) -> None:
        """Markup inside comments or script strings is not read as tags."""
        page = (
            "<html><head>"
            '<!-- <meta property="og:title" content="Old Placeholder"> -->'
            "<script>var t = '<meta property=\"og:image\" content=\"https://x/tracking.gif\">';</script>"
            '<meta property="og:title" content="Война и мир">'
            "</head><body></body></html>"
        )
        candidate = parse_product_page(page, RU_ISBN13)
        assert candidate is not None
        assert candidate.title == "Война и мир"
        assert candidate.cover_url is None

    def test_itemprop_name_as_title(self) -> None:
        page = '<div itemscope><h1 itemprop="name"> Война   и мир </h1></div>'
        candidate = parse_product_page(page, RU_ISBN13)
        assert candidate is not None
        assert candidate.title == "Война и мир"

    def test_page_without_title(self) -> None:
        assert parse_product_page(RETAILER_PAGE_NOT_FOUND, RU_ISBN13) is None

    def test_fetch_uses_template(self) -> None:
        http = FakeHttpClient(pages={"shop.test": RETAILER_PAGE_RU})
        source = RetailerSource(http, url_template="https://shop.test/find?q={isbn}")
        assert source.fetch_by_isbn(RU_ISBN13) is not None
        assert http.request_log == [f"https://shop.test/find?q={RU_ISBN13}"]

    def test_fetch_error_returns_none(self) -> None:
        http = FakeHttpClient(pages={"shop.test": MetadataFetchError("HTTP 503")})
        source = RetailerSource(http, url_template="https://shop.test/{isbn}")
        assert source.fetch_by_isbn(RU_ISBN13) is None
