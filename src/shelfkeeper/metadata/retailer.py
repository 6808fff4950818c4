# ABOUTME: Best-effort retailer page scraper, the last-resort catalog source.
# ABOUTME: Parses OpenGraph meta tags and schema.org microdata from a product page with BeautifulSoup.

import logging

from bs4 import BeautifulSoup

from shelfkeeper.metadata.http import HttpClient, MetadataFetchError
from shelfkeeper.metadata.openlibrary_parser import extract_year
from shelfkeeper.metadata.types import CandidateMetadata, Source

logger = logging.getLogger(__name__)

DEFAULT_URL_TEMPLATE = "https://www.labirint.ru/search/{isbn}/"

# Microdata properties read from element text rather than a meta tag.
_ITEMPROP_FIELDS = (
    "name",
    "author",
    "publisher",
    "numberOfPages",
    "datePublished",
    "inLanguage",
)


def _squash(value: str) -> str:
    return " ".join(value.split())


def extract_page_fields(page: str) -> dict[str, str]:
    """Collect meta-tag and itemprop values from an HTML page.

    Keys are lowercased; the first occurrence of a key wins. Markup inside
    comments and scripts is not parsed as tags, so it never contributes.
    """
    soup = BeautifulSoup(page, "html.parser")
    fields: dict[str, str] = {}

    for meta in soup.find_all("meta"):
        key = meta.get("property") or meta.get("name") or meta.get("itemprop")
        value = _squash(meta.get("content") or "")
        if key and value and key.lower() not in fields:
            fields[key.lower()] = value

    for name in _ITEMPROP_FIELDS:
        tag = soup.select_one(f"[itemprop={name}]:not(meta)")
        if tag is None:
            continue
        value = _squash(tag.get_text(" ", strip=True))
        if value and name.lower() not in fields:
            fields[name.lower()] = value

    return fields


def parse_product_page(page: str, isbn: str) -> CandidateMetadata | None:
    """Turn a scraped product page into a candidate.

    Requires at least a title. og:locale "ru_RU" is reduced to "ru".
    """
    fields = extract_page_fields(page)
    title = fields.get("og:title") or fields.get("name")
    if not title:
        return None

    language = fields.get("inlanguage") or fields.get("og:locale")
    if language:
        language = language.replace("-", "_").split("_", 1)[0].lower()

    pages = fields.get("numberofpages", "")
    return CandidateMetadata(
        source=Source.RETAILER,
        title=title,
        isbn13=isbn if len(isbn) == 13 else None,
        isbn10=isbn if len(isbn) == 10 else None,
        authors=fields.get("author", ""),
        publisher=fields.get("publisher"),
        published_year=extract_year(fields.get("datepublished")),
        language=language or None,
        page_count=int(pages) if pages.isdigit() and int(pages) > 0 else None,
        description=fields.get("og:description") or fields.get("description"),
        cover_url=fields.get("og:image") or fields.get("image"),
    )


class RetailerSource:
    """Scrapes a retailer's search page for an ISBN.

    The markup is not under our control, so any page that does not yield a
    title is treated as no match.
    """

    def __init__(self, http_client: HttpClient, url_template: str = DEFAULT_URL_TEMPLATE) -> None:
        self._http = http_client
        self._url_template = url_template

    @property
    def name(self) -> str:
        return Source.RETAILER.value

    def fetch_by_isbn(self, isbn: str) -> CandidateMetadata | None:
        url = self._url_template.format(isbn=isbn)
        try:
            page = self._http.get_text(url)
        except MetadataFetchError as exc:
            logger.warning("Retailer lookup failed for %s: %s", isbn, exc)
            return None
        return parse_product_page(page, isbn)
