# ABOUTME: Normalizes arbitrary user input into a canonical ISBN-13.
# ABOUTME: The canonical form is the only key used by the cache and lookup pipeline.

from shelfkeeper.isbn.checksum import (
    ISBN10_PREFIX,
    clean,
    is_valid_isbn10,
    is_valid_isbn13,
    isbn10_to_13,
    isbn13_to_10,
)

# Registration-group prefixes whose books default to a known language.
# Longest prefix wins.
REGION_LANGUAGES: dict[str, str] = {
    "9785": "ru",
}


class InvalidIsbnError(ValueError):
    """Raised when input is neither a valid ISBN-10 nor a valid ISBN-13."""


def normalize_to_isbn13(raw: str) -> str | None:
    """Return the canonical ISBN-13 for raw input, or None if it is not an ISBN.

    Separators and whitespace are ignored. Idempotent: a canonical ISBN-13
    normalizes to itself.
    """
    value = clean(raw)
    if len(value) == 10 and is_valid_isbn10(value):
        return isbn10_to_13(value)
    if len(value) == 13 and is_valid_isbn13(value):
        return value
    return None


def require_isbn13(raw: str) -> str:
    """Like normalize_to_isbn13, but raises InvalidIsbnError on rejection."""
    isbn13 = normalize_to_isbn13(raw)
    if isbn13 is None:
        raise InvalidIsbnError(f"Not a valid ISBN: {raw!r}")
    return isbn13


def derived_isbn10(isbn13: str) -> str | None:
    """The ISBN-10 form of a canonical ISBN-13, when one exists."""
    if not isbn13.startswith(ISBN10_PREFIX):
        return None
    return isbn13_to_10(isbn13)


def region_language(isbn13: str) -> str | None:
    """Language implied by the ISBN's registration group, if any."""
    for prefix in sorted(REGION_LANGUAGES, key=len, reverse=True):
        if isbn13.startswith(prefix):
            return REGION_LANGUAGES[prefix]
    return None
