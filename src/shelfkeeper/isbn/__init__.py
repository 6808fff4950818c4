# ABOUTME: ISBN package: check digit arithmetic and canonical normalization.
# ABOUTME: Exports the helpers used by the lookup pipeline, CLI, and web routes.

from shelfkeeper.isbn.checksum import (
    clean,
    is_valid_isbn10,
    is_valid_isbn13,
    isbn10_to_13,
    isbn13_to_10,
)
from shelfkeeper.isbn.normalizer import (
    InvalidIsbnError,
    derived_isbn10,
    normalize_to_isbn13,
    region_language,
    require_isbn13,
)

__all__ = [
    "InvalidIsbnError",
    "clean",
    "derived_isbn10",
    "is_valid_isbn10",
    "is_valid_isbn13",
    "isbn10_to_13",
    "isbn13_to_10",
    "normalize_to_isbn13",
    "region_language",
    "require_isbn13",
]
