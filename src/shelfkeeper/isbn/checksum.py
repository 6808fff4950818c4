# ABOUTME: Check digit arithmetic for ISBN-10 and ISBN-13 identifiers.
# ABOUTME: Cleans raw input, validates both forms, and converts between them.

import re

_NON_ISBN_RE = re.compile(r"[^0-9Xx]")
_ISBN10_RE = re.compile(r"^\d{9}[\dX]$")
_ISBN13_RE = re.compile(r"^\d{13}$")

ISBN10_PREFIX = "978"


def clean(raw: str) -> str:
    """Strip everything except digits and X, uppercasing the result."""
    return _NON_ISBN_RE.sub("", raw).upper()


def _isbn10_digit(char: str) -> int:
    return 10 if char == "X" else int(char)


def _isbn13_check_digit(first12: str) -> str:
    """Check digit for the first 12 digits of an ISBN-13 (weights 1, 3, 1, ...)."""
    total = sum(int(c) * (1 if i % 2 == 0 else 3) for i, c in enumerate(first12))
    return str((10 - total % 10) % 10)


def _isbn10_check_digit(first9: str) -> str:
    """Check digit for the first 9 digits of an ISBN-10 (weights 10 down to 2)."""
    total = sum(int(c) * (10 - i) for i, c in enumerate(first9))
    remainder = (11 - total % 11) % 11
    return "X" if remainder == 10 else str(remainder)


def is_valid_isbn10(s: str) -> bool:
    """Whether s is a well-formed ISBN-10 with a correct check character."""
    value = clean(s)
    if not _ISBN10_RE.match(value):
        return False
    total = sum((i + 1) * int(c) for i, c in enumerate(value[:9]))
    total += 10 * _isbn10_digit(value[9])
    return total % 11 == 0


def is_valid_isbn13(s: str) -> bool:
    """Whether s is 13 digits with a correct ISBN-13 check digit."""
    value = clean(s)
    if not _ISBN13_RE.match(value):
        return False
    return _isbn13_check_digit(value[:12]) == value[12]


def isbn10_to_13(s: str) -> str:
    """Convert an ISBN-10 to its 978-prefixed ISBN-13.

    The input is expected to be valid; only its first nine digits are used.
    """
    core = ISBN10_PREFIX + clean(s)[:9]
    return core + _isbn13_check_digit(core)


def isbn13_to_10(s: str) -> str | None:
    """Convert a 978-prefixed ISBN-13 to ISBN-10.

    Returns None for any other prefix (979 numbers have no ISBN-10 form).
    """
    value = clean(s)
    if not value.startswith(ISBN10_PREFIX):
        return None
    first9 = value[3:12]
    return first9 + _isbn10_check_digit(first9)
