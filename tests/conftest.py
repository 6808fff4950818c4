# ABOUTME: Shared pytest fixtures for shelfkeeper tests.
# ABOUTME: Provides temporary databases, the cache and library tables, and sample candidates.

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from shelfkeeper.db.cache import MetadataCache
from shelfkeeper.db.connection import open_database
from shelfkeeper.db.library import SharedLibrary, UserBooks
from shelfkeeper.metadata.types import CandidateMetadata, Source


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Location of a fresh database file."""
    return tmp_path / "shelfkeeper.db"


@pytest.fixture
def conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    """An open connection with the schema applied."""
    connection = open_database(db_path)
    yield connection
    connection.close()


@pytest.fixture
def cache(conn: sqlite3.Connection) -> MetadataCache:
    return MetadataCache(conn)


@pytest.fixture
def library(conn: sqlite3.Connection) -> SharedLibrary:
    return SharedLibrary(conn)


@pytest.fixture
def user_books(conn: sqlite3.Connection) -> UserBooks:
    return UserBooks(conn)


@pytest.fixture
def english_candidate() -> CandidateMetadata:
    """An English-language candidate without a cover."""
    return CandidateMetadata(
        source=Source.GOOGLE_BOOKS,
        title="The Master and Margarita",
        isbn13="9785170908257",
        authors="Mikhail Bulgakov",
        publisher="Penguin",
        published_year="1997",
        language="en",
    )


@pytest.fixture
def russian_candidate() -> CandidateMetadata:
    """A Russian-language candidate without a cover."""
    return CandidateMetadata(
        source=Source.OPENLIBRARY_DATA,
        title="Мастер и Маргарита",
        isbn13="9785170908257",
        authors="Михаил Булгаков",
        publisher="АСТ",
        published_year="2015",
        language="ru",
    )
