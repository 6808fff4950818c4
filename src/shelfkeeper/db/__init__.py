# ABOUTME: Public API for the shelfkeeper database layer.
# ABOUTME: Exports connection management, the metadata cache, and library tables.

from shelfkeeper.db.cache import MetadataCache
from shelfkeeper.db.connection import open_database
from shelfkeeper.db.library import LibraryBook, SharedLibrary, UserBooks

__all__ = [
    "LibraryBook",
    "MetadataCache",
    "SharedLibrary",
    "UserBooks",
    "open_database",
]
