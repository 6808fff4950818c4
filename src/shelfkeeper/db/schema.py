# ABOUTME: SQL DDL statements for the shelfkeeper database schema.
# ABOUTME: Defines the ISBN metadata cache, the shared library, and per-user shelves.

SCHEMA_V1 = """
-- Resolved metadata, one row per canonical ISBN-13
CREATE TABLE isbn_cache (
    isbn13          TEXT PRIMARY KEY,
    isbn10          TEXT,
    source          TEXT NOT NULL,
    title           TEXT NOT NULL,
    authors         TEXT NOT NULL DEFAULT '',
    publisher       TEXT,
    published_year  TEXT,
    language        TEXT,
    page_count      INTEGER,
    description     TEXT,
    cover_url       TEXT,
    updated_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

-- Books any user has added, used for title suggestions
CREATE TABLE books_library (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    title      TEXT NOT NULL,
    author     TEXT NOT NULL,
    cover_url  TEXT,
    added_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE INDEX idx_books_library_title ON books_library(title);

-- A user's own shelf entries
CREATE TABLE user_books (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id      TEXT NOT NULL,
    title        TEXT NOT NULL,
    author       TEXT,
    status       TEXT,
    rating       INTEGER,
    started_at   TEXT,
    finished_at  TEXT,
    added_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    comment      TEXT,
    category     TEXT,
    tags         TEXT,
    cover_url    TEXT,
    isbn13       TEXT
);

CREATE INDEX idx_user_books_user ON user_books(user_id);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
