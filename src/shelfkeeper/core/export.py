# ABOUTME: Library export to CSV or JSON with a whitelist of exportable fields.
# ABOUTME: Renders a user's shelf and keeps a copy of every export in blob storage.

import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from shelfkeeper.core.covers import BlobStorage
from shelfkeeper.db.library import UserBooks

logger = logging.getLogger(__name__)

WHITELIST = (
    "title",
    "author",
    "status",
    "rating",
    "started_at",
    "finished_at",
    "added_at",
    "comment",
    "category",
    "tags",
    "id",
    "cover_url",
)

DEFAULT_FIELDS = ("title", "author", "status", "rating", "started_at", "finished_at", "comment")

FORMATS = ("csv", "json")

EXPORTS_PREFIX = "exports"

_CONTENT_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json; charset=utf-8",
}

# Lets Excel detect UTF-8.
_BOM = "\ufeff"


class ExportError(ValueError):
    """Raised for an export request that cannot be satisfied."""


@dataclass
class ExportFile:
    """A rendered export ready to be downloaded or stored."""

    filename: str
    content: bytes
    content_type: str


def resolve_fields(requested: str | None) -> list[str]:
    """Turn a comma-separated field list into whitelisted column names.

    An empty request means DEFAULT_FIELDS. Unknown names are dropped.

    Raises:
        ExportError: If names were requested but none are exportable.
    """
    names = [name.strip() for name in (requested or "").split(",") if name.strip()]
    if not names:
        return list(DEFAULT_FIELDS)
    fields = [name for name in names if name in WHITELIST]
    if not fields:
        raise ExportError("No exportable fields requested")
    return fields


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def render_csv(rows: list[dict[str, Any]], fields: list[str]) -> str:
    """Header of field names, every cell quoted, rows joined by newlines."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(fields)
    for row in rows:
        writer.writerow([_cell(row.get(name)) for name in fields])
    # No trailing newline after the last row.
    return _BOM + buffer.getvalue().rstrip("\n")


def render_json(rows: list[dict[str, Any]], fields: list[str]) -> str:
    """Pretty-printed list of objects; missing values become empty strings."""
    slim = [
        {name: "" if row.get(name) is None else row.get(name) for name in fields}
        for row in rows
    ]
    return json.dumps(slim, ensure_ascii=False, indent=2)


def export_filename(user_id: str, fmt: str, now: datetime | None = None) -> str:
    """books-{user}-{timestamp}.{fmt}, with the timestamp safe for filenames."""
    moment = now or datetime.now(timezone.utc)
    stamp = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    stamp = stamp.replace(":", "-").replace(".", "-")
    return f"books-{user_id}-{stamp}.{fmt}"


def render_export(
    rows: list[dict[str, Any]],
    fields: list[str],
    fmt: str,
    user_id: str,
    now: datetime | None = None,
) -> ExportFile:
    """Render rows in the requested format.

    Raises:
        ExportError: On an unsupported format.
    """
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise ExportError(f"Unsupported export format: {fmt}")

    text = render_json(rows, fields) if fmt == "json" else render_csv(rows, fields)
    return ExportFile(
        filename=export_filename(user_id, fmt, now),
        content=text.encode("utf-8"),
        content_type=_CONTENT_TYPES[fmt],
    )


def export_user_books(
    user_books: UserBooks,
    user_id: str,
    fmt: str = "csv",
    requested_fields: str | None = None,
    storage: BlobStorage | None = None,
) -> ExportFile:
    """Export a user's shelf and save a copy under exports/{user_id}/.

    A failure to save the copy is logged; the export itself is still returned.

    Raises:
        ExportError: On a missing user, no valid fields, or an unsupported format.
    """
    if not user_id:
        raise ExportError("user_id is required")

    fields = resolve_fields(requested_fields)
    rows = user_books.list_for_user(user_id, fields)
    export = render_export(rows, fields, fmt, user_id)

    if storage is not None:
        key = f"{EXPORTS_PREFIX}/{user_id}/{export.filename}"
        if storage.upload(export.content, key, export.content_type) is None:
            logger.warning("Could not keep a copy of export %s", key)

    return export
