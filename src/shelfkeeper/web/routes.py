# ABOUTME: JSON routes for ISBN lookup, the shared library, user shelves, and exports.
# ABOUTME: Maps bad input to 400 and a missing ISBN or shelf entry to 404.

import logging
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request, send_from_directory

from shelfkeeper.core.export import ExportError, export_user_books
from shelfkeeper.core.lookup import InvalidIsbnError, MetadataNotFoundError
from shelfkeeper.core.services import Services
from shelfkeeper.db.library import ShelfEntryNotFoundError
from shelfkeeper.web import EXTENSION_KEY

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")
storage_bp = Blueprint("storage", __name__, url_prefix="/storage")


def _services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


def _error(message: str, status: int) -> tuple[Response, int]:
    return jsonify({"error": message}), status


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


@api_bp.get("/lookup")
def lookup() -> Any:
    """Resolve ?isbn= to the flat metadata object."""
    raw = request.args.get("isbn", "").strip()
    if not raw:
        return _error("isbn parameter is required", 400)

    try:
        resolved = _services().lookup.lookup(raw)
    except InvalidIsbnError as exc:
        return _error(str(exc), 400)
    except MetadataNotFoundError as exc:
        return _error(str(exc), 404)

    return jsonify(resolved.to_dict())


@api_bp.route("/library/search", methods=["GET", "POST"])
def search_library() -> Any:
    """Title suggestions from the shared library."""
    if request.method == "POST":
        query = str(_json_body().get("query") or "")
    else:
        query = request.args.get("query", "")

    try:
        results = _services().library.search(query)
    except ValueError as exc:
        return _error(str(exc), 400)

    return jsonify({"results": [book.to_dict() for book in results]})


@api_bp.post("/library")
def add_to_library() -> Any:
    """Insert a book into the shared library unless it is a duplicate."""
    body = _json_body()
    try:
        inserted = _services().library.check_and_insert(
            str(body.get("title") or ""),
            str(body.get("author") or ""),
            body.get("cover_url") or None,
        )
    except ValueError as exc:
        return _error(str(exc), 400)

    return jsonify({"inserted": inserted})


@api_bp.post("/books")
def add_book() -> Any:
    """Add an entry to a user's shelf."""
    body = _json_body()
    user_id = str(body.pop("user_id", "") or "").strip()
    title = str(body.pop("title", "") or "").strip()
    if not user_id or not title:
        return _error("user_id and title are required", 400)

    try:
        book_id = _services().user_books.add(user_id, title, **body)
    except ValueError as exc:
        return _error(str(exc), 400)

    return jsonify({"id": book_id}), 201


@api_bp.get("/books")
def list_books() -> Any:
    """A user's shelf, newest first."""
    user_id = request.args.get("user_id", "").strip()
    if not user_id:
        return _error("user_id parameter is required", 400)
    return jsonify(_services().user_books.list_for_user(user_id))


@api_bp.post("/books/update")
def update_book() -> Any:
    """Change columns of a shelf entry; the body is {id, ...fields}."""
    body = _json_body()
    book_id = body.pop("id", None)
    if book_id is None:
        return _error("id is required", 400)

    try:
        _services().user_books.update(book_id, **body)
    except ShelfEntryNotFoundError as exc:
        return _error(str(exc), 404)
    except ValueError as exc:
        return _error(str(exc), 400)

    return jsonify({"success": True})


@api_bp.post("/books/delete")
def delete_book() -> Any:
    body = _json_body()
    if body.get("id") is None:
        return _error("id is required", 400)

    try:
        _services().user_books.delete(body["id"])
    except ShelfEntryNotFoundError as exc:
        return _error(str(exc), 404)

    return jsonify({"success": True})


@api_bp.post("/books/comment")
def comment_book() -> Any:
    """Set the comment on one of a user's entries."""
    body = _json_body()
    book_id = body.get("bookId", body.get("id"))
    user_id = body.get("userId", body.get("user_id"))
    if book_id is None or not user_id:
        return _error("bookId and userId are required", 400)

    try:
        _services().user_books.set_comment(book_id, str(user_id), body.get("comment"))
    except ShelfEntryNotFoundError as exc:
        return _error(str(exc), 404)

    return jsonify({"success": True})


@api_bp.get("/export")
def export() -> Any:
    """Download a user's shelf as CSV or JSON."""
    services = _services()
    try:
        export_file = export_user_books(
            services.user_books,
            request.args.get("user_id", "").strip(),
            fmt=request.args.get("format", "csv"),
            requested_fields=request.args.get("fields"),
            storage=services.storage,
        )
    except ExportError as exc:
        return _error(str(exc), 400)

    logger.info("Serving export %s", export_file.filename)
    response = Response(export_file.content, content_type=export_file.content_type)
    response.headers["Content-Disposition"] = f'attachment; filename="{export_file.filename}"'
    response.headers["Cache-Control"] = "no-store"
    return response


@storage_bp.get("/<path:key>")
def stored_object(key: str) -> Any:
    """Serve mirrored covers and export copies."""
    return send_from_directory(_services().storage.root, key)
