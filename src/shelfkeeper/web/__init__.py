# ABOUTME: Flask application factory for the shelfkeeper HTTP API.
# ABOUTME: Wires Services into the app and registers the API and storage blueprints.

from flask import Flask

from shelfkeeper.config import Settings
from shelfkeeper.core.services import Services, build_services

EXTENSION_KEY = "shelfkeeper"


def create_app(settings: Settings | None = None, services: Services | None = None) -> Flask:
    """Create and configure the Flask app.

    Tests pass prebuilt services; otherwise they are built from settings
    (or the environment).
    """
    app = Flask(__name__)
    app.json.ensure_ascii = False  # type: ignore[attr-defined]

    if services is None:
        services = build_services(settings or Settings.from_env())
    app.extensions[EXTENSION_KEY] = services

    from shelfkeeper.web.routes import api_bp, storage_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(storage_bp)

    return app
