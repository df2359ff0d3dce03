import logging

from flask import Flask
from flask_cors import CORS

from .config import get_config
from .routes import register_routes
from .services.comparison_service import init_comparison_service
from .session_store import init_session_store


def create_app(config_name: str | None = None) -> Flask:
    """Application factory so tests and CLI share consistent setup."""
    app = Flask(__name__)

    config_cls = get_config(config_name)
    app.config.from_object(config_cls())

    app.logger.setLevel(getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO))

    CORS(app, resources={r"/api/*": {"origins": "*"}})
    store = init_session_store(app)
    init_comparison_service(app, store)
    register_routes(app)

    return app
