"""Flask application configuration and blueprint registration."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify

from i18n_recreate.config import load_config
from i18n_recreate.logger import get_logger
from i18n_recreate.translators import Translator, create_translator

from .routes import api_bp

logger = get_logger(__name__)

TranslatorFactory = Callable[[Dict[str, Any], Optional[str]], Translator]


def default_translator_factory(config: Dict[str, Any], provider: Optional[str]) -> Translator:
    return create_translator(config, provider)


def build_app(
    config: Optional[Dict[str, Any]] = None,
    translator_factory: Optional[TranslatorFactory] = None,
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Loaded configuration; read from the config file when omitted.
        translator_factory: `factory(config, provider) -> Translator`;
            tests inject fakes here.
    """
    app = Flask(__name__)

    # Ensure JSON responses keep Unicode data and key order.
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    app.config["RECREATE_CONFIG"] = config if config is not None else load_config()
    app.config["TRANSLATOR_FACTORY"] = translator_factory or default_translator_factory

    register_blueprints(app)
    register_default_routes(app)
    return app


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    app.register_blueprint(api_bp, url_prefix="/api")


def register_default_routes(app: Flask) -> None:
    """Register health route and JSON error handlers."""

    @app.get("/health")
    def health_check():
        logger.debug("Health check requested")
        return jsonify({"status": "ok"})

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found", "code": "not_found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed", "code": "method_not_allowed"}), 405

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Internal server error: %s", e)
        return jsonify({"error": "Internal server error", "code": "internal_error"}), 500
