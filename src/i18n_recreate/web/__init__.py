"""Web application package for i18n-recreate."""

from flask import Flask


def create_app(config=None, translator_factory=None) -> Flask:
    """Application factory for the web API."""
    from .app import build_app  # Import here to avoid circular imports

    return build_app(config=config, translator_factory=translator_factory)


__all__ = ["create_app"]
