"""Shared test fixtures for flask-fluxo."""

from __future__ import annotations

import pytest
from flask import Flask


@pytest.fixture()
def app(tmp_path):
    """Minimal Flask app with FLUXO_OUTPUT_DIR pointed to tmp_path."""
    a = Flask(__name__)
    a.config["TESTING"] = True
    a.config["FLUXO_OUTPUT_DIR"] = str(tmp_path / "docs")
    return a


@pytest.fixture()
def swagger_app(app):
    """Flask app with the docs endpoints enabled."""
    app.config["FLUXO_SWAGGER_ENABLED"] = True
    app.config["FLUXO_SWAGGER_TITLE"] = "Test API"
    return app


@pytest.fixture()
def fluxo(app):
    """Fluxo initialized on the default app."""
    from flask_fluxo import Fluxo

    return Fluxo(app)


@pytest.fixture()
def generator():
    """Standalone SwaggerGenerator."""
    from flask_fluxo.generator import SwaggerGenerator

    return SwaggerGenerator("Test API", "1.0.0")


@pytest.fixture()
def mapper():
    """SchemaMapper backed by a fresh ComponentRegistry."""
    from flask_fluxo.schemas import ComponentRegistry, SchemaMapper

    return SchemaMapper(ComponentRegistry())


@pytest.fixture()
def translations():
    """The shared Translations, cleared after the test."""
    from flask_fluxo.validation import default_translations

    yield default_translations
    default_translations.clear()
