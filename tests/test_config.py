"""Tests for flask_fluxo.config -- FLUXO_* settings."""

from __future__ import annotations

import pytest
from flask import Flask

from flask_fluxo.config import FluxoSettings, load_settings


def _make_app(**overrides) -> Flask:
    app = Flask(__name__)
    for k, v in overrides.items():
        app.config[k] = v
    return app


class TestDefaults:
    def test_defaults(self) -> None:
        settings = load_settings(_make_app())
        assert settings == FluxoSettings(
            swagger_enabled=False,
            swagger_title="API",
            swagger_version="1.0.0",
            swagger_description="Auto-generated API documentation",
            swagger_page_title="API",
            swagger_ui_version="5.9.0",
            docs_path="/docs",
            openapi_path="/openapi.json",
            default_language="en",
            output_dir=".",
        )

    def test_none_falls_back_to_default(self) -> None:
        settings = load_settings(_make_app(FLUXO_DOCS_PATH=None, FLUXO_SWAGGER_TITLE=None))
        assert settings.docs_path == "/docs"
        assert settings.swagger_title == "API"

    def test_frozen(self) -> None:
        settings = load_settings(_make_app())
        with pytest.raises(AttributeError):
            settings.swagger_title = "Other"


class TestOverrides:
    def test_values(self) -> None:
        settings = load_settings(
            _make_app(
                FLUXO_SWAGGER_ENABLED=True,
                FLUXO_SWAGGER_TITLE="Todo API",
                FLUXO_SWAGGER_VERSION="2.1.0",
                FLUXO_DOCS_PATH="/api/docs",
                FLUXO_OPENAPI_PATH="/api/openapi.json",
                FLUXO_DEFAULT_LANGUAGE="ja",
            )
        )
        assert settings.swagger_enabled is True
        assert settings.swagger_title == "Todo API"
        assert settings.swagger_version == "2.1.0"
        assert settings.docs_path == "/api/docs"
        assert settings.openapi_path == "/api/openapi.json"
        assert settings.default_language == "ja"

    def test_page_title_defaults_to_title(self) -> None:
        settings = load_settings(_make_app(FLUXO_SWAGGER_TITLE="Todo API"))
        assert settings.swagger_page_title == "Todo API"

    def test_page_title_override(self) -> None:
        settings = load_settings(_make_app(FLUXO_SWAGGER_PAGE_TITLE="Todo Docs"))
        assert settings.swagger_page_title == "Todo Docs"

    def test_empty_description_dropped(self) -> None:
        assert load_settings(_make_app(FLUXO_SWAGGER_DESCRIPTION="")).swagger_description is None

    def test_output_dir_path(self, tmp_path) -> None:
        assert load_settings(_make_app(FLUXO_OUTPUT_DIR=tmp_path)).output_dir == str(tmp_path)


class TestValidation:
    @pytest.mark.parametrize(
        "key, value, match",
        [
            ("FLUXO_SWAGGER_ENABLED", "yes", "FLUXO_SWAGGER_ENABLED must be a boolean"),
            ("FLUXO_SWAGGER_TITLE", "", "FLUXO_SWAGGER_TITLE must be a non-empty string"),
            ("FLUXO_SWAGGER_VERSION", 1, "FLUXO_SWAGGER_VERSION must be a non-empty string"),
            ("FLUXO_SWAGGER_DESCRIPTION", 5, "FLUXO_SWAGGER_DESCRIPTION must be a string"),
            ("FLUXO_SWAGGER_PAGE_TITLE", "", "FLUXO_SWAGGER_PAGE_TITLE must be a non-empty string"),
            ("FLUXO_DOCS_PATH", "docs", "FLUXO_DOCS_PATH must start with '/'"),
            ("FLUXO_OPENAPI_PATH", "openapi.json", "FLUXO_OPENAPI_PATH must start with '/'"),
            ("FLUXO_DEFAULT_LANGUAGE", "", "FLUXO_DEFAULT_LANGUAGE must be a non-empty string"),
            ("FLUXO_OUTPUT_DIR", 3, "FLUXO_OUTPUT_DIR must be a string path"),
        ],
    )
    def test_invalid(self, key, value, match) -> None:
        with pytest.raises(ValueError, match=match):
            load_settings(_make_app(**{key: value}))
