"""FLUXO_* settings resolution and validation.

Reads all FLUXO_* settings from Flask's app.config, applies defaults,
validates types and values, and exposes a frozen dataclass for internal use.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flask import Flask

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_SWAGGER_ENABLED = False
DEFAULT_SWAGGER_TITLE = "API"
DEFAULT_SWAGGER_VERSION = "1.0.0"
DEFAULT_SWAGGER_DESCRIPTION = "Auto-generated API documentation"
DEFAULT_SWAGGER_UI_VERSION = "5.9.0"
DEFAULT_DOCS_PATH = "/docs"
DEFAULT_OPENAPI_PATH = "/openapi.json"
DEFAULT_LANGUAGE = "en"
DEFAULT_OUTPUT_DIR = "."


@dataclass(frozen=True)
class FluxoSettings:
    """Validated FLUXO_* settings.

    All fields are immutable after validation. Created by load_settings().
    """

    swagger_enabled: bool
    swagger_title: str
    swagger_version: str
    swagger_description: str | None
    swagger_page_title: str
    swagger_ui_version: str
    docs_path: str
    openapi_path: str
    default_language: str
    output_dir: str


def _get(app: Flask, key: str, default: object) -> object:
    value = app.config.get(key, default)
    return default if value is None else value


def _non_empty_string(app: Flask, key: str, default: str) -> str:
    value = _get(app, key, default)
    if not isinstance(value, str) or len(value) == 0:
        raise ValueError(f"{key} must be a non-empty string.")
    return value


def _route_path(app: Flask, key: str, default: str) -> str:
    value = _non_empty_string(app, key, default)
    if not value.startswith("/"):
        raise ValueError(f"{key} must start with '/'. Got: '{value}'")
    return value


def load_settings(app: Flask) -> FluxoSettings:
    """Read and validate FLUXO_* settings from app.config.

    Each Flask config key is ``FLUXO_`` + uppercase field name
    (e.g. ``FLUXO_DOCS_PATH``).  ``None`` values fall back to defaults.

    Args:
        app: Flask application instance.

    Returns:
        Validated, frozen FluxoSettings dataclass.

    Raises:
        ValueError: If any setting is invalid.
    """
    # --- swagger_enabled ---
    swagger_enabled = _get(app, "FLUXO_SWAGGER_ENABLED", DEFAULT_SWAGGER_ENABLED)
    if not isinstance(swagger_enabled, bool):
        actual = type(swagger_enabled).__name__
        raise ValueError(f"FLUXO_SWAGGER_ENABLED must be a boolean. Got: {actual}")

    swagger_title = _non_empty_string(app, "FLUXO_SWAGGER_TITLE", DEFAULT_SWAGGER_TITLE)
    swagger_version = _non_empty_string(app, "FLUXO_SWAGGER_VERSION", DEFAULT_SWAGGER_VERSION)
    swagger_ui_version = _non_empty_string(app, "FLUXO_SWAGGER_UI_VERSION", DEFAULT_SWAGGER_UI_VERSION)

    # --- swagger_description --- (empty string drops it from the document)
    swagger_description = _get(app, "FLUXO_SWAGGER_DESCRIPTION", DEFAULT_SWAGGER_DESCRIPTION)
    if not isinstance(swagger_description, str):
        actual = type(swagger_description).__name__
        raise ValueError(f"FLUXO_SWAGGER_DESCRIPTION must be a string. Got: {actual}")

    # --- swagger_page_title ---
    swagger_page_title = _get(app, "FLUXO_SWAGGER_PAGE_TITLE", swagger_title)
    if not isinstance(swagger_page_title, str) or len(swagger_page_title) == 0:
        raise ValueError("FLUXO_SWAGGER_PAGE_TITLE must be a non-empty string if set.")

    docs_path = _route_path(app, "FLUXO_DOCS_PATH", DEFAULT_DOCS_PATH)
    openapi_path = _route_path(app, "FLUXO_OPENAPI_PATH", DEFAULT_OPENAPI_PATH)

    # --- default_language ---
    default_language = _non_empty_string(app, "FLUXO_DEFAULT_LANGUAGE", DEFAULT_LANGUAGE)

    # --- output_dir ---
    output_dir = _get(app, "FLUXO_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)
    if not isinstance(output_dir, (str, Path)):
        actual = type(output_dir).__name__
        raise ValueError(f"FLUXO_OUTPUT_DIR must be a string path. Got: {actual}")

    return FluxoSettings(
        swagger_enabled=swagger_enabled,
        swagger_title=swagger_title,
        swagger_version=swagger_version,
        swagger_description=swagger_description or None,
        swagger_page_title=swagger_page_title,
        swagger_ui_version=swagger_ui_version,
        docs_path=docs_path,
        openapi_path=openapi_path,
        default_language=default_language,
        output_dir=str(output_dir),
    )
