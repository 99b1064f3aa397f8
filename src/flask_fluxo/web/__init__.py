"""Docs Blueprint for flask-fluxo: OpenAPI JSON plus Swagger UI."""

from __future__ import annotations

from flask import Blueprint


def create_docs_blueprint(openapi_path: str = "/openapi.json", docs_path: str = "/docs") -> Blueprint:
    bp = Blueprint("fluxo_docs", __name__)

    from flask_fluxo.web.api import register_api_routes
    from flask_fluxo.web.views import register_view_routes

    register_api_routes(bp, openapi_path)
    if docs_path != openapi_path:
        register_view_routes(bp, docs_path)

    return bp
