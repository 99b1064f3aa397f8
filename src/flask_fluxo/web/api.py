"""OpenAPI JSON endpoint for the docs Blueprint."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify


def register_api_routes(bp: Blueprint, openapi_path: str) -> None:

    @bp.route(openapi_path)
    def openapi_document():
        generator = current_app.extensions["fluxo"]["generator"]
        return jsonify(generator.generate_document())
