"""JSON response helpers.

Handlers may return one of these instead of a plain value to pick the
status code themselves.
"""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify

from flask_fluxo.binding import dump_response


def json_response(data: Any, status: int = 200) -> Response:
    response = jsonify(dump_response(data))
    response.status_code = status
    return response


def success(data: Any) -> Response:
    return json_response(data, 200)


def created(data: Any) -> Response:
    return json_response(data, 201)


def no_content() -> Response:
    return Response(status=204)
