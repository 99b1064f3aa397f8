"""flask-fluxo: typed Flask handlers with automatic OpenAPI documentation."""

__version__ = "0.1.0"

from flask_fluxo.extension import Fluxo, RouteGroup

from flask_fluxo.context import Context, get_context
from flask_fluxo.errors import (
    BindingError,
    HTTPError,
    ValidationFailed,
    bad_request,
    forbidden,
    internal_server_error,
    new_http_error,
    not_found,
    unauthorized,
)
from flask_fluxo.generator import SwaggerGenerator
from flask_fluxo.handlers import Stage, handle, middleware
from flask_fluxo.responses import created, json_response, no_content, success
from flask_fluxo.schemas import Bind, Shape
from flask_fluxo.validation import register_translation
from flask_fluxo.web.views import render_swagger_ui

__all__ = [
    "Fluxo",
    "RouteGroup",
    "__version__",
    "Bind",
    "Shape",
    "Context",
    "get_context",
    "Stage",
    "handle",
    "middleware",
    "HTTPError",
    "BindingError",
    "ValidationFailed",
    "new_http_error",
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "internal_server_error",
    "json_response",
    "success",
    "created",
    "no_content",
    "register_translation",
    "SwaggerGenerator",
    "render_swagger_ui",
]
