"""Typed handler and middleware stages.

A route is an ordered list of stages: zero or more middleware stages
followed by one terminal handler. Each stage binds its own request model,
validates it, then calls the wrapped function with the shared Context::

    def auth(ctx: Context, req: AuthQuery) -> None:
        if req.token != "secret":
            raise unauthorized("bad token")

    def create_post(ctx: Context, req: CreatePost) -> Post:
        ...

    fluxo.post("/posts", middleware(auth), handle(create_post))

Request and response models are read from the function's type hints; the
request model is the annotation of the second parameter.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable

from flask import Response, request

from flask_fluxo.binding import bind_request
from flask_fluxo.context import get_context
from flask_fluxo.errors import HTTPError, internal_server_error
from flask_fluxo.responses import json_response, no_content
from flask_fluxo.schemas.content_types import content_types_for
from flask_fluxo.schemas.fields import extract_shape, resolve_hints
from flask_fluxo.validation import validate_model

logger = logging.getLogger("flask_fluxo")


@dataclass(frozen=True)
class Stage:
    """One typed step of a route.

    Attributes:
        func: The wrapped ``fn(ctx, req)`` callable.
        request_type: Annotation of the request parameter, or None.
        response_type: Return annotation for handlers, None for middleware.
        terminal: True for handlers, False for middleware.
        content_types: Request content types inferred from the request model.
    """

    func: Callable[..., Any]
    request_type: Any
    response_type: Any
    terminal: bool
    content_types: tuple[str, ...]

    @property
    def name(self) -> str:
        return getattr(self.func, "__name__", repr(self.func))

    def __call__(self, ctx: Any, req: Any) -> Any:
        return self.func(ctx, req)


def _signature_types(fn: Callable[..., Any]) -> tuple[Any, Any]:
    hints = resolve_hints(fn)
    params = list(inspect.signature(fn).parameters.values())

    request_type = hints.get(params[1].name) if len(params) > 1 else None
    response_type = hints.get("return")
    # "-> None" and "req: None" both mean no model
    if request_type is type(None):
        request_type = None
    if response_type is type(None):
        response_type = None
    return request_type, response_type


def _make_stage(fn: Callable[..., Any], terminal: bool) -> Stage:
    if isinstance(fn, Stage):
        return fn
    request_type, response_type = _signature_types(fn)
    stage = Stage(
        func=fn,
        request_type=request_type,
        response_type=response_type if terminal else None,
        terminal=terminal,
        content_types=tuple(content_types_for(extract_shape(request_type))),
    )
    logger.debug(
        "Created %s stage %s (request=%r, content_types=%s)",
        "handler" if terminal else "middleware",
        stage.name,
        request_type,
        list(stage.content_types),
    )
    return stage


def handle(fn: Callable[..., Any]) -> Stage:
    """Wrap ``fn(ctx, req) -> res`` as a terminal handler stage."""
    return _make_stage(fn, terminal=True)


def middleware(fn: Callable[..., Any]) -> Stage:
    """Wrap ``fn(ctx, req) -> None`` as a middleware stage."""
    return _make_stage(fn, terminal=False)


def run_stages(stages: Sequence[Stage]) -> Response:
    """Execute the stages of a route for the current request.

    A middleware returning a Response short-circuits the chain. The
    terminal handler's result is returned as JSON with status 200 unless it
    already is a Response. HTTPError maps to its own status; any other
    exception is logged and answered with 500.
    """
    ctx = get_context()
    lang = ctx.lang()

    try:
        for stage in stages:
            req = bind_request(stage.request_type, request)
            validate_model(req, lang)
            result = stage(ctx, req)

            if isinstance(result, Response):
                return result
            if stage.terminal:
                return json_response(result, 200)
    except HTTPError as exc:
        logger.debug("%s %s -> %s", request.method, request.path, exc)
        return json_response(exc.to_dict(), exc.status)
    except Exception as exc:
        logger.exception("Unhandled error in %s %s", request.method, request.path)
        error = internal_server_error(f"Internal server error: {exc}")
        return json_response(error.to_dict(), error.status)

    return no_content()
