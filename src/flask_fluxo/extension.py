"""Flask Extension for typed handlers and automatic OpenAPI documentation.

Provides the Fluxo class following Flask's Extension pattern.

init_app flow:
1. load_settings(app)
2. Create the SwaggerGenerator for the app
3. Register CLI commands
4. Register the docs Blueprint if FLUXO_SWAGGER_ENABLED
5. Store everything in app.extensions["fluxo"]

Routes use ``:name`` placeholders, converted to Flask's ``<name>`` rules::

    fluxo.get("/users/:id", handle(get_user))
    fluxo.post("/posts", middleware(auth), handle(create_post))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from flask import request

from flask_fluxo.config import load_settings
from flask_fluxo.generator import SwaggerGenerator
from flask_fluxo.handlers import Stage, handle, middleware, run_stages

if TYPE_CHECKING:
    from flask import Flask

logger = logging.getLogger("flask_fluxo")

StageLike = Stage | Callable[..., Any]


def to_flask_rule(path: str) -> str:
    """Convert ``/users/:id`` to ``/users/<id>``."""
    parts = []
    for part in path.split("/"):
        if part.startswith(":") and len(part) > 1:
            part = f"<{part[1:]}>"
        parts.append(part)
    return "/".join(parts)


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path or "/"
    if not path or path == "/":
        return prefix
    return prefix.rstrip("/") + "/" + path.lstrip("/")


def _select_stages(methods: dict[str, tuple[Stage, ...]], method: str) -> tuple[Stage, ...]:
    """Stages for ``method``; HEAD falls back to the GET stages."""
    stages = methods.get(method)
    if stages is None and method == "HEAD":
        stages = methods.get("GET")
    if stages is None:
        raise LookupError(f"No stages registered for {method}")
    return stages


def _coerce_stages(stages: tuple[StageLike, ...]) -> tuple[Stage, ...]:
    """Wrap plain callables: the last one is the handler, the rest middleware."""
    result = []
    for index, stage in enumerate(stages):
        if isinstance(stage, Stage):
            result.append(stage)
        elif index == len(stages) - 1:
            result.append(handle(stage))
        else:
            result.append(middleware(stage))
    return tuple(result)


class _RouteMethods:
    """HTTP-method shortcuts shared by Fluxo and RouteGroup."""

    def add_route(self, method: str, path: str, *stages: StageLike) -> None:
        raise NotImplementedError

    def get(self, path: str, *stages: StageLike) -> None:
        self.add_route("GET", path, *stages)

    def head(self, path: str, *stages: StageLike) -> None:
        self.add_route("HEAD", path, *stages)

    def post(self, path: str, *stages: StageLike) -> None:
        self.add_route("POST", path, *stages)

    def put(self, path: str, *stages: StageLike) -> None:
        self.add_route("PUT", path, *stages)

    def patch(self, path: str, *stages: StageLike) -> None:
        self.add_route("PATCH", path, *stages)

    def delete(self, path: str, *stages: StageLike) -> None:
        self.add_route("DELETE", path, *stages)

    def group(self, prefix: str, *stages: StageLike) -> RouteGroup:
        """Return a group whose routes share ``prefix`` and leading middleware."""
        return RouteGroup(self, prefix, tuple(middleware(s) if not isinstance(s, Stage) else s for s in stages))


class RouteGroup(_RouteMethods):
    """Routes under a common path prefix with shared middleware stages."""

    def __init__(self, parent: _RouteMethods, prefix: str, stages: tuple[Stage, ...] = ()) -> None:
        self.parent = parent
        self.prefix = prefix
        self.stages = stages

    def add_route(self, method: str, path: str, *stages: StageLike) -> None:
        self.parent.add_route(method, _join(self.prefix, path), *self.stages, *_coerce_stages(stages))


class Fluxo(_RouteMethods):
    """Flask Extension for typed handlers and OpenAPI generation.

    Usage (direct):
        app = Flask(__name__)
        fluxo = Fluxo(app)

    Usage (factory pattern):
        fluxo = Fluxo()

        def create_app():
            app = Flask(__name__)
            fluxo.init_app(app)
            return app
    """

    def __init__(self, app: Flask | None = None) -> None:
        """Initialize the extension.

        Args:
            app: Flask application instance. If provided, init_app()
                 is called immediately.
        """
        self.app: Flask | None = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Initialize the extension with a Flask application.

        Args:
            app: Flask application instance.

        Raises:
            ValueError: If any FLUXO_* config value is invalid.
        """
        # 1. Load and validate config
        settings = load_settings(app)

        # 2. Create the generator
        generator = SwaggerGenerator(
            settings.swagger_title,
            settings.swagger_version,
            description=settings.swagger_description,
            page_title=settings.swagger_page_title,
        )

        app.extensions["fluxo"] = {
            "settings": settings,
            "generator": generator,
            "routes": {},
        }

        # 3. Register CLI commands
        from flask_fluxo.cli import fluxo_cli

        app.cli.add_command(fluxo_cli)

        # 4. Docs endpoints
        if settings.swagger_enabled:
            from flask_fluxo.web import create_docs_blueprint

            app.register_blueprint(create_docs_blueprint(settings.openapi_path, settings.docs_path))
            logger.debug(
                "Swagger enabled: document at %s, UI at %s",
                settings.openapi_path,
                settings.docs_path,
            )

        self.app = app
        logger.debug("flask-fluxo initialized for app %s", app.name)

    def _ext_data(self) -> dict[str, Any]:
        if self.app is None:
            raise RuntimeError("flask-fluxo not initialized. Call Fluxo(app) or fluxo.init_app(app) first.")
        return self.app.extensions["fluxo"]

    @property
    def generator(self) -> SwaggerGenerator:
        return self._ext_data()["generator"]

    def add_route(self, method: str, path: str, *stages: StageLike) -> None:
        """Register ``stages`` for ``method`` on ``path``.

        Registering the same method and path again replaces its stages and
        its documented operation. All methods of a path dispatch on
        ``request.method``, since Flask also routes HEAD to GET rules.

        Raises:
            ValueError: If no stage is given.
        """
        if not stages:
            raise ValueError(f"Route {method} {path} needs at least one handler")

        ext_data = self._ext_data()
        method = method.upper()
        chain = _coerce_stages(stages)
        routes: dict[str, dict[str, tuple[Stage, ...]]] = ext_data["routes"]
        methods = routes.setdefault(path, {})

        if method not in methods:

            def view(**_kwargs: Any) -> Any:
                return run_stages(_select_stages(methods, request.method))

            self.app.add_url_rule(to_flask_rule(path), f"fluxo:{method}:{path}", view, methods=[method])
        methods[method] = chain

        terminal = next((s for s in reversed(chain) if s.terminal), None)
        ext_data["generator"].add_endpoint(
            method,
            path,
            [s.request_type for s in chain],
            terminal.response_type if terminal is not None else None,
        )
        logger.debug("Registered route %s %s with %d stages", method, path, len(chain))
