"""Tests for flask_fluxo.extension -- Fluxo class, routes and groups."""

from __future__ import annotations

from typing import Annotated

import pytest
from flask import Flask
from pydantic import BaseModel

from flask_fluxo import Bind, Context, Fluxo, handle, json_response, middleware, unauthorized
from flask_fluxo.extension import RouteGroup, to_flask_rule
from flask_fluxo.generator import SwaggerGenerator


class GetPost(BaseModel):
    id: Annotated[int, Bind(uri="id")] = 0


class Post(BaseModel):
    id: Annotated[int, Bind(json="id")] = 0
    title: Annotated[str, Bind(json="title")] = ""


class CreatePost(BaseModel):
    title: Annotated[str, Bind(json="title", validate="required")] = ""


class AuthHeader(BaseModel):
    token: Annotated[str, Bind(header="Authorization", validate="required")] = ""


def get_post(ctx: Context, req: GetPost) -> Post:
    return Post(id=req.id, title="first")


def create_post(ctx: Context, req: CreatePost) -> Post:
    return Post(id=1, title=req.title)


def get_post_v2(ctx: Context, req: GetPost) -> Post:
    return Post(id=req.id, title="second")


def post_headers(ctx: Context, req: GetPost):
    return json_response({"status": 299, "message": "headers only"}, 299)


def require_token(ctx: Context, req: AuthHeader) -> None:
    if req.token != "secret":
        raise unauthorized("invalid token")


def _make_app(tmp_path, **overrides) -> Flask:
    """Create a minimal Flask app with FLUXO_* config overrides."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["FLUXO_OUTPUT_DIR"] = str(tmp_path)
    for k, v in overrides.items():
        app.config[k] = v
    return app


# ===========================================================================
# Initialization
# ===========================================================================


class TestInit:
    def test_direct_init(self, tmp_path) -> None:
        app = _make_app(tmp_path)
        Fluxo(app)
        ext_data = app.extensions["fluxo"]
        assert set(ext_data) == {"settings", "generator", "routes"}
        assert isinstance(ext_data["generator"], SwaggerGenerator)

    def test_factory_pattern(self, tmp_path) -> None:
        fluxo = Fluxo()
        app = _make_app(tmp_path)
        fluxo.init_app(app)
        assert fluxo.app is app
        assert fluxo.generator is app.extensions["fluxo"]["generator"]

    def test_generator_uses_settings(self, tmp_path) -> None:
        app = _make_app(
            tmp_path,
            FLUXO_SWAGGER_TITLE="Todo API",
            FLUXO_SWAGGER_VERSION="3.0.1",
            FLUXO_SWAGGER_DESCRIPTION="",
            FLUXO_SWAGGER_PAGE_TITLE="Todo Docs",
        )
        generator = Fluxo(app).generator
        assert generator.generate_document()["info"] == {"title": "Todo API", "version": "3.0.1"}
        assert generator.page_title == "Todo Docs"

    def test_invalid_config_raises(self, tmp_path) -> None:
        app = _make_app(tmp_path, FLUXO_DOCS_PATH="docs")
        with pytest.raises(ValueError):
            Fluxo(app)

    def test_routes_before_init(self) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            Fluxo().get("/posts/:id", handle(get_post))

    def test_cli_registered(self, tmp_path) -> None:
        app = _make_app(tmp_path)
        Fluxo(app)
        assert "fluxo" in app.cli.commands

    def test_docs_disabled_by_default(self, tmp_path) -> None:
        app = _make_app(tmp_path)
        Fluxo(app)
        assert "fluxo_docs" not in app.blueprints

    def test_docs_enabled(self, tmp_path) -> None:
        app = _make_app(tmp_path, FLUXO_SWAGGER_ENABLED=True)
        Fluxo(app)
        assert "fluxo_docs" in app.blueprints


# ===========================================================================
# Routes
# ===========================================================================


class TestRoutes:
    def test_placeholder_conversion(self) -> None:
        assert to_flask_rule("/users/:id/posts/:post_id") == "/users/<id>/posts/<post_id>"
        assert to_flask_rule("/health") == "/health"

    def test_route_registered_with_flask(self, app, fluxo) -> None:
        fluxo.get("/posts/:id", handle(get_post))
        rules = {rule.rule: rule for rule in app.url_map.iter_rules()}
        assert "/posts/<id>" in rules
        assert "GET" in rules["/posts/<id>"].methods

    def test_route_documented(self, fluxo) -> None:
        fluxo.get("/posts/:id", handle(get_post))
        fluxo.post("/posts", middleware(require_token), handle(create_post))

        paths = fluxo.generator.generate_document()["paths"]
        assert set(paths) == {"/posts/{id}", "/posts"}
        post = paths["/posts"]["post"]
        assert post["parameters"][0]["name"] == "Authorization"
        assert post["requestBody"]["content"]["application/json"]["schema"]["required"] == ["title"]
        assert paths["/posts/{id}"]["get"]["responses"]["200"]["content"]["application/json"]["schema"][
            "properties"
        ] == {"id": {"type": "integer", "format": "int64"}, "title": {"type": "string"}}

    def test_plain_callables_wrapped(self, app, fluxo) -> None:
        fluxo.post("/posts", require_token, create_post)
        stages = app.extensions["fluxo"]["routes"]["/posts"]["POST"]
        assert [s.terminal for s in stages] == [False, True]

        client = app.test_client()
        resp = client.post("/posts", json={"title": "hi"}, headers={"Authorization": "secret"})
        assert resp.get_json() == {"id": 1, "title": "hi"}

    def test_every_method(self, app, fluxo) -> None:
        for register, method in [
            (fluxo.get, "GET"),
            (fluxo.post, "POST"),
            (fluxo.put, "PUT"),
            (fluxo.patch, "PATCH"),
            (fluxo.delete, "DELETE"),
        ]:
            register("/posts/:id", handle(get_post))
            assert fluxo.generator.has_operation(method, "/posts/:id")

        client = app.test_client()
        assert client.put("/posts/5").get_json() == {"id": 5, "title": "first"}
        assert client.delete("/posts/5").status_code == 200

    def test_reregistration_replaces_handler(self, app, fluxo) -> None:
        fluxo.get("/posts/:id", handle(get_post))
        fluxo.get("/posts/:id", handle(get_post_v2))

        assert app.test_client().get("/posts/3").get_json()["title"] == "second"
        assert len([r for r in app.url_map.iter_rules() if r.rule == "/posts/<id>"]) == 1

    def test_head_next_to_get(self, app, fluxo) -> None:
        fluxo.get("/posts/:id", handle(get_post))
        fluxo.head("/posts/:id", handle(post_headers))

        client = app.test_client()
        assert client.head("/posts/4").status_code == 299
        assert client.get("/posts/4").get_json() == {"id": 4, "title": "first"}
        assert set(fluxo.generator.generate_document()["paths"]["/posts/{id}"]) == {"get", "head"}

    def test_head_registered_before_get(self, app, fluxo) -> None:
        fluxo.head("/posts/:id", handle(post_headers))
        fluxo.get("/posts/:id", handle(get_post))

        client = app.test_client()
        assert client.head("/posts/4").status_code == 299
        assert client.get("/posts/4").status_code == 200

    def test_head_falls_back_to_get(self, app, fluxo) -> None:
        fluxo.get("/posts/:id", handle(get_post))
        resp = app.test_client().head("/posts/4")
        assert resp.status_code == 200
        assert resp.get_data() == b""

    def test_requires_a_stage(self, fluxo) -> None:
        with pytest.raises(ValueError, match="at least one handler"):
            fluxo.get("/empty")


# ===========================================================================
# Groups
# ===========================================================================


class TestGroups:
    def test_prefix_and_middleware(self, app, fluxo) -> None:
        api = fluxo.group("/api", middleware(require_token))
        assert isinstance(api, RouteGroup)
        api.get("/posts/:id", handle(get_post))

        client = app.test_client()
        assert client.get("/api/posts/1").status_code == 400
        assert client.get("/api/posts/1", headers={"Authorization": "nope"}).status_code == 401
        resp = client.get("/api/posts/1", headers={"Authorization": "secret"})
        assert resp.get_json() == {"id": 1, "title": "first"}

        operation = fluxo.generator.generate_document()["paths"]["/api/posts/{id}"]["get"]
        assert [(p["name"], p["in"]) for p in operation["parameters"]] == [
            ("Authorization", "header"),
            ("id", "path"),
        ]

    def test_nested_groups(self, app, fluxo) -> None:
        v1 = fluxo.group("/api").group("/v1/")
        v1.get("posts/:id", handle(get_post))
        assert app.test_client().get("/api/v1/posts/9").get_json()["id"] == 9

    def test_group_root_path(self, app, fluxo) -> None:
        fluxo.group("/status").get("/", handle(get_post))
        assert fluxo.generator.has_operation("GET", "/status")

    def test_group_plain_middleware(self, app, fluxo) -> None:
        api = fluxo.group("/api", require_token)
        assert api.stages[0].terminal is False
