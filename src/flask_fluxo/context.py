"""Per-request Context passed to handlers and middleware.

One Context is created per request (stored on ``flask.g``) and shared by
every stage of a route, so values set by a middleware are visible to the
terminal handler::

    def auth(ctx: Context, req: AuthHeader) -> None:
        ctx.set_authenticated_user(User(id="u1", name="Ann"))

    def create_post(ctx: Context, req: CreatePost) -> Post:
        user = ctx.get_authenticated_user(User)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from flask import current_app, g, request
from pydantic import BaseModel

if TYPE_CHECKING:
    from flask import Request

logger = logging.getLogger("flask_fluxo")

DEFAULT_LANGUAGE = "en"
AUTHENTICATED_USER_KEY = "fluxo.authenticated_user"

_M = TypeVar("_M", bound=BaseModel)


class Context:
    """Request accessors plus a key/value store shared across stages."""

    def __init__(self, req: Request, default_language: str = DEFAULT_LANGUAGE) -> None:
        self.request = req
        self.default_language = default_language
        self._values: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def get_string(self, key: str) -> str:
        value = self._values.get(key)
        return value if isinstance(value, str) else ""

    def param(self, name: str) -> str:
        return (self.request.view_args or {}).get(name, "")

    def query(self, name: str) -> str:
        return self.request.args.get(name, "")

    def header(self, name: str) -> str:
        return self.request.headers.get(name, "")

    def lang(self) -> str:
        """Preferred language from Accept-Language, else the default."""
        return self.request.accept_languages.best or self.default_language

    def set_authenticated_user(self, user: Any) -> None:
        self._values[AUTHENTICATED_USER_KEY] = user

    def get_authenticated_user(self, model: type[_M] | None = None) -> Any:
        """Return the user stored by set_authenticated_user().

        Args:
            model: Optional pydantic model to convert the stored user into.

        Raises:
            LookupError: No user has been stored for this request.
            pydantic.ValidationError: The stored user does not fit ``model``.
        """
        if AUTHENTICATED_USER_KEY not in self._values:
            raise LookupError("authenticated user not found in context")

        user = self._values[AUTHENTICATED_USER_KEY]
        if model is None or isinstance(user, model):
            return user
        if isinstance(user, BaseModel):
            user = user.model_dump()
        return model.model_validate(user, from_attributes=True)


def get_context() -> Context:
    """Return the Context of the current request, creating it on first use."""
    ctx = g.get("fluxo_context")
    if ctx is None:
        ext_data = current_app.extensions.get("fluxo")
        default_language = ext_data["settings"].default_language if ext_data else DEFAULT_LANGUAGE
        ctx = Context(request._get_current_object(), default_language=default_language)
        g.fluxo_context = ctx
    return ctx
