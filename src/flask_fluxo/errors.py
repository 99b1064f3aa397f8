"""HTTP error types returned to clients.

Handlers raise HTTPError (or one of the helpers below) to answer with a
specific status. The JSON body is ``{"status": <int>, "message": <str>}``,
the same shape documented as the 400 response of every operation.
"""

from __future__ import annotations

from typing import Any


class HTTPError(Exception):
    """An error carrying the HTTP status to respond with."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "message": self.message}


class BindingError(HTTPError):
    """The request could not be bound to the handler's request model."""

    def __init__(self, message: str) -> None:
        super().__init__(400, message)


class ValidationFailed(HTTPError):
    """The bound request violated one or more ``validate`` rules.

    Attributes:
        errors: FieldError entries, in field order.
        messages: Rendered (possibly translated) message per error.
    """

    def __init__(self, errors: list[Any], messages: list[str]) -> None:
        super().__init__(400, "Validation failed: " + "; ".join(messages))
        self.errors = errors
        self.messages = messages


def new_http_error(status: int, message: str) -> HTTPError:
    return HTTPError(status, message)


def bad_request(message: str) -> HTTPError:
    return HTTPError(400, message)


def unauthorized(message: str) -> HTTPError:
    return HTTPError(401, message)


def forbidden(message: str) -> HTTPError:
    return HTTPError(403, message)


def not_found(message: str) -> HTTPError:
    return HTTPError(404, message)


def internal_server_error(message: str) -> HTTPError:
    return HTTPError(500, message)
