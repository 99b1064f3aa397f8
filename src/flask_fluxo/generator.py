"""OpenAPI 3.0 document generation from bound request/response shapes.

SwaggerGenerator owns the ComponentRegistry and the path map. Routes are
added with add_endpoint() as they are registered; generate_document()
assembles the document on demand and reflects every route added so far.

Mapping rules:
- One operation per (method, path); registering the pair again replaces it.
- GET/HEAD: path, header and query parameters of every shape, in shape
  order, deduplicated by (name, location). No request body.
- Other methods: path and header parameters of every shape; the request
  body unions the inferred content types of every body-bearing shape.
  Under a shared content type a later shape overrides same-named
  properties of an earlier one.
- Route placeholders no shape binds are declared as required string
  path parameters.
- Responses: 200 from the response shape, fixed 400 error schema.
- ``:name`` route placeholders become ``{name}`` in path keys.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Sequence
from typing import Any

from flask_fluxo.schemas._constants import BODYLESS_METHODS, MIME_JSON
from flask_fluxo.schemas.content_types import content_types_for
from flask_fluxo.schemas.fields import extract_shape
from flask_fluxo.schemas.mapper import ComponentRegistry, SchemaMapper
from flask_fluxo.schemas.parameters import (
    ALL_LOCATIONS,
    LOCATION_HEADER,
    LOCATION_PATH,
    ParameterEntry,
    dedupe_parameters,
    extract_path_parameters,
    params_for,
)

logger = logging.getLogger("flask_fluxo")

OPENAPI_VERSION = "3.0.0"
DEFAULT_DESCRIPTION = "Auto-generated API documentation"

_ERROR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "status": {"type": "integer"},
        "message": {"type": "string"},
    },
}


def to_openapi_path(path: str) -> str:
    """Convert ``/users/:id`` to ``/users/{id}``."""
    parts = []
    for part in path.split("/"):
        if part.startswith(":") and len(part) > 1:
            part = "{" + part[1:] + "}"
        parts.append(part)
    return "/".join(parts)


def _merge_object_schemas(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge two object schemas; ``override`` wins on shared property names."""
    properties = {**base.get("properties", {}), **override.get("properties", {})}
    required = list(dict.fromkeys([*base.get("required", []), *override.get("required", [])]))

    merged: dict[str, Any] = {"type": "object"}
    if properties:
        merged["properties"] = properties
    if required:
        merged["required"] = required
    return merged


class SwaggerGenerator:
    """Builds and holds the OpenAPI document for one application.

    Usage:
        generator = SwaggerGenerator("Todo API", "1.0.0")
        generator.add_endpoint("GET", "/todos/:id", [GetTodo], Todo)
        document = generator.generate_document()
    """

    def __init__(
        self,
        title: str,
        version: str,
        description: str | None = DEFAULT_DESCRIPTION,
        page_title: str | None = None,
    ) -> None:
        self.title = title
        self.version = version
        self.description = description
        self.page_title = page_title or title
        self.registry = ComponentRegistry()
        self._mapper = SchemaMapper(self.registry)
        self._paths: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def add_endpoint(
        self,
        method: str,
        path: str,
        request_shapes: Sequence[Any] = (),
        response_shape: Any = None,
    ) -> dict[str, Any]:
        """Register or replace the operation for ``(method, path)``.

        Args:
            method: HTTP method, any case.
            path: Route path using ``:name`` placeholders.
            request_shapes: Request types of every stage bound to the route,
                middleware stages first. None entries are ignored.
            response_shape: Response type of the terminal handler.

        Returns:
            A copy of the stored operation dict.
        """
        method = method.upper()
        shapes = [s for s in request_shapes if s is not None]

        with self._lock:
            operation = self._build_operation(method, path, shapes, response_shape)
            self._paths.setdefault(to_openapi_path(path), {})[method.lower()] = operation
            logger.debug("OpenAPI operation registered: %s %s (%d shapes)", method, path, len(shapes))
            return copy.deepcopy(operation)

    def _build_operation(self, method: str, path: str, shapes: list[Any], response_shape: Any) -> dict[str, Any]:
        operation: dict[str, Any] = {"summary": f"{method} {path}"}

        if method in BODYLESS_METHODS:
            locations = ALL_LOCATIONS
        else:
            locations = frozenset({LOCATION_PATH, LOCATION_HEADER})

        params = []
        for hint in shapes:
            params.extend(params_for(extract_shape(hint), path, self._mapper, locations))
        # Every placeholder must be declared, even when no shape binds it.
        claimed = {p.name for p in params if p.location == LOCATION_PATH}
        for name in extract_path_parameters(path):
            if name not in claimed:
                params.append(ParameterEntry(name, LOCATION_PATH, required=True))
        params = dedupe_parameters(params)
        if params:
            operation["parameters"] = [p.to_dict() for p in params]

        if method not in BODYLESS_METHODS:
            content = self._request_content(shapes)
            if content:
                operation["requestBody"] = {
                    "description": "Request body",
                    "required": True,
                    "content": {ct: {"schema": schema} for ct, schema in content.items()},
                }

        operation["responses"] = {
            "200": {
                "description": "Success",
                "content": {MIME_JSON: {"schema": self._response_schema(response_shape)}},
            },
            "400": {
                "description": "Bad Request",
                "content": {MIME_JSON: {"schema": copy.deepcopy(_ERROR_SCHEMA)}},
            },
        }
        return operation

    def _request_content(self, shapes: list[Any]) -> dict[str, dict[str, Any]]:
        content: dict[str, dict[str, Any]] = {}

        for hint in shapes:
            shape = extract_shape(hint)
            if shape is None:
                # Untagged request types such as dict still accept a JSON body.
                contributions = {MIME_JSON: self._mapper.schema_for(hint)}
            elif not shape.has_body_binding():
                continue
            else:
                schema = self._mapper.struct_schema(shape.model)
                contributions = {ct: schema for ct in content_types_for(shape)}

            for ct, schema in contributions.items():
                if ct in content:
                    content[ct] = _merge_object_schemas(content[ct], schema)
                else:
                    content[ct] = copy.deepcopy(schema)

        return content

    def _response_schema(self, response_shape: Any) -> dict[str, Any]:
        if response_shape is None:
            return {"type": "object"}
        return copy.deepcopy(self._mapper.schema_for(response_shape))

    def has_operation(self, method: str, path: str) -> bool:
        with self._lock:
            return method.lower() in self._paths.get(to_openapi_path(path), {})

    def generate_document(self) -> dict[str, Any]:
        """Return the full OpenAPI document as a JSON-serializable dict."""
        info: dict[str, Any] = {"title": self.title, "version": self.version}
        if self.description:
            info["description"] = self.description

        with self._lock:
            return {
                "openapi": OPENAPI_VERSION,
                "info": info,
                "paths": copy.deepcopy(self._paths),
                "components": {"schemas": self.registry.snapshot()},
            }
