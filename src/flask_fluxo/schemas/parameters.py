"""OpenAPI parameter synthesis for path, header and query sources."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from flask_fluxo.schemas.fields import ShapeDescriptor
    from flask_fluxo.schemas.mapper import SchemaMapper

LOCATION_PATH = "path"
LOCATION_HEADER = "header"
LOCATION_QUERY = "query"

ALL_LOCATIONS = frozenset({LOCATION_PATH, LOCATION_HEADER, LOCATION_QUERY})


@dataclass
class ParameterEntry:
    """One OpenAPI parameter. Identity is ``(name, location)``."""

    name: str
    location: str
    required: bool = False
    schema: dict[str, Any] = field(default_factory=lambda: {"type": "string"})

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.location)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "in": self.location,
            "required": self.required,
            "schema": self.schema,
        }


def extract_path_parameters(path: str) -> list[str]:
    """Return placeholder names of a route path: ``/users/:id`` -> ``["id"]``."""
    return [part[1:] for part in path.split("/") if part.startswith(":") and len(part) > 1]


def params_for(
    shape: ShapeDescriptor | None,
    route_path: str,
    mapper: SchemaMapper,
    locations: Iterable[str] = ALL_LOCATIONS,
) -> list[ParameterEntry]:
    """Build the parameters one shape contributes to a route.

    For each field the first matching source wins: ``uri`` (always
    required), then ``header``, then ``form`` as a query parameter. Query
    parameters whose name is already claimed by a path parameter are
    dropped. File fields never become parameters. Only parameters in
    ``locations`` are returned; declaration order is kept.
    """
    if shape is None:
        return []

    wanted = frozenset(locations)
    claimed_path = set(extract_path_parameters(route_path))
    params: list[ParameterEntry] = []

    for fd in shape.fields:
        if fd.is_file:
            continue

        if fd.path_key is not None:
            claimed_path.add(fd.path_key)
            if LOCATION_PATH in wanted:
                params.append(
                    ParameterEntry(fd.path_key, LOCATION_PATH, required=True, schema=mapper.schema_for(fd.annotation))
                )
            continue

        if fd.header_key is not None:
            if LOCATION_HEADER in wanted:
                params.append(
                    ParameterEntry(
                        fd.header_key,
                        LOCATION_HEADER,
                        required=fd.has_rule("required"),
                        schema=mapper.schema_for(fd.annotation),
                    )
                )
            continue

        if fd.form_key is not None and LOCATION_QUERY in wanted:
            if fd.form_key in claimed_path:
                continue
            params.append(
                ParameterEntry(
                    fd.form_key,
                    LOCATION_QUERY,
                    required=fd.has_rule("required"),
                    schema=mapper.schema_for(fd.annotation),
                )
            )

    return params


def dedupe_parameters(params: Iterable[ParameterEntry]) -> list[ParameterEntry]:
    """Drop repeated ``(name, location)`` pairs, keeping the first."""
    seen: set[tuple[str, str]] = set()
    result: list[ParameterEntry] = []
    for param in params:
        if param.key in seen:
            continue
        seen.add(param.key)
        result.append(param)
    return result
