"""Schema engine subpackage for flask-fluxo.

Turns tagged pydantic models into OpenAPI building blocks:
- fields: Bind tags and memoized ShapeDescriptor extraction
- mapper: type hint -> schema dict, with the ComponentRegistry
- parameters: path/header/query parameters for a route
- content_types: request content types inferred from tags
"""

from __future__ import annotations

from flask_fluxo.schemas.content_types import content_types_for
from flask_fluxo.schemas.fields import Bind, FieldDescriptor, Shape, ShapeDescriptor, extract_shape
from flask_fluxo.schemas.mapper import ComponentRegistry, SchemaMapper
from flask_fluxo.schemas.parameters import ParameterEntry, dedupe_parameters, extract_path_parameters, params_for

__all__ = [
    "Bind",
    "ComponentRegistry",
    "FieldDescriptor",
    "ParameterEntry",
    "SchemaMapper",
    "Shape",
    "ShapeDescriptor",
    "content_types_for",
    "dedupe_parameters",
    "extract_path_parameters",
    "extract_shape",
    "params_for",
]
