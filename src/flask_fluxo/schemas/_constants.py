"""Shared constants for the schema engine."""

from __future__ import annotations

from typing import Any

MIME_JSON = "application/json"
MIME_FORM = "application/x-www-form-urlencoded"
MIME_MULTIPART = "multipart/form-data"

# Value kinds assigned by the field extractor.
KIND_STRING = "string"
KIND_INTEGER = "integer"
KIND_NUMBER = "number"
KIND_BOOLEAN = "boolean"
KIND_OBJECT = "object"
KIND_ARRAY = "array"
KIND_FILE = "file"
KIND_FILE_ARRAY = "file_array"
KIND_UNKNOWN = "unknown"

FILE_KINDS = frozenset({KIND_FILE, KIND_FILE_ARRAY})

# Kind to OpenAPI schema for the primitive kinds.
PRIMITIVE_SCHEMAS: dict[str, dict[str, Any]] = {
    KIND_STRING: {"type": "string"},
    KIND_INTEGER: {"type": "integer", "format": "int64"},
    KIND_NUMBER: {"type": "number", "format": "double"},
    KIND_BOOLEAN: {"type": "boolean"},
}

BINARY_SCHEMA: dict[str, Any] = {"type": "string", "format": "binary"}

ANONYMOUS_SCHEMA_NAME = "Anonymous"
COMPONENT_REF_PREFIX = "#/components/schemas/"

# HTTP methods that never carry a request body.
BODYLESS_METHODS = frozenset({"GET", "HEAD"})
