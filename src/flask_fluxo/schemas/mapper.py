"""Type hint to OpenAPI schema mapping.

Type mapping table:
    str                 -> {"type": "string"}
    int                 -> {"type": "integer", "format": "int64"}
    float               -> {"type": "number", "format": "double"}
    bool                -> {"type": "boolean"}
    FileStorage         -> {"type": "string", "format": "binary"}
    list[FileStorage]   -> {"type": "array", "items": <binary>}
    BaseModel subclass  -> object schema, stored once in the ComponentRegistry
    list[Model]         -> {"type": "array", "items": <model schema>}
    list[primitive]     -> {"type": "array", "items": <primitive schema>}
    list[other]         -> {"type": "array", "items": {"type": "object"}}
    Optional[T]         -> schema for T
    anything else       -> {"type": "object"}
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from pydantic import BaseModel

from flask_fluxo.schemas._constants import (
    BINARY_SCHEMA,
    COMPONENT_REF_PREFIX,
    KIND_ARRAY,
    KIND_FILE,
    KIND_FILE_ARRAY,
    KIND_OBJECT,
    PRIMITIVE_SCHEMAS,
)
from flask_fluxo.schemas.fields import classify, extract_shape, sequence_element, shape_name, unwrap_optional

logger = logging.getLogger("flask_fluxo")


class ComponentRegistry:
    """Named component schemas, each synthesized exactly once.

    Entries never expire. ``in_progress`` holds the names of models whose
    schema is being built, so self-referential models resolve to a ``$ref``
    instead of recursing.
    """

    def __init__(self) -> None:
        self._schemas: dict[str, dict[str, Any]] = {}
        self._owners: dict[str, Any] = {}
        self.in_progress: set[str] = set()

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def get(self, name: str) -> dict[str, Any] | None:
        return self._schemas.get(name)

    def owner(self, name: str) -> Any:
        """The model class whose schema is stored under ``name``."""
        return self._owners.get(name)

    def store(self, name: str, schema: dict[str, Any], owner: Any = None) -> None:
        if name not in self._schemas:
            self._schemas[name] = schema
            self._owners[name] = owner

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Deep copy of every stored schema, in registration order."""
        return copy.deepcopy(self._schemas)


class SchemaMapper:
    """Builds OpenAPI schema dicts from type hints.

    Composite schemas are memoized in the given registry by model name.
    """

    def __init__(self, registry: ComponentRegistry) -> None:
        self.registry = registry

    def schema_for(self, hint: Any) -> dict[str, Any]:
        hint = unwrap_optional(hint)
        kind = classify(hint)

        if kind in PRIMITIVE_SCHEMAS:
            return dict(PRIMITIVE_SCHEMAS[kind])
        if kind == KIND_FILE:
            return dict(BINARY_SCHEMA)
        if kind == KIND_FILE_ARRAY:
            return {"type": "array", "items": dict(BINARY_SCHEMA)}
        if kind == KIND_OBJECT:
            return self.struct_schema(hint)
        if kind == KIND_ARRAY:
            return {"type": "array", "items": self._item_schema(sequence_element(hint))}

        if hint is not None and hint is not dict and hint is not Any:
            logger.debug("Unrecognized type hint %r, using generic object schema", hint)
        return {"type": "object"}

    def _item_schema(self, element: Any) -> dict[str, Any]:
        kind = classify(element)
        if kind in PRIMITIVE_SCHEMAS:
            return dict(PRIMITIVE_SCHEMAS[kind])
        if kind == KIND_OBJECT:
            return self.struct_schema(element)
        return {"type": "object"}

    def struct_schema(self, model: type[BaseModel]) -> dict[str, Any]:
        """Return the component schema for a model, building it on first use."""
        name = shape_name(model)

        existing = self.registry.get(name)
        if existing is not None:
            owner = self.registry.owner(name)
            if owner is not None and owner is not model:
                logger.debug(
                    "Schema name %s of %s.%s already used by %s.%s, reusing the stored schema",
                    name,
                    model.__module__,
                    model.__qualname__,
                    owner.__module__,
                    owner.__qualname__,
                )
            return existing

        if name in self.registry.in_progress:
            logger.debug("Recursive reference to schema %s, emitting $ref", name)
            return {"$ref": COMPONENT_REF_PREFIX + name}

        self.registry.in_progress.add(name)
        try:
            schema = self._build_struct(model)
        finally:
            self.registry.in_progress.discard(name)

        self.registry.store(name, schema, owner=model)
        return schema

    def _build_struct(self, model: type[BaseModel]) -> dict[str, Any]:
        shape = extract_shape(model)
        properties: dict[str, Any] = {}
        required: list[str] = []

        for fd in shape.fields if shape is not None else ():
            # Body name wins over the form name.
            prop_name = fd.json_key or fd.form_key
            if prop_name is None:
                continue

            # Copy so per-field decorations never leak into a cached component.
            prop = dict(self.schema_for(fd.annotation))
            if fd.rules:
                prop["description"] = f"Validation: {fd.validate}"
                if fd.has_rule("email"):
                    prop["format"] = "email"
                if fd.has_rule("required"):
                    required.append(prop_name)

            properties[prop_name] = prop

        schema: dict[str, Any] = {"type": "object"}
        if properties:
            schema["properties"] = properties
        if required:
            schema["required"] = required
        return schema
