"""Field tag extraction for request and response shapes.

A shape is a pydantic ``BaseModel`` subclass. Each field declares the parts
of the HTTP request it is read from with ``Bind`` metadata::

    class GetUser(BaseModel):
        id: Annotated[str, Bind(uri="id")] = ""
        limit: Annotated[int, Bind(form="limit")] = 0
        token: Annotated[str, Bind(header="Authorization", validate="required")] = ""

Tag values follow the ``name,opt1,opt2`` convention: only the segment
before the first comma is the binding key, and an empty name or ``-`` opts
the field out of that source.

Descriptors are built once per model class and memoized.
"""

from __future__ import annotations

import functools
import logging
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict
from werkzeug.datastructures import FileStorage

from flask_fluxo.schemas._constants import (
    ANONYMOUS_SCHEMA_NAME,
    FILE_KINDS,
    KIND_ARRAY,
    KIND_BOOLEAN,
    KIND_FILE,
    KIND_FILE_ARRAY,
    KIND_INTEGER,
    KIND_NUMBER,
    KIND_OBJECT,
    KIND_STRING,
    KIND_UNKNOWN,
)

logger = logging.getLogger("flask_fluxo")

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class Bind:
    """Source tags for one model field.

    Attributes:
        json: Key in a JSON request body.
        form: Key in a form body or in the query string.
        uri: Name of a ``:name`` route placeholder.
        header: Request header name.
        validate: Comma-separated validation rules (``required,min=2``).
    """

    json: str | None = None
    form: str | None = None
    uri: str | None = None
    header: str | None = None
    validate: str | None = None


class Shape(BaseModel):
    """Convenience base for request models.

    Allows werkzeug ``FileStorage`` fields for multipart uploads.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)


@dataclass(frozen=True)
class FieldDescriptor:
    """Normalized view of one shape field."""

    name: str
    annotation: Any
    kind: str
    json_key: str | None = None
    form_key: str | None = None
    path_key: str | None = None
    header_key: str | None = None
    json_omit: bool = False
    validate: str = ""
    rules: dict[str, str | None] = field(default_factory=dict)

    @property
    def is_file(self) -> bool:
        return self.kind in FILE_KINDS

    @property
    def is_bound(self) -> bool:
        """True when at least one source binding survives opt-outs."""
        return any(key is not None for key in (self.json_key, self.form_key, self.path_key, self.header_key))

    def has_rule(self, rule: str) -> bool:
        return rule in self.rules


@dataclass(frozen=True)
class ShapeDescriptor:
    """Ordered field descriptors of one model class."""

    name: str
    model: type[BaseModel]
    fields: tuple[FieldDescriptor, ...]

    def has_body_binding(self) -> bool:
        return any(f.json_key is not None or f.form_key is not None or f.is_file for f in self.fields)


def tag_name(value: str | None) -> str | None:
    """Return the binding key of a tag value, or None when opted out."""
    if value is None:
        return None
    name = value.split(",", 1)[0].strip()
    if not name or name == "-":
        return None
    return name


def _is_opt_out(value: str | None) -> bool:
    return value is not None and value.split(",", 1)[0].strip() == "-"


def parse_rules(tag: str | None) -> dict[str, str | None]:
    """Parse ``required,min=18`` into ``{"required": None, "min": "18"}``."""
    rules: dict[str, str | None] = {}
    if not tag:
        return rules
    for part in tag.split(","):
        part = part.strip()
        if not part:
            continue
        rule, sep, param = part.partition("=")
        rules[rule.strip()] = param.strip() if sep else None
    return rules


def unwrap_optional(hint: Any) -> Any:
    """Return ``T`` for ``Optional[T]`` / ``T | None``, else the hint itself."""
    origin = get_origin(hint)
    if origin is Union or isinstance(hint, types.UnionType):
        non_none = [a for a in get_args(hint) if a is not type(None)]
        if len(non_none) == 1:
            return non_none[0]
    return hint


def _is_class(hint: Any) -> bool:
    # list[int] passes isinstance(..., type) on 3.10
    return isinstance(hint, type) and get_origin(hint) is None


def is_model(hint: Any) -> bool:
    return _is_class(hint) and issubclass(hint, BaseModel)


def is_file(hint: Any) -> bool:
    return _is_class(hint) and issubclass(hint, FileStorage)


def is_sequence(hint: Any) -> bool:
    return get_origin(hint) in _SEQUENCE_ORIGINS or hint in _SEQUENCE_ORIGINS


def sequence_element(hint: Any) -> Any:
    """Return the element type of ``list[T]``-like hints, or None."""
    args = get_args(hint)
    if not args:
        return None
    return unwrap_optional(args[0])


def classify(hint: Any) -> str:
    """Map a type hint to one of the value kinds."""
    hint = unwrap_optional(hint)

    if is_file(hint):
        return KIND_FILE
    if _is_class(hint):
        # bool is a subclass of int
        if issubclass(hint, bool):
            return KIND_BOOLEAN
        if issubclass(hint, str):
            return KIND_STRING
        if issubclass(hint, int):
            return KIND_INTEGER
        if issubclass(hint, float):
            return KIND_NUMBER
        if issubclass(hint, BaseModel):
            return KIND_OBJECT

    if is_sequence(hint):
        if is_file(sequence_element(hint)):
            return KIND_FILE_ARRAY
        return KIND_ARRAY

    return KIND_UNKNOWN


def _find_bind(metadata: list[Any]) -> Bind | None:
    for item in metadata:
        if isinstance(item, Bind):
            return item
    return None


def shape_name(model: type) -> str:
    return getattr(model, "__name__", "") or ANONYMOUS_SCHEMA_NAME


@functools.lru_cache(maxsize=None)
def _extract(model: type[BaseModel]) -> ShapeDescriptor:
    descriptors: list[FieldDescriptor] = []

    for name, info in model.model_fields.items():
        bind = _find_bind(info.metadata)
        if bind is None:
            descriptors.append(FieldDescriptor(name=name, annotation=info.annotation, kind=classify(info.annotation)))
            continue

        descriptors.append(
            FieldDescriptor(
                name=name,
                annotation=info.annotation,
                kind=classify(info.annotation),
                json_key=tag_name(bind.json),
                form_key=tag_name(bind.form),
                path_key=tag_name(bind.uri),
                header_key=tag_name(bind.header),
                json_omit=_is_opt_out(bind.json),
                validate=bind.validate or "",
                rules=parse_rules(bind.validate),
            )
        )

    shape = ShapeDescriptor(name=shape_name(model), model=model, fields=tuple(descriptors))
    logger.debug("Extracted shape %s with %d fields", shape.name, len(shape.fields))
    return shape


def extract_shape(model: Any) -> ShapeDescriptor | None:
    """Return the memoized ShapeDescriptor for a model class.

    ``Optional[Model]`` is unwrapped. Anything that is not a pydantic model
    class yields None.
    """
    model = unwrap_optional(model)
    if not is_model(model):
        return None
    return _extract(model)


def resolve_hints(func: Any) -> dict[str, Any]:
    """Type hints of a callable, tolerant of unresolvable forward references."""
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError):
        logger.debug("Could not resolve type hints for %r", func, exc_info=True)
        return dict(getattr(func, "__annotations__", {}) or {})
