"""Request binding onto tagged pydantic models.

bind_request() collects raw values from every source a field is tagged
with, then lets pydantic coerce them into the model. Sources are applied in
this order, later ones overriding earlier ones:

1. Body (non GET/HEAD requests with content): form fields and files for
   form-urlencoded and multipart requests, JSON for anything else.
2. Query string, read through ``form`` keys.
3. Path placeholders, read through ``uri`` keys.
4. Headers, read through ``header`` keys.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest

from flask_fluxo.errors import BindingError
from flask_fluxo.schemas._constants import BODYLESS_METHODS, KIND_ARRAY, KIND_FILE_ARRAY, MIME_FORM, MIME_MULTIPART
from flask_fluxo.schemas.fields import extract_shape, is_model, is_sequence, sequence_element, unwrap_optional

if TYPE_CHECKING:
    from flask import Request

    from flask_fluxo.schemas.fields import FieldDescriptor, ShapeDescriptor

logger = logging.getLogger("flask_fluxo")


def has_body(request: Request) -> bool:
    return request.method not in BODYLESS_METHODS and (request.content_length or 0) > 0


def _read_json(request: Request) -> Any:
    try:
        return request.get_json(force=True)
    except BadRequest as exc:
        raise BindingError(f"JSON binding failed: {exc.description}") from exc


def _remap_json(hint: Any, value: Any) -> Any:
    """Rename json keys to attribute names, recursively for nested models."""
    hint = unwrap_optional(hint)
    if is_model(hint) and isinstance(value, dict):
        shape = extract_shape(hint)
        return {
            fd.name: _remap_json(fd.annotation, value[fd.json_key])
            for fd in shape.fields
            if fd.json_key is not None and fd.json_key in value
        }
    if is_sequence(hint) and isinstance(value, list):
        element = sequence_element(hint)
        return [_remap_json(element, item) for item in value]
    return value


def _multi_value(fd: FieldDescriptor, values: Any, key: str) -> Any:
    if fd.kind == KIND_ARRAY:
        return values.getlist(key)
    return values[key]


def _bind_body(shape: ShapeDescriptor, request: Request, data: dict[str, Any]) -> None:
    if request.mimetype in (MIME_FORM, MIME_MULTIPART):
        for fd in shape.fields:
            if fd.form_key is None:
                continue
            if fd.is_file:
                files = request.files.getlist(fd.form_key)
                if files:
                    data[fd.name] = files if fd.kind == KIND_FILE_ARRAY else files[0]
            elif fd.form_key in request.form:
                data[fd.name] = _multi_value(fd, request.form, fd.form_key)
        return

    payload = _read_json(request)
    if payload is None:
        return
    if not isinstance(payload, dict):
        raise BindingError("JSON binding failed: expected a JSON object")
    for fd in shape.fields:
        if fd.json_key is not None and fd.json_key in payload:
            data[fd.name] = _remap_json(fd.annotation, payload[fd.json_key])


def _collect(shape: ShapeDescriptor, request: Request) -> dict[str, Any]:
    data: dict[str, Any] = {}

    if has_body(request):
        _bind_body(shape, request, data)

    view_args = request.view_args or {}
    for fd in shape.fields:
        if fd.is_file:
            continue
        if fd.form_key is not None and fd.form_key in request.args:
            data[fd.name] = _multi_value(fd, request.args, fd.form_key)
        if fd.path_key is not None and fd.path_key in view_args:
            data[fd.name] = view_args[fd.path_key]
        if fd.header_key is not None and fd.header_key in request.headers:
            data[fd.name] = request.headers[fd.header_key]

    return data


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def bind_request(model: Any, request: Request) -> Any:
    """Bind the current request onto ``model``.

    Args:
        model: Request type from the handler's signature. Pydantic models
            are bound field by field; any other type receives the decoded
            JSON body (or None).
        request: The Flask request.

    Returns:
        The bound model instance, or the raw JSON body for untagged types.

    Raises:
        BindingError: Malformed JSON body or values pydantic cannot coerce.
    """
    shape = extract_shape(model)
    if shape is None:
        if model is None or not has_body(request) or request.mimetype in (MIME_FORM, MIME_MULTIPART):
            return None
        return _read_json(request)

    data = _collect(shape, request)
    try:
        return shape.model.model_validate(data)
    except PydanticValidationError as exc:
        logger.debug("Binding %s failed: %s", shape.name, exc)
        raise BindingError(f"Binding failed: {_describe(exc)}") from exc


def dump_response(value: Any) -> Any:
    """Convert a handler result to JSON-ready data using json keys."""
    if isinstance(value, BaseModel):
        shape = extract_shape(type(value))
        result: dict[str, Any] = {}
        for fd in shape.fields:
            if fd.json_omit:
                continue
            result[fd.json_key or fd.name] = dump_response(getattr(value, fd.name))
        return result
    if isinstance(value, dict):
        return {key: dump_response(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [dump_response(item) for item in value]
    if isinstance(value, FileStorage):
        return value.filename
    return value
