"""Request content-type inference from field tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask_fluxo.schemas._constants import MIME_FORM, MIME_JSON, MIME_MULTIPART

if TYPE_CHECKING:
    from flask_fluxo.schemas.fields import ShapeDescriptor


def content_types_for(shape: ShapeDescriptor | None) -> list[str]:
    """Return the request content types a shape accepts.

    File fields force ``multipart/form-data``. Form keys give
    ``application/x-www-form-urlencoded``, with ``application/json`` added
    when json keys are present too. Otherwise JSON.
    """
    if shape is None:
        return [MIME_JSON]

    has_file = any(fd.is_file for fd in shape.fields)
    has_form = any(fd.form_key is not None for fd in shape.fields)
    has_json = any(fd.json_key is not None for fd in shape.fields)

    if has_file:
        return [MIME_MULTIPART]
    if has_form:
        content_types = [MIME_FORM]
        if has_json:
            content_types.append(MIME_JSON)
        return content_types
    return [MIME_JSON]
