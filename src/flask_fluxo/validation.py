"""Rule-based validation of bound request models.

Rules come from the ``validate`` tag of each field's Bind metadata:

    required   value is not the zero value ("", 0, False, None, empty)
    email      string is an email address
    min=N      length (strings, collections) or value (numbers) >= N
    max=N      length or value <= N
    len=N      length or value == N
    numeric    string is a decimal number
    alpha      string has only ASCII letters
    alphanum   string has only ASCII letters and digits

Error messages are rendered per language. Translations are ``str.format``
templates using ``{field}`` and ``{param}``::

    register_translation("ja", "required", "{field} は必須です")

Lookup tries the exact language (``fr-CA``), then its primary subtag
(``fr``), then the built-in English message.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel
from werkzeug.datastructures import FileStorage

from flask_fluxo.errors import ValidationFailed
from flask_fluxo.schemas.fields import extract_shape

logger = logging.getLogger("flask_fluxo")

_EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)
_NUMERIC_RE = re.compile(r"^[-+]?[0-9]+(?:\.[0-9]+)?$")
_ALPHA_RE = re.compile(r"^[a-zA-Z]+$")
_ALPHANUM_RE = re.compile(r"^[a-zA-Z0-9]+$")

_DEFAULT_MESSAGES: dict[str, str] = {
    "required": "{field} is required",
    "email": "{field} must be a valid email address",
    "min": "{field} must be at least {param} characters",
    "max": "{field} must be at most {param} characters",
    "len": "{field} must be exactly {param} characters",
    "numeric": "{field} must be numeric",
    "alpha": "{field} must contain only letters",
    "alphanum": "{field} must contain only letters and numbers",
}
# min, max and len compare the value itself for numbers.
_NUMERIC_MESSAGES: dict[str, str] = {
    "min": "{field} must be at least {param}",
    "max": "{field} must be at most {param}",
    "len": "{field} must equal {param}",
}
_FALLBACK_MESSAGE = "{field} failed validation for {tag}"


@dataclass(frozen=True)
class FieldError:
    """A single failed rule."""

    field: str
    tag: str
    param: str | None = None
    numeric: bool = False


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, FileStorage):
        return not value.filename
    if isinstance(value, BaseModel):
        return False
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, dict)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return not value
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _size(value: Any) -> float | None:
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, dict)):
        return len(value)
    if isinstance(value, (bool, int, float)):
        return float(value)
    return None


def _check_required(value: Any, param: str | None) -> bool:
    return not _is_zero(value)


def _check_email(value: Any, param: str | None) -> bool:
    return isinstance(value, str) and _EMAIL_RE.match(value) is not None


def _check_min(value: Any, param: str | None) -> bool:
    size = _size(value)
    return size is None or size >= float(param or 0)


def _check_max(value: Any, param: str | None) -> bool:
    size = _size(value)
    return size is None or size <= float(param or 0)


def _check_len(value: Any, param: str | None) -> bool:
    size = _size(value)
    return size is None or size == float(param or 0)


def _check_numeric(value: Any, param: str | None) -> bool:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return True
    return isinstance(value, str) and _NUMERIC_RE.match(value) is not None


def _check_alpha(value: Any, param: str | None) -> bool:
    return isinstance(value, str) and _ALPHA_RE.match(value) is not None


def _check_alphanum(value: Any, param: str | None) -> bool:
    return isinstance(value, str) and _ALPHANUM_RE.match(value) is not None


_CHECKS: dict[str, Callable[[Any, str | None], bool]] = {
    "required": _check_required,
    "email": _check_email,
    "min": _check_min,
    "max": _check_max,
    "len": _check_len,
    "numeric": _check_numeric,
    "alpha": _check_alpha,
    "alphanum": _check_alphanum,
}


class Translations:
    """Per-language message templates keyed by rule tag."""

    def __init__(self) -> None:
        self._messages: dict[str, dict[str, str]] = {}
        self._lock = threading.RLock()

    def register(self, lang: str, tag: str, message: str) -> None:
        with self._lock:
            self._messages.setdefault(lang.lower(), {})[tag] = message

    def lookup(self, lang: str | None, tag: str) -> str | None:
        if not lang:
            return None
        lang = lang.lower()
        candidates = [lang]
        primary = lang.split("-", 1)[0]
        if primary != lang:
            candidates.append(primary)

        with self._lock:
            for candidate in candidates:
                message = self._messages.get(candidate, {}).get(tag)
                if message is not None:
                    return message
        return None

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()

    def format(self, error: FieldError, lang: str | None) -> str:
        """Render an error in ``lang``, falling back to English."""
        template = self.lookup(lang, error.tag)
        if template is None:
            if error.numeric and error.tag in _NUMERIC_MESSAGES:
                template = _NUMERIC_MESSAGES[error.tag]
            else:
                template = _DEFAULT_MESSAGES.get(error.tag, _FALLBACK_MESSAGE)
        return template.format(field=error.field, param=error.param or "", tag=error.tag)


default_translations = Translations()


def register_translation(lang: str, tag: str, message: str) -> None:
    """Register a message template on the default Translations."""
    default_translations.register(lang, tag, message)


def collect_errors(instance: BaseModel) -> list[FieldError]:
    """Run every field's rules, descending into nested models."""
    shape = extract_shape(type(instance))
    if shape is None:
        return []

    errors: list[FieldError] = []
    for fd in shape.fields:
        value = getattr(instance, fd.name, None)

        for tag, param in fd.rules.items():
            check = _CHECKS.get(tag)
            if check is None:
                logger.debug("Unknown validation rule %r on %s.%s ignored", tag, shape.name, fd.name)
                continue
            if not check(value, param):
                numeric = tag in _NUMERIC_MESSAGES and _is_number(value)
                errors.append(FieldError(field=fd.name, tag=tag, param=param, numeric=numeric))

        if isinstance(value, BaseModel):
            errors.extend(collect_errors(value))

    return errors


def validate_model(
    instance: Any,
    lang: str | None = "en",
    translations: Translations | None = None,
) -> None:
    """Validate a bound model.

    Args:
        instance: The bound request model. Non-model values pass.
        lang: Language used to render error messages.
        translations: Message templates; defaults to the shared registry.

    Raises:
        ValidationFailed: If any rule fails.
    """
    if not isinstance(instance, BaseModel):
        return

    errors = collect_errors(instance)
    if not errors:
        return

    translations = translations or default_translations
    messages = [translations.format(e, lang) for e in errors]
    raise ValidationFailed(errors, messages)
