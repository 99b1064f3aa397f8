"""YAML output writer for flask-fluxo."""

from __future__ import annotations

from typing import Any

import yaml

from flask_fluxo.output.json_writer import JSONWriter


class YAMLWriter(JSONWriter):
    """Writes an OpenAPI document to openapi.yaml, keeping key order."""

    filename = "openapi.yaml"

    def render(self, document: dict[str, Any]) -> str:
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
