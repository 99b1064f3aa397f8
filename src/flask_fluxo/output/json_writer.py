"""JSON output writer for flask-fluxo.

Writes the generated OpenAPI document as a single openapi.json file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger("flask_fluxo")


class JSONWriter:
    """Writes an OpenAPI document to openapi.json."""

    filename = "openapi.json"

    def render(self, document: dict[str, Any]) -> str:
        return json.dumps(document, indent=2, ensure_ascii=False)

    def write(
        self,
        document: dict[str, Any],
        output_dir: str,
        dry_run: bool = False,
    ) -> Path:
        """Write ``document`` under ``output_dir`` and return the target path.

        With ``dry_run`` the path is computed but nothing touches the disk.
        """
        output_path = Path(output_dir).resolve()
        file_path = output_path / self.filename
        if not dry_run:
            output_path.mkdir(parents=True, exist_ok=True)
            file_path.write_text(self.render(document), encoding="utf-8")
            logger.debug("Written: %s", file_path)
        return file_path
