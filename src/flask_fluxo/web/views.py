"""Swagger UI page for the docs Blueprint."""

from __future__ import annotations

import json

from flask import Blueprint, Response, current_app
from markupsafe import escape

_SWAGGER_UI_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/swagger-ui-dist@{ui_version}/swagger-ui.css">
<style>
  html {{ box-sizing: border-box; overflow: -moz-scrollbars-vertical; overflow-y: scroll; }}
  *, *:before, *:after {{ box-sizing: inherit; }}
  body {{ margin: 0; background: #fafafa; }}
</style>
</head>
<body>
<div id="swagger-ui"></div>
<script src="https://cdn.jsdelivr.net/npm/swagger-ui-dist@{ui_version}/swagger-ui-bundle.js"></script>
<script src="https://cdn.jsdelivr.net/npm/swagger-ui-dist@{ui_version}/swagger-ui-standalone-preset.js"></script>
<script>
  window.onload = function() {{
    window.ui = SwaggerUIBundle({{
      url: {openapi_url},
      dom_id: '#swagger-ui',
      deepLinking: true,
      presets: [
        SwaggerUIBundle.presets.apis,
        SwaggerUIStandalonePreset
      ],
      plugins: [
        SwaggerUIBundle.plugins.DownloadUrl
      ],
      layout: "StandaloneLayout"
    }});
  }};
</script>
</body>
</html>
"""


def render_swagger_ui(title: str, openapi_url: str, ui_version: str = "5.9.0") -> str:
    """Return a standalone HTML page that loads the document from ``openapi_url``."""
    return _SWAGGER_UI_HTML.format(
        title=escape(title),
        openapi_url=json.dumps(openapi_url),
        ui_version=escape(ui_version),
    )


def register_view_routes(bp: Blueprint, docs_path: str) -> None:
    @bp.route(docs_path)
    def swagger_ui():
        ext_data = current_app.extensions["fluxo"]
        settings = ext_data["settings"]
        page = render_swagger_ui(
            ext_data["generator"].page_title,
            settings.openapi_path,
            settings.swagger_ui_version,
        )
        return Response(page, content_type="text/html")
