"""Output writer subpackage for flask-fluxo.

Provides get_writer() factory for selecting the document format.

JSON writer is available via output_format="json" (default).
YAML writer is available via output_format="yaml".
"""

from __future__ import annotations


def get_writer(output_format: str = "json"):
    """Return a writer instance for the given format.

    Args:
        output_format: "json" for openapi.json, "yaml" for openapi.yaml.

    Returns:
        A JSONWriter or YAMLWriter instance.

    Raises:
        ValueError: If format is unknown.
    """
    if output_format == "json":
        from flask_fluxo.output.json_writer import JSONWriter

        return JSONWriter()
    elif output_format == "yaml":
        from flask_fluxo.output.yaml_writer import YAMLWriter

        return YAMLWriter()
    else:
        raise ValueError(f"Unknown output format: {output_format!r}")
