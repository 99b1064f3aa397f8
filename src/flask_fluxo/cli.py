"""Click CLI commands for flask-fluxo.

Provides the 'flask fluxo' command group with the 'openapi' subcommand,
which exports the document built from the registered routes.
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext

fluxo_cli = AppGroup("fluxo", help="flask-fluxo typed handler commands.")


@fluxo_cli.command("openapi")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    help="Document format.",
)
@click.option(
    "--dir",
    "-d",
    "output_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Output directory. Defaults to FLUXO_OUTPUT_DIR config.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the document instead of writing it.",
)
@with_appcontext
def openapi_command(output_format, output_dir, dry_run):
    """Export the OpenAPI document for the registered routes."""
    ext_data = current_app.extensions.get("fluxo")
    if ext_data is None:
        raise click.ClickException("flask-fluxo is not initialized for this app.")

    if output_dir is None:
        output_dir = ext_data["settings"].output_dir

    from flask_fluxo.output import get_writer

    document = ext_data["generator"].generate_document()
    writer = get_writer(output_format)

    click.echo(f"[flask-fluxo] Found {len(document['paths'])} documented paths.")

    if dry_run:
        click.echo("[flask-fluxo] Dry run -- no files written.")
        click.echo(writer.render(document))
        return

    try:
        file_path = writer.write(document, output_dir)
    except OSError as e:
        raise click.ClickException(f"Cannot write document to '{output_dir}': {e}")
    click.echo(f"[flask-fluxo] Written to {file_path}")
