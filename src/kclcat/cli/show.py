"""Show command."""

import click

from . import cli
from .common import data_dir_option, open_service, reported_errors


@cli.command()
@data_dir_option
@click.option("-r", "--rev", "revision", default=None, help="Show the file at this revision")
@click.argument("file_id")
def show(data_dir: str | None, revision: str | None, file_id: str) -> None:
    """Print the content of FILE_ID (the name without .kcl)."""
    service = open_service(data_dir)
    with reported_errors():
        if revision is None:
            content = service.get_file_content(file_id)
        else:
            content = service.get_file_content_at_revision(file_id, revision)
    click.echo(content, nl=not content.endswith("\n"))
