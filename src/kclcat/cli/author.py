"""Author command."""

import click

from . import cli
from .common import data_dir_option, open_service, reported_errors


@cli.command()
@data_dir_option
@click.option("-r", "--rev", "revision", default=None, help="Show the author of this revision")
@click.argument("file_id", required=False)
def author(data_dir: str | None, revision: str | None, file_id: str | None) -> None:
    """Print the latest author of FILE_ID or the author of a revision."""
    if (file_id is None) == (revision is None):
        raise click.UsageError("pass either FILE_ID or --rev REVISION")
    service = open_service(data_dir)
    with reported_errors():
        if revision is not None:
            name = service.get_revision_author(revision)
        else:
            name = service.get_latest_author(file_id)
    click.echo(name)
