"""History command."""

import click
from rich.console import Console
from rich.table import Table

from . import cli
from .common import data_dir_option, open_service, reported_errors


@cli.command()
@data_dir_option
@click.argument("file_id")
def history(data_dir: str | None, file_id: str) -> None:
    """List the revisions of FILE_ID, most recent first.

    Use `kclcat show FILE_ID --rev SHA` to see the file at a revision.
    """
    service = open_service(data_dir)
    with reported_errors():
        revisions = service.list_revisions(file_id)
    if not revisions:
        click.echo(f"No revisions found for {file_id}.")
        return
    table = Table("SHA", "Date", "Author")
    for revision in revisions:
        table.add_row(revision.sha, revision.date, revision.author)
    Console().print(table)
