"""Commands listing the cached catalog."""

from collections.abc import Callable

import click
from rich.console import Console
from rich.table import Table

from ..cache import CacheState
from ..service import CatalogService
from . import cli
from .common import data_dir_option, open_service, reported_errors


def render_catalog(
    state: CacheState, console: Console, has_preview: Callable[[str], bool]
) -> None:
    """Print the cached entries as a table."""
    if not state.entries:
        console.print('The catalog is empty. Run "kclcat sync" first.')
        return
    table = Table("File", "Author", "Mass", "Preview", "SHA")
    for file_id in sorted(state.entries):
        entry = state.entries[file_id]
        mass = f"{entry.mass} {entry.mass_unit}" if entry.mass is not None else "N/A"
        preview = "yes" if has_preview(file_id) else "no"
        table.add_row(file_id, entry.author, mass, preview, entry.sha[:12])
    console.print(table)


def preview_checker(service: CatalogService) -> Callable[[str], bool]:
    """Return a function telling whether a file has a cached preview image."""
    return lambda file_id: service.preview_path(file_id).exists()


@cli.command("ls")
@data_dir_option
def ls(data_dir: str | None) -> None:
    """List the cached files with their author, mass, and preview status."""
    service = open_service(data_dir)
    with reported_errors():
        state = service.get_full_cache()
    render_catalog(state, Console(), preview_checker(service))


@cli.command()
@data_dir_option
def previews(data_dir: str | None) -> None:
    """List the files having a cached preview image."""
    service = open_service(data_dir)
    for file_id in service.list_preview_ids():
        click.echo(file_id)
