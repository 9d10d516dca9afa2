"""Sync command."""

import time

import click

from ..scripting import kcl_logging
from . import cli
from .common import data_dir_option, open_service, reported_errors, verbose_option


@cli.command()
@data_dir_option
@verbose_option
def sync(data_dir: str | None, verbose: bool) -> None:
    """Refresh the local cache from the remote repository.

    Lists the KCL files on the configured branch and records each
    file's fingerprint and latest author. Computed masses are kept.
    """
    kcl_logging.configure(verbose)
    service = open_service(data_dir)
    t0 = time.monotonic()
    with reported_errors(), service.cache.lock():
        state = service.trigger_sync(progress=True)
    elapsed = time.monotonic() - t0
    click.echo(f"Synchronized {len(state.entries)} file(s) in {elapsed:.1f}s.")
