"""Helpers shared by the kclcat subcommands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click

from ..errors import KclcatError
from ..mass import MassCalculator
from ..service import CatalogService

data_dir_option = click.option(
    "-d", "--dir", "data_dir", default=None, help="Data directory (default: .kclcat)"
)

verbose_option = click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode.")


def open_service(
    data_dir: str | None, *, calculator: MassCalculator | None = None
) -> CatalogService:
    """Create the CatalogService for the given data directory."""
    return CatalogService.from_data_dir(data_dir, calculator=calculator)


@contextmanager
def reported_errors() -> Iterator[None]:
    """Convert kclcat errors into click errors printed to the user."""
    try:
        yield
    except KclcatError as exc:
        raise click.ClickException(str(exc)) from exc
