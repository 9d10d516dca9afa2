"""kclcat command-line interface."""

from importlib.metadata import version

import click

_PACKAGE_NAME = "kclcat"


def _get_version() -> str:
    """Return the installed package version string."""
    return version(_PACKAGE_NAME)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s", package_name=_PACKAGE_NAME)
def cli() -> None:
    """Browse a catalog of KCL files stored in a GitHub repository."""


@cli.command(hidden=True)
def help() -> None:
    """Show usage information."""
    click.echo('Use "kclcat --help" for usage information.')
    click.echo('Use "kclcat <command> --help" for help on a specific command.')


@cli.command("version")
def version_cmd() -> None:
    """Print the version number."""
    click.echo(_get_version())


# Register subcommands (must be after cli is defined)
from . import author as _author  # noqa: E402, F401
from . import catalog as _catalog  # noqa: E402, F401
from . import history as _history  # noqa: E402, F401
from . import mass as _mass  # noqa: E402, F401
from . import open as _open  # noqa: E402, F401
from . import setup as _setup  # noqa: E402, F401
from . import show as _show  # noqa: E402, F401
from . import sync as _sync  # noqa: E402, F401
