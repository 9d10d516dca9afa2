"""Open command."""

import click
from rich.console import Console

from ..errors import AuthFailure, ConfigMissing, KclcatError, RemoteUnavailable
from ..scripting import kcl_logging
from . import cli
from .catalog import preview_checker, render_catalog
from .common import data_dir_option, open_service, verbose_option

_SETUP_HINT = 'Run "kclcat setup" to configure the repository and access token.'


@cli.command("open")
@data_dir_option
@verbose_option
def open_cmd(data_dir: str | None, verbose: bool) -> None:
    """Start a session: synchronize and show the catalog.

    Without a configuration, or when the startup synchronization fails
    because of the configuration or the remote host, we point you to
    the setup flow instead. Other failures, such as a corrupt cache,
    are reported as errors.
    """
    kcl_logging.configure(verbose)
    service = open_service(data_dir)
    if service.needs_setup():
        click.echo("No configuration found.", err=True)
        click.echo(_SETUP_HINT, err=True)
        raise SystemExit(1)

    try:
        with service.cache.lock():
            state = service.trigger_sync(progress=True)
    except (ConfigMissing, AuthFailure, RemoteUnavailable) as exc:
        click.echo(f"Startup synchronization failed: {exc}", err=True)
        click.echo(_SETUP_HINT, err=True)
        raise SystemExit(1) from exc
    except KclcatError as exc:
        raise click.ClickException(str(exc)) from exc

    render_catalog(state, Console(), preview_checker(service))
