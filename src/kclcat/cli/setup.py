"""Setup command."""

import click

from ..config import DEFAULT_BRANCH, Configuration
from ..scripting import kcl_logging
from . import cli
from .common import data_dir_option, open_service, reported_errors, verbose_option


@cli.command()
@data_dir_option
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    prompt="GitHub access token",
    hide_input=True,
    help="GitHub access token (default: $GITHUB_TOKEN)",
)
@click.option("--repo", prompt="Repository (owner/name)", help="Repository as owner/name")
@click.option("--branch", default=DEFAULT_BRANCH, show_default=True, help="Branch to browse")
@verbose_option
def setup(data_dir: str | None, token: str, repo: str, branch: str, verbose: bool) -> None:
    """Validate and save the repository coordinates and access token.

    The token must authenticate with GitHub and the repository must be
    readable with it. Nothing is saved otherwise.
    """
    kcl_logging.configure(verbose)
    service = open_service(data_dir)
    with reported_errors():
        config = Configuration(token=token, repo=repo, branch=branch)
        result = service.save_configuration(config)
    if not result.ok:
        raise click.ClickException(result.message)
    click.echo(result.message)
    click.echo('Run "kclcat sync" to fetch the catalog.')
