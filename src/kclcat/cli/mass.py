"""Mass command."""

import click

from ..mass import ScratchArea, ZooMassCalculator
from ..scripting import kcl_exception, kcl_logging
from . import cli
from .common import data_dir_option, open_service, verbose_option


@cli.command()
@data_dir_option
@click.option("--zoo", "executable", default="zoo", show_default=True, help="zoo executable")
@verbose_option
@click.argument("file_ids", nargs=-1, required=True)
def mass(data_dir: str | None, executable: str, verbose: bool, file_ids: tuple[str, ...]) -> None:
    """Compute and cache the mass of the given FILE_IDS.

    The material density comes from the `// material-density:` and
    `// material-density-units:` comments of each file. A failing file
    does not stop the others; the command exits with 1 if any failed.
    """
    kcl_logging.configure(verbose)
    interceptor = kcl_exception.Interceptor()
    with ScratchArea(data_dir=data_dir) as scratch:
        calculator = ZooMassCalculator(scratch, executable=executable)
        service = open_service(data_dir, calculator=calculator)
        with service.cache.lock():
            for file_id in file_ids:
                with interceptor(file_id):
                    result = service.refresh_mass(file_id)
                    click.echo(f"{file_id}: {result.mass} {result.unit}")

    if len(file_ids) > 1:
        click.echo(f"Computed {interceptor.succeeded}/{len(file_ids)} mass(es).")
    if interceptor.failed:
        click.echo(f"{len(interceptor.failures)} file(s) failed:", err=True)
        for failure in interceptor.failures:
            click.echo(f"  {failure.subject}: {failure.reason}", err=True)
    raise SystemExit(interceptor.exitcode())
