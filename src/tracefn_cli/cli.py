"""Command line interface for tracefn."""

from typing import Optional

import typer
from typing_extensions import Annotated
from importlib.metadata import version as metadata_version

from tracefn_cli.console.console import Console
from tracefn_cli.commands.build import app as build_command
from tracefn_cli.commands.check import app as check_command
from tracefn_cli.commands.env import app as env_command
from tracefn_cli.commands.version import app as version_command


app = typer.Typer(
    name='tracefn',
    help='Instrument Python functions with entry/exit tracing at build time.',
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_enable=False,
)

console = Console()


def version_callback(value: bool):
    if value:
        try:
            tracefn_version = metadata_version('tracefn')
        except Exception:
            tracefn_version = 'Development version'

        console.info(f'tracefn {tracefn_version}')
        raise typer.Exit()


@app.callback()
def callback(
    version: Annotated[
        Optional[bool],
        typer.Option(
            '--version',
            callback=version_callback,
            is_eager=True,
            help='Show tracefn version',
        ),
    ] = None,
):
    """Define the common command options"""


app.add_typer(build_command)
app.add_typer(check_command)
app.add_typer(env_command)
app.add_typer(version_command)


def main():
    """Entry point for the CLI."""
    app()
