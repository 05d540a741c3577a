"""Print tracefn version information."""

import platform
import sys
from importlib.metadata import version as metadata_version

import typer

from tracefn_cli.console.console import Console


app = typer.Typer()

console = Console()


@app.command()
def version():
    """Print tracefn version information."""
    try:
        tracefn_version = metadata_version('tracefn')
    except Exception:
        tracefn_version = 'Development version'

    console.highlight('tracefn. Function tracing without the boilerplate.')
    console.newline()

    console.info(f'Version: {tracefn_version}')
    console.muted(
        f'Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}'
    )
    console.muted(f'Platform: {platform.platform()}')
