from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.table import Table

from tracefn_core.facade import TraceFn
from tracefn_cli.console.console import Console
from tracefn_cli.models import ProfileOption
from tracefn_cli.services import create_cli_logger, load_config

app = typer.Typer()


@app.command()
def check(
    paths: Annotated[
        List[Path],
        typer.Argument(
            help='Python files or directories to check',
            exists=True,
            file_okay=True,
            dir_okay=True,
            readable=True,
        ),
    ],
    profile: Annotated[
        Optional[ProfileOption],
        typer.Option(
            '--profile',
            '-p',
            help='Build profile (default: debug or TRACEFN_PROFILE)',
        ),
    ] = None,
    show: Annotated[
        bool,
        typer.Option('--show', '-s', help='Print the generated definition of each function'),
    ] = False,
    env_file: Annotated[
        Optional[str],
        typer.Option(
            '--env',
            '-e',
            help='Path to .env file with configuration',
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
):
    """Report how marked functions would be generated, without writing anything."""
    config = load_config(env_file)
    console = Console(config=config)
    logger = create_cli_logger(config)

    tasks = TraceFn.collect_tasks(paths)
    results = sorted(
        TraceFn.build(tasks, profile=profile.value if profile else None, logger=logger),
        key=lambda result: str(result.task.source),
    )

    table = Table(title=f'Profile: {(profile.value if profile else config.profile.value)}')
    table.add_column('Function')
    table.add_column('Location', style='faint')
    table.add_column('Level')
    table.add_column('Mode')

    failures = [result for result in results if result.failed]

    for result in results:
        if result.failed:
            continue
        for function in result.result.functions:
            table.add_row(
                function.name,
                f'{result.task.source}:{function.lineno}',
                function.level.value,
                function.mode,
            )

    console.print(table)

    if show:
        for result in results:
            if result.failed:
                continue
            for function in result.result.functions:
                console.source(
                    function.source,
                    title=f'{result.task.source}:{function.lineno}',
                )

    for result in failures:
        console.error(f'{result.task.source}: {result.error}')

    if failures:
        raise typer.Exit(1)

    console.success('All marked functions can be generated.')
