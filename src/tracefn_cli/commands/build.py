from pathlib import Path
from typing import Annotated, List, Optional

import typer

from tracefn_core.facade import TraceFn
from tracefn_cli.console.console import Console
from tracefn_cli.models import ProfileOption
from tracefn_cli.services import create_cli_logger, load_config

app = typer.Typer()


@app.command()
def build(
    paths: Annotated[
        List[Path],
        typer.Argument(
            help='Python files or directories to transform',
            exists=True,
            file_okay=True,
            dir_okay=True,
            readable=True,
        ),
    ],
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            '--output',
            '-o',
            help='Directory to write the transformed sources. If not specified, sources are printed to stdout',
            dir_okay=True,
            file_okay=False,
        ),
    ] = None,
    profile: Annotated[
        Optional[ProfileOption],
        typer.Option(
            '--profile',
            '-p',
            help='Build profile (default: debug or TRACEFN_PROFILE)',
        ),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option(
            '--workers',
            '-w',
            help='Number of files transformed in parallel',
            min=1,
        ),
    ] = None,
    stop_on_error: Annotated[
        bool,
        typer.Option(
            '--stop-on-error',
            help='Stop at the first file that cannot be transformed',
        ),
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
    verbose: Annotated[
        bool,
        typer.Option('--verbose', '-v', help='Log every instrumented function'),
    ] = False,
):
    """Rewrite functions marked with @trace_fn into instrumented definitions."""
    config = load_config(env_file)
    console = Console(config=config)
    logger = create_cli_logger(config, verbose)

    tasks = TraceFn.collect_tasks(paths, output_dir)
    if not tasks:
        console.warning('No Python files found.')
        raise typer.Exit(1)

    results = TraceFn.build(
        tasks,
        profile=profile.value if profile else None,
        workers=workers,
        stop_on_error=stop_on_error,
        logger=logger,
    )
    results.sort(key=lambda result: str(result.task.source))

    failures = 0
    instrumented = 0
    elided = 0

    for result in results:
        if result.failed:
            failures += 1
            console.error(f'{result.task.source}: {result.error}')
            continue

        instrumented += len(result.result.instrumented)
        elided += len(result.result.functions) - len(result.result.instrumented)

        if result.task.target is None:
            typer.echo(result.result.source, nl=False)
        elif result.result.functions:
            console.success(
                f'{result.task.source} -> {result.task.target} '
                f'({len(result.result.functions)} marked)'
            )

    if output_dir is not None:
        console.newline()
        console.info(
            f'{len(results) - failures} files written, '
            f'{instrumented} functions instrumented, {elided} elided'
        )

    if failures:
        raise typer.Exit(1)
