import typer
from pathlib import Path

from tracefn_cli.console.console import Console


app = typer.Typer()

console = Console()


@app.command()
def env():
    """Create an environment file with tracefn configuration."""
    from importlib.resources import files

    try:
        example_content = files('tracefn_cli').joinpath('.env.example').read_text()

        env_file_path: Path = Path.cwd() / '.env'

        console.action('Create env file')

        if env_file_path.exists():
            console.highlight('.env file already exists')
            console.newline()
            overwrite = typer.confirm('Do you want to overwrite it?', default=False)
            if not overwrite:
                console.faint('Leaving your file as is.')
                return

        env_file_path.write_text(example_content)

        console.success('Created .env file with default configuration.')
        console.faint('Edit the file to configure your settings.')
    except Exception as e:
        console.error(f'Error creating .env file: {str(e)}')
        raise typer.Exit(1)
