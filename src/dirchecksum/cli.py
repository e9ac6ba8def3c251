"""dirchecksum - directory tree checksum CLI."""

import typer

from dirchecksum import __version__
from dirchecksum.commands import checksum, config
from dirchecksum.utils.console import setup_logging


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        typer.echo(f"dirchecksum version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="dirchecksum",
    help="Deterministic checksums for directory trees.",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each directory and file hashed"),
):
    """dirchecksum - directory tree checksums."""
    setup_logging(verbose)


app.add_typer(checksum.app, name="hash")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
