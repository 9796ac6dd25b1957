"""Main CLI entry point for har-scrub.

Provides commands for:
- sanitize: Redact sensitive data from HAR files
- info: List the headers, cookies, query args, post params and mime types in a HAR file
"""

from __future__ import annotations

try:
    import typer
except ImportError as e:
    raise ImportError("CLI dependencies not installed. Install with: pip install har-scrub[cli]") from e

from har_scrub.cli.info import info
from har_scrub.cli.sanitize import sanitize

app = typer.Typer(
    name="har-scrub",
    help="Redact sensitive data from HAR files.",
    no_args_is_help=True,
)

app.command()(sanitize)
app.command()(info)


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version flag was provided
    """
    if value:
        from har_scrub import __version__

        typer.echo(f"har-scrub {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    r"""Redact sensitive data from HAR files.

    \b
    Examples:
        har-scrub sanitize capture.har
        har-scrub sanitize capture.har --all-cookies --all-headers
        har-scrub info capture.har
    """


if __name__ == "__main__":
    app()
