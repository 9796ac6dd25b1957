"""Info command for har-scrub CLI - previews the names a HAR file contains."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

# Display order and titles for each name category
_SECTIONS = (
    ("headers", "Headers"),
    ("cookies", "Cookies"),
    ("queryArgs", "Query args"),
    ("postParams", "Post params"),
    ("mimeTypes", "Mime types"),
)


def info(
    har_file: Annotated[
        Path,
        typer.Argument(help="HAR file to inspect"),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Print the names as JSON"),
    ] = False,
) -> None:
    """List the headers, cookies, query args, post params and mime types in a HAR file.

    Use this to preview what --all-cookies, --all-headers, --all-query-args,
    --all-post-params and --all-mime-types would redact.

    Args:
        har_file: HAR file to inspect
        as_json: Print the names as a JSON object instead of a listing

    Example:
        har-scrub info capture.har
        har-scrub info capture.har --json
    """
    from har_scrub.sanitization import HarValidationError, extract_info

    if not har_file.exists():
        typer.echo(f"Error: File not found: {har_file}", err=True)
        raise typer.Exit(1)

    try:
        names = extract_info(har_file.read_text(encoding="utf-8")).as_dict()
    except HarValidationError as e:
        typer.echo(f"Error: Invalid HAR file: {e}", err=True)
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in HAR file: {e.msg} at line {e.lineno}", err=True)
        raise typer.Exit(1) from None

    if as_json:
        typer.echo(json.dumps(names, indent=2))
        return

    for key, title in _SECTIONS:
        values = names[key]
        typer.echo(f"{title} ({len(values)}):")
        for value in values:
            typer.echo(f"  {value}")
        if not values:
            typer.echo("  (none)")
