"""Sanitize command for har-scrub CLI."""

from __future__ import annotations

import gzip
import json
import re
from pathlib import Path
from typing import Annotated

import typer

from har_scrub.catalog import CatalogLoadError


def sanitize(
    input_file: Annotated[
        Path,
        typer.Argument(help="HAR file to sanitize"),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output filename (default: input.sanitized.har)"),
    ] = None,
    words: Annotated[
        list[str] | None,
        typer.Option("--word", "-w", help="Name whose value to redact (repeatable, replaces defaults)"),
    ] = None,
    mime_types: Annotated[
        list[str] | None,
        typer.Option("--mime-type", "-m", help="Mime type whose bodies to blank (repeatable, replaces defaults)"),
    ] = None,
    all_cookies: Annotated[
        bool,
        typer.Option("--all-cookies", help="Redact every cookie found in the file"),
    ] = False,
    all_headers: Annotated[
        bool,
        typer.Option("--all-headers", help="Redact every header found in the file"),
    ] = False,
    all_query_args: Annotated[
        bool,
        typer.Option("--all-query-args", help="Redact every query argument found in the file"),
    ] = False,
    all_post_params: Annotated[
        bool,
        typer.Option("--all-post-params", help="Redact every post parameter found in the file"),
    ] = False,
    all_mime_types: Annotated[
        bool,
        typer.Option("--all-mime-types", help="Blank bodies of every mime type found in the file"),
    ] = False,
    keep_media: Annotated[
        bool,
        typer.Option("--keep-media", help="Keep image/video bodies and websocket messages"),
    ] = False,
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", "-c", help="Custom scrub catalog JSON file"),
    ] = None,
    max_size: Annotated[
        int | None,
        typer.Option("--max-size", help="Max file size in MB (default: 100, 0=unlimited)"),
    ] = 100,
    compress: Annotated[
        bool,
        typer.Option("--compress", "-z", help="Also create compressed .har.gz file"),
    ] = False,
    compression_level: Annotated[
        int,
        typer.Option("--compression-level", help="Gzip compression level 1-9 (default: 9)"),
    ] = 9,
) -> None:
    """Redact sensitive data from a HAR file.

    Blanks image/video, script and stylesheet bodies, blanks bodies of known
    sensitive endpoints, redacts the values of sensitive names (built-in list
    or --word) and strips signatures of compact signed tokens.

    Args:
        input_file: HAR file to sanitize
        output: Output filename (default: input.sanitized.har)
        words: Names whose values to redact instead of the built-in list
        mime_types: Mime types whose bodies to blank instead of the built-in list
        all_cookies: Also redact every cookie found in the file
        all_headers: Also redact every header found in the file
        all_query_args: Also redact every query argument found in the file
        all_post_params: Also redact every post parameter found in the file
        all_mime_types: Also blank bodies of every mime type found in the file
        keep_media: Skip the image/video pass
        catalog: Custom catalog JSON file to merge with the built-in one
        max_size: Maximum file size in MB (default: 100, 0=unlimited)
        compress: Also create compressed .har.gz file
        compression_level: Gzip compression level 1-9 (default: 9)

    Example:
        har-scrub sanitize capture.har
        har-scrub sanitize capture.har --output clean.har --compress
        har-scrub sanitize capture.har -w Authorization -w session_id
        har-scrub sanitize capture.har --all-cookies --all-headers
        har-scrub sanitize capture.har --keep-media
        har-scrub sanitize capture.har --catalog team-catalog.json
    """
    from har_scrub.sanitization import (
        HarSizeError,
        HarValidationError,
        SanitizeOptions,
        sanitize_har_file,
    )

    if not input_file.exists():
        typer.echo(f"Error: File not found: {input_file}", err=True)
        raise typer.Exit(1)

    if not 1 <= compression_level <= 9:
        typer.echo(f"Error: compression-level must be 1-9, got {compression_level}", err=True)
        raise typer.Exit(1)

    if max_size is not None and max_size < 0:
        typer.echo(f"Error: max-size must be >= 0, got {max_size}", err=True)
        raise typer.Exit(1)

    # Convert max_size from MB to bytes (0 = unlimited)
    max_size_bytes: int | None = None
    if max_size is not None and max_size > 0:
        max_size_bytes = max_size * 1024 * 1024

    options = SanitizeOptions(
        scrub_words=list(words) if words else None,
        scrub_mime_types=list(mime_types) if mime_types else None,
        all_cookies=all_cookies,
        all_headers=all_headers,
        all_query_args=all_query_args,
        all_post_params=all_post_params,
        all_mime_types=all_mime_types,
    )

    typer.echo(f"Sanitizing {input_file}...")
    if options.wants_extraction:
        typer.echo("  Expanding names found in the file")
    if keep_media:
        typer.echo("  Keeping image/video content")

    try:
        result_path = sanitize_har_file(
            str(input_file),
            str(output) if output else None,
            options=options,
            keep_image_and_video=keep_media,
            custom_catalog=str(catalog) if catalog else None,
            max_size=max_size_bytes,
        )
        typer.echo(f"  Sanitized: {result_path}")

        if compress:
            result_path_obj = Path(result_path)
            compressed_path = result_path_obj.with_suffix(".har.gz")
            with (
                open(result_path, "rb") as f_in,
                gzip.open(compressed_path, "wb", compresslevel=compression_level) as f_out,
            ):
                f_out.write(f_in.read())
            gz_size = compressed_path.stat().st_size / 1024 / 1024
            typer.echo(f"  Compressed: {compressed_path} ({gz_size:.1f} MB)")
    except HarSizeError as e:
        size_mb = e.size / 1024 / 1024
        limit_mb = e.max_size / 1024 / 1024
        typer.echo(f"Error: File too large ({size_mb:.1f} MB > {limit_mb:.1f} MB limit)", err=True)
        typer.echo("  Use --max-size to increase limit or --max-size 0 to disable", err=True)
        raise typer.Exit(1) from None
    except HarValidationError as e:
        typer.echo(f"Error: Invalid HAR file: {e}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError as e:
        typer.echo(f"Error: File not found: {e.filename}", err=True)
        raise typer.Exit(1) from None
    except PermissionError as e:
        typer.echo(f"Error: Permission denied: {e.filename}", err=True)
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in HAR file: {e.msg} at line {e.lineno}", err=True)
        raise typer.Exit(1) from None
    except CatalogLoadError as e:
        typer.echo(f"Error: Failed to load catalog: {e}", err=True)
        raise typer.Exit(1) from None
    except re.error as e:
        typer.echo(f"Error: Invalid regex in catalog: {e}", err=True)
        raise typer.Exit(1) from None
    except OSError as e:
        typer.echo(f"Error: I/O error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo()
    typer.echo("WARNING: Automated redaction is best-effort.")
    typer.echo("Before sharing, search the .har file for:")
    typer.echo("  - Passwords and API keys you used during the capture")
    typer.echo("  - Session cookies and bearer tokens")
    typer.echo("  - Email addresses and account identifiers")
    typer.echo()
