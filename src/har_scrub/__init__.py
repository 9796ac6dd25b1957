"""HAR redaction library.

This library removes credentials, tokens, cookies and PII from HAR files
before they are shared (for example attached to a support ticket):
- Blanking image/video, script and stylesheet bodies
- Blanking bodies of known sensitive endpoints
- Redacting the values of sensitive names wherever they appear
- Stripping the signature of compact signed tokens

Core sanitization has ZERO dependencies (only stdlib).
Optional features require: typer (cli).

Example usage:
    from har_scrub import SanitizeOptions, extract_info, sanitize

    # Redact with the built-in catalog
    clean_text = sanitize(raw_text)

    # Also redact every cookie found in the file
    clean_text = sanitize(raw_text, SanitizeOptions(all_cookies=True))

    # Preview the names in a file
    info = extract_info(raw_text)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export public API for convenience
from har_scrub.sanitization import (
    HarInfo,
    SanitizeOptions,
    extract_info,
    sanitize,
    sanitize_har,
    sanitize_har_file,
)

__all__ = [
    "__version__",
    "HarInfo",
    "SanitizeOptions",
    "extract_info",
    "sanitize",
    "sanitize_har",
    "sanitize_har_file",
]
