"""Redaction passes for HAR files.

The pipeline and every pass it runs are stdlib only.

Exports:
    - sanitize: Redact HAR JSON text
    - sanitize_har: Redact parsed HAR data
    - sanitize_har_file: Redact a HAR file on disk
    - extract_info: List the names present in a HAR file
    - redact_media, redact_by_mime, redact_by_url: Structural passes
    - build_rules: Regex rules for a single scrub word
"""

from __future__ import annotations

from har_scrub.sanitization.har import (
    SanitizeOptions,
    effective_mime_types,
    effective_scrub_words,
    sanitize,
    sanitize_har,
    sanitize_har_file,
    scrub_fields,
    scrub_text_fields,
)
from har_scrub.sanitization.info import HarInfo, extract_info
from har_scrub.sanitization.redactors import redact_by_mime, redact_by_url, redact_media
from har_scrub.sanitization.rules import (
    ScrubRule,
    apply_rules,
    build_rules,
    build_scrub_rules,
    redaction_marker,
    signature_rules,
)
from har_scrub.sanitization.validation import (
    DEFAULT_MAX_HAR_SIZE,
    HarSizeError,
    HarValidationError,
    validate_har_structure,
)

__all__ = [
    # Pipeline
    "sanitize",
    "sanitize_har",
    "sanitize_har_file",
    "SanitizeOptions",
    "effective_mime_types",
    "effective_scrub_words",
    "scrub_fields",
    "scrub_text_fields",
    # Info
    "extract_info",
    "HarInfo",
    # Structural passes
    "redact_media",
    "redact_by_mime",
    "redact_by_url",
    # Rules
    "ScrubRule",
    "apply_rules",
    "build_rules",
    "build_scrub_rules",
    "redaction_marker",
    "signature_rules",
    # Validation, size limits and errors
    "validate_har_structure",
    "DEFAULT_MAX_HAR_SIZE",
    "HarSizeError",
    "HarValidationError",
]
