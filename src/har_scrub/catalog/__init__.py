"""Scrub catalog loading.

This module provides:
- Loading of scrub words, mime types, URL schemas and signature rules from JSON
- Catalog merging for custom user catalogs
- Typed accessors used by the sanitization passes
"""

from __future__ import annotations

from har_scrub.catalog.loader import (
    CATALOG_VERSION,
    CatalogLoadError,
    UrlSchema,
    clear_catalog_cache,
    compile_pattern,
    get_default_mime_types,
    get_default_scrub_words,
    get_media_mime_types,
    get_media_urls,
    get_replacement_words,
    get_url_schemas,
    load_scrub_catalog,
)

__all__ = [
    "CATALOG_VERSION",
    "CatalogLoadError",
    "UrlSchema",
    "clear_catalog_cache",
    "compile_pattern",
    "get_default_mime_types",
    "get_default_scrub_words",
    "get_media_mime_types",
    "get_media_urls",
    "get_replacement_words",
    "get_url_schemas",
    "load_scrub_catalog",
]
