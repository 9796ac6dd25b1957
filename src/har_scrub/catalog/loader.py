"""Scrub catalog loading utilities.

This module loads the scrub catalog (words, mime types, URL schemas and
signature rules) from JSON, merges user supplied catalogs on top of the
built-in one, and exposes typed accessors for the sanitization passes.
"""

from __future__ import annotations

import json
import logging
import re
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)

# Catalog format version understood by this loader
CATALOG_VERSION = 1

# Maximum number of cache entries to prevent unbounded growth
_MAX_CACHE_SIZE = 20

# Sections holding plain string lists (extended on merge)
_LIST_SECTIONS = ("words", "mime_types", "media_mime_types", "replacement_words")

# Sections holding lists of pattern objects (appended on merge)
_PATTERN_SECTIONS = ("url_schemas", "media_urls", "signature_rules")

# LRU cache for loaded catalogs (OrderedDict for LRU behavior)
_catalog_cache: OrderedDict[str, Any] = OrderedDict()


def _cache_get(key: str) -> Any | None:
    """Get value from cache, moving it to end (most recently used)."""
    if key in _catalog_cache:
        _catalog_cache.move_to_end(key)
        return _catalog_cache[key]
    return None


def _cache_set(key: str, value: Any) -> None:
    """Set value in cache with LRU eviction."""
    if key in _catalog_cache:
        _catalog_cache.move_to_end(key)
    _catalog_cache[key] = value
    while len(_catalog_cache) > _MAX_CACHE_SIZE:
        evicted_key = next(iter(_catalog_cache))
        _catalog_cache.pop(evicted_key)
        _LOGGER.debug("Catalog cache evicted: %s", evicted_key)


class CatalogLoadError(Exception):
    """Raised when catalog files cannot be loaded."""


@dataclass(frozen=True)
class UrlSchema:
    """A named URL pattern and the bodies to blank when it matches.

    Attributes:
        name: Label used in the redaction marker
        pattern: Compiled expression searched in the request URL
        redact_request: Blank the request post data text on match
        redact_response: Blank the response content text on match
    """

    name: str
    pattern: re.Pattern[str]
    redact_request: bool = False
    redact_response: bool = False


def _get_builtin_path(filename: str) -> Path:
    """Get path to a built-in catalog file.

    Args:
        filename: Name of the catalog file (e.g., "scrub.json")

    Returns:
        Path to the built-in catalog file
    """
    return Path(__file__).parent / filename


def _normalize_path(path: Path | str | None) -> str | None:
    """Normalize a path to a string for cache key consistency."""
    if path is None:
        return None
    return str(Path(path).resolve())


def load_json_file(path: Path | str) -> dict[str, Any]:
    """Load a JSON file with error handling.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed JSON data

    Raises:
        CatalogLoadError: If file cannot be read or parsed
    """
    path_str = str(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(f"Catalog file not found: {path_str}") from e
    except PermissionError as e:
        raise CatalogLoadError(f"Permission denied reading catalog file: {path_str}") from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Invalid JSON in catalog file {path_str}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogLoadError(f"Catalog file {path_str} must contain a JSON object")
    return data


def _check_version(data: dict[str, Any], path: Path | str) -> None:
    version = data.get("version", CATALOG_VERSION)
    if version != CATALOG_VERSION:
        raise CatalogLoadError(
            f"Unsupported catalog version {version!r} in {path} (expected {CATALOG_VERSION})"
        )


def _merge_catalog(builtin: dict[str, Any], custom: dict[str, Any]) -> None:
    """Merge a custom catalog into the built-in one in-place."""
    for section in _LIST_SECTIONS:
        extra = custom.get(section)
        if not isinstance(extra, list):
            continue
        current = builtin.setdefault(section, [])
        for item in extra:
            if isinstance(item, str) and item not in current:
                current.append(item)

    for section in _PATTERN_SECTIONS:
        extra = custom.get(section)
        if not isinstance(extra, list):
            continue
        builtin.setdefault(section, []).extend(item for item in extra if isinstance(item, dict))


def load_scrub_catalog(custom_path: Path | str | None = None) -> dict[str, Any]:
    """Load the scrub catalog.

    Args:
        custom_path: Optional path to a custom catalog file to merge

    Returns:
        Dict with 'words', 'mime_types', 'media_mime_types', 'replacement_words',
        'url_schemas', 'media_urls' and 'signature_rules' keys

    Raises:
        CatalogLoadError: If a catalog file cannot be loaded or has an unsupported version
    """
    normalized = _normalize_path(custom_path)
    cache_key = f"scrub:{normalized}"
    cached = _cache_get(cache_key)
    if cached is not None:
        result: dict[str, Any] = cached
        return result

    builtin_path = _get_builtin_path("scrub.json")
    builtin = load_json_file(builtin_path)
    _check_version(builtin, builtin_path)

    if custom_path:
        custom = load_json_file(custom_path)
        _check_version(custom, custom_path)
        _merge_catalog(builtin, custom)

    _cache_set(cache_key, builtin)
    return builtin


def clear_catalog_cache() -> None:
    """Clear the catalog cache.

    Useful for testing or when catalog files have been modified.
    """
    _catalog_cache.clear()


def compile_pattern(pattern_def: dict[str, Any]) -> re.Pattern[str]:
    """Compile a pattern definition into a regex.

    Args:
        pattern_def: Pattern definition with 'regex' and optional 'flags'

    Returns:
        Compiled regex pattern

    Raises:
        re.error: If regex pattern is invalid
    """
    regex = pattern_def["regex"]
    flags = 0

    for flag_name in pattern_def.get("flags", []):
        flag = getattr(re, flag_name, None)
        if flag is not None and isinstance(flag, re.RegexFlag):
            flags |= flag
        else:
            _LOGGER.warning("Unknown regex flag: %s", flag_name)

    return re.compile(regex, flags)


def get_default_mime_types(custom_path: Path | str | None = None) -> list[str]:
    """Get the mime types whose bodies are blanked by default."""
    return list(load_scrub_catalog(custom_path).get("mime_types", []))


def get_media_mime_types(custom_path: Path | str | None = None) -> list[str]:
    """Get the image/video mime types stripped as noise."""
    return list(load_scrub_catalog(custom_path).get("media_mime_types", []))


def get_replacement_words(custom_path: Path | str | None = None) -> list[str]:
    """Get the key names blanked by the always-on literal pass."""
    return list(load_scrub_catalog(custom_path).get("replacement_words", []))


def get_default_scrub_words(custom_path: Path | str | None = None) -> list[str]:
    """Get the default word list: default mime type names followed by sensitive field names.

    Example:
        >>> words = get_default_scrub_words()
        >>> words[0]
        'application/javascript'
    """
    catalog = load_scrub_catalog(custom_path)
    words: list[str] = []
    for word in [*catalog.get("mime_types", []), *catalog.get("words", [])]:
        if word not in words:
            words.append(word)
    return words


def get_url_schemas(custom_path: Path | str | None = None) -> list[UrlSchema]:
    """Get the URL schemas whose matching entries have bodies blanked.

    Raises:
        re.error: If a schema regex is invalid
    """
    return [
        UrlSchema(
            name=schema["name"],
            pattern=compile_pattern(schema),
            redact_request=bool(schema.get("redact_request", False)),
            redact_response=bool(schema.get("redact_response", False)),
        )
        for schema in load_scrub_catalog(custom_path).get("url_schemas", [])
    ]


def get_media_urls(custom_path: Path | str | None = None) -> list[tuple[str, re.Pattern[str]]]:
    """Get the media retrieval URL families whose URLs are replaced outright."""
    return [
        (media["name"], compile_pattern(media))
        for media in load_scrub_catalog(custom_path).get("media_urls", [])
    ]
