"""Structural redaction passes over a parsed HAR.

Each pass takes the parsed HAR, blanks whole bodies (or URLs) in-place and
returns the same object so passes can be chained:

- redact_media: image/video bodies, media retrieval URLs, websocket frames
- redact_by_mime: bodies whose mime type is in a scrub list, plus the
  always-on literal ``"key":"value"`` pass
- redact_by_url: bodies of entries whose request URL matches a URL schema
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from har_scrub.catalog import (
    get_default_mime_types,
    get_media_mime_types,
    get_media_urls,
    get_replacement_words,
    get_url_schemas,
)
from har_scrub.sanitization.rules import redaction_marker
from har_scrub.sanitization.validation import validate_har_structure

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from har_scrub.catalog import UrlSchema

_LOGGER = logging.getLogger(__name__)

# Value charset of the literal "key":"value" pass (no quotes, no escapes)
_LITERAL_VALUE = r'[|a-zA-Z0-9?;:!@#$%^&*()_+<>{},\-]+'


def _as_dict(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _iter_entries(har_data: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Validate the HAR and yield its entry objects, skipping anything else."""
    validate_har_structure(har_data)
    for entry in har_data["log"]["entries"]:
        if isinstance(entry, dict):
            yield entry


def _post_data(entry: dict[str, Any]) -> dict[str, Any] | None:
    request = _as_dict(entry.get("request"))
    return _as_dict(request.get("postData")) if request else None


def _content(entry: dict[str, Any]) -> dict[str, Any] | None:
    response = _as_dict(entry.get("response"))
    return _as_dict(response.get("content")) if response else None


def _media_label(mime_type: Any, media_types: list[str]) -> str | None:
    """Find the media type a body mime type belongs to.

    A body matches when its mime type is contained in a catalog media type,
    so "image/jpeg" matches "image/jpeg" and so does "jpeg". An empty mime
    type is contained in every media type and so always matches; a missing
    one never does. When several media types match, the last one labels
    the body.
    """
    if not isinstance(mime_type, str):
        return None
    label = None
    for media_type in media_types:
        if mime_type in media_type:
            label = media_type
    return label


def redact_media(
    har_data: dict[str, Any],
    *,
    custom_catalog: Path | str | None = None,
) -> dict[str, Any]:
    """Blank image/video bodies, media retrieval URLs and websocket frames in-place.

    Args:
        har_data: Parsed HAR data
        custom_catalog: Optional path to custom catalog file

    Returns:
        The same HAR object

    Raises:
        HarValidationError: If the HAR has no log.entries list
    """
    media_types = get_media_mime_types(custom_catalog)
    media_urls = get_media_urls(custom_catalog)
    blanked = 0

    for entry in _iter_entries(har_data):
        request = _as_dict(entry.get("request"))
        if request and isinstance(request.get("url"), str):
            for name, pattern in media_urls:
                if pattern.search(request["url"]):
                    request["url"] = redaction_marker(name)
                    break

        post_data = _post_data(entry)
        if post_data:
            label = _media_label(post_data.get("mimeType"), media_types)
            if label:
                post_data["text"] = redaction_marker(label)
                blanked += 1

        content = _content(entry)
        if content:
            label = _media_label(content.get("mimeType"), media_types)
            if label:
                content["text"] = redaction_marker(label)
                blanked += 1

        if entry.get("_webSocketMessages") is not None:
            entry["_webSocketMessages"] = {"text": redaction_marker("_webSocketMessages")}

    _LOGGER.debug("Media pass blanked %d bodies", blanked)
    return har_data


def _mime_in(body: dict[str, Any], mime_types: set[str]) -> bool:
    mime_type = body.get("mimeType")
    return isinstance(mime_type, str) and mime_type in mime_types


def _literal_rules(words: Iterable[str]) -> list[tuple[re.Pattern[str], str]]:
    rules = []
    for word in words:
        escaped = re.escape(word)
        marker = redaction_marker(word).replace("\\", "\\\\")
        rules.append(
            (
                re.compile('"' + escaped + '":"' + _LITERAL_VALUE + '"'),
                '"' + word.replace("\\", "\\\\") + '":"' + marker + '"',
            )
        )
    return rules


def redact_by_mime(
    har_data: dict[str, Any],
    mime_types: Iterable[str] | None = None,
    *,
    custom_catalog: Path | str | None = None,
) -> dict[str, Any]:
    """Blank bodies by mime type, then strip literal ``"key":"value"`` pairs in-place.

    Args:
        har_data: Parsed HAR data
        mime_types: Mime types to blank (default: catalog scripts/styles list)
        custom_catalog: Optional path to custom catalog file

    Returns:
        The same HAR object

    Raises:
        HarValidationError: If the HAR has no log.entries list

    Example:
        >>> har = {"log": {"entries": [{"request": {}, "response": {
        ...     "content": {"mimeType": "text/css", "text": "body {}"}}}]}}
        >>> redact_by_mime(har)["log"]["entries"][0]["response"]["content"]["text"]
        '[text/css redacted]'
    """
    scrub = set(get_default_mime_types(custom_catalog) if mime_types is None else mime_types)
    literal_rules = _literal_rules(get_replacement_words(custom_catalog))
    entries = list(_iter_entries(har_data))
    blanked = 0

    for entry in entries:
        content = _content(entry)
        if content and _mime_in(content, scrub):
            content["text"] = redaction_marker(content["mimeType"])
            blanked += 1

        post_data = _post_data(entry)
        if post_data and _mime_in(post_data, scrub):
            post_data["text"] = redaction_marker(post_data["mimeType"])
            blanked += 1

    for entry in entries:
        for body in (_content(entry), _post_data(entry)):
            if not body or not isinstance(body.get("text"), str) or not body["text"]:
                continue
            for pattern, replacement in literal_rules:
                body["text"] = pattern.sub(replacement, body["text"])

    _LOGGER.debug("Mime pass blanked %d bodies", blanked)
    return har_data


def redact_by_url(
    har_data: dict[str, Any],
    schemas: Iterable[UrlSchema] | None = None,
    *,
    custom_catalog: Path | str | None = None,
) -> dict[str, Any]:
    """Blank request/response bodies of entries whose URL matches a schema, in-place.

    Every schema is tested against every entry, so several schemas may blank
    the same body; the last match labels it.

    Args:
        har_data: Parsed HAR data
        schemas: URL schemas to apply (default: catalog schemas)
        custom_catalog: Optional path to custom catalog file

    Returns:
        The same HAR object

    Raises:
        HarValidationError: If the HAR has no log.entries list
    """
    schema_list = get_url_schemas(custom_catalog) if schemas is None else list(schemas)
    blanked = 0

    for entry in _iter_entries(har_data):
        request = _as_dict(entry.get("request"))
        url = request.get("url") if request else None
        if not isinstance(url, str):
            continue

        for schema in schema_list:
            if not schema.pattern.search(url):
                continue
            post_data = _post_data(entry)
            if schema.redact_request and post_data is not None:
                post_data["text"] = redaction_marker(schema.name)
                blanked += 1
            content = _content(entry)
            if schema.redact_response and content is not None:
                content["text"] = redaction_marker(schema.name)
                blanked += 1

    _LOGGER.debug("URL pass blanked %d bodies", blanked)
    return har_data
