"""HAR file redaction pipeline.

This module sequences the redaction passes over a HAR (HTTP Archive) file so
a network capture can be shared without leaking credentials, tokens, cookies
or PII:

1. Optional scan for every observed name ("redact all X" options)
2. Image/video pass (skipped with keep_image_and_video)
3. Mime type pass
4. URL schema pass
5. Word pass: exact name/value fields first, then regex rules over the
   string values of the document (URLs, header values, bodies, frames)

The input is parsed once and the parsed copy is handed from pass to pass;
it is serialized once at the end.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from har_scrub.catalog import get_default_mime_types, get_default_scrub_words
from har_scrub.sanitization.info import HarInfo, extract_info
from har_scrub.sanitization.redactors import redact_by_mime, redact_by_url, redact_media
from har_scrub.sanitization.rules import apply_rules, build_scrub_rules, redaction_marker
from har_scrub.sanitization.validation import (
    DEFAULT_MAX_HAR_SIZE,
    HarSizeError,
    validate_har_structure,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from har_scrub.sanitization.rules import ScrubRule

_LOGGER = logging.getLogger(__name__)


@dataclass
class SanitizeOptions:
    """What to redact beyond the always-on passes.

    Attributes:
        scrub_words: Names whose values are redacted (None: catalog defaults)
        scrub_mime_types: Mime types whose bodies are blanked (None: catalog defaults)
        all_cookies: Also redact every cookie name observed in the file
        all_headers: Also redact every header name observed in the file
        all_query_args: Also redact every query argument name observed in the file
        all_post_params: Also redact every post parameter name observed in the file
        all_mime_types: Also blank every response mime type observed in the file
    """

    scrub_words: list[str] | None = None
    scrub_mime_types: list[str] | None = None
    all_cookies: bool = False
    all_headers: bool = False
    all_query_args: bool = False
    all_post_params: bool = False
    all_mime_types: bool = False

    @property
    def wants_extraction(self) -> bool:
        """True if any option needs the names observed in the file."""
        return (
            self.all_cookies
            or self.all_headers
            or self.all_query_args
            or self.all_post_params
            or self.all_mime_types
        )


def _dedupe(items: Iterable[str]) -> list[str]:
    """Drop duplicates, keeping first occurrence order."""
    return list(dict.fromkeys(items))


def effective_mime_types(
    options: SanitizeOptions,
    info: HarInfo | None = None,
    custom_catalog: Path | str | None = None,
) -> list[str]:
    """Resolve the mime types to blank.

    The explicit list (or the catalog default when none is given) comes first;
    observed mime types are appended when all_mime_types is set.
    """
    if options.scrub_mime_types is not None:
        mime_types = list(options.scrub_mime_types)
    else:
        mime_types = get_default_mime_types(custom_catalog)
    if options.all_mime_types and info is not None:
        mime_types.extend(info.mime_types)
    return _dedupe(mime_types)


def effective_scrub_words(
    options: SanitizeOptions,
    info: HarInfo | None = None,
    custom_catalog: Path | str | None = None,
) -> list[str]:
    """Resolve the words whose values are redacted.

    Same precedence as effective_mime_types: explicit list or catalog default,
    then the observed names of every enabled "all X" option.
    """
    if options.scrub_words is not None:
        words = list(options.scrub_words)
    else:
        words = get_default_scrub_words(custom_catalog)
    if info is not None:
        if options.all_cookies:
            words.extend(info.cookies)
        if options.all_headers:
            words.extend(info.headers)
        if options.all_query_args:
            words.extend(info.query_args)
        if options.all_post_params:
            words.extend(info.post_params)
    return _dedupe(words)


def _iter_name_value_lists(entry: dict[str, Any]) -> Iterator[list[Any]]:
    """Yield the headers, cookies, queryString and params lists of an entry."""
    request = entry.get("request")
    response = entry.get("response")
    for part, keys in (
        (request, ("headers", "cookies", "queryString")),
        (response, ("headers", "cookies")),
    ):
        if not isinstance(part, dict):
            continue
        for key in keys:
            if isinstance(part.get(key), list):
                yield part[key]

    if isinstance(request, dict) and isinstance(request.get("postData"), dict):
        params = request["postData"].get("params")
        if isinstance(params, list):
            yield params


def scrub_fields(har_data: dict[str, Any], words: Iterable[str]) -> dict[str, Any]:
    """Redact name/value pairs whose name is a scrub word, in-place.

    Covers request/response headers and cookies, query string arguments and
    post data params. Names must match exactly.

    Args:
        har_data: Parsed HAR data
        words: Scrub words

    Returns:
        The same HAR object
    """
    word_set = set(words)
    redacted = 0
    for entry in har_data["log"]["entries"]:
        if not isinstance(entry, dict):
            continue
        for items in _iter_name_value_lists(entry):
            for item in items:
                if not isinstance(item, dict) or "value" not in item:
                    continue
                name = item.get("name")
                if isinstance(name, str) and name in word_set:
                    item["value"] = redaction_marker(name)
                    redacted += 1
    _LOGGER.debug("Field pass redacted %d values", redacted)
    return har_data


def _scrub_strings(node: Any, rules: list[ScrubRule]) -> None:
    """Apply rules to every string value under node, in-place. Keys are left alone."""
    if isinstance(node, dict):
        items: Iterable[tuple[Any, Any]] = node.items()
    elif isinstance(node, list):
        items = enumerate(node)
    else:
        return
    for key, value in list(items):
        if isinstance(value, str):
            node[key] = apply_rules(value, rules)
        else:
            _scrub_strings(value, rules)


def scrub_text_fields(har_data: dict[str, Any], rules: Iterable[ScrubRule]) -> dict[str, Any]:
    """Apply scrub rules to every string value of the document, in-place.

    This reaches the URLs, header/cookie/query/param values and bodies, and
    also anything else a browser records per entry, such as kept websocket
    frames or ``_initiator`` URLs. Object keys are never rewritten.

    Args:
        har_data: Parsed HAR data
        rules: Ordered rules, applied sequentially to each string

    Returns:
        The same HAR object
    """
    rule_list = list(rules)
    if rule_list:
        _scrub_strings(har_data, rule_list)
    return har_data


def _run_pipeline(
    har_data: dict[str, Any],
    options: SanitizeOptions,
    keep_image_and_video: bool,
    custom_catalog: Path | str | None,
) -> dict[str, Any]:
    """Run every pass over har_data, which the pipeline owns and mutates."""
    validate_har_structure(har_data)

    info: HarInfo | None = None
    if options.wants_extraction:
        info = extract_info(har_data)

    if not keep_image_and_video:
        redact_media(har_data, custom_catalog=custom_catalog)

    redact_by_mime(
        har_data,
        effective_mime_types(options, info, custom_catalog),
        custom_catalog=custom_catalog,
    )
    redact_by_url(har_data, custom_catalog=custom_catalog)

    # Only build rules for words that actually appear in the file
    text = json.dumps(har_data, ensure_ascii=False)
    words = [word for word in effective_scrub_words(options, info, custom_catalog) if word in text]
    _LOGGER.debug("%d scrub words present in HAR", len(words))

    scrub_fields(har_data, words)
    scrub_text_fields(har_data, build_scrub_rules(words, custom_catalog))
    return har_data


def sanitize_har(
    har_data: dict[str, Any],
    options: SanitizeOptions | None = None,
    *,
    keep_image_and_video: bool = False,
    custom_catalog: Path | str | None = None,
) -> dict[str, Any]:
    """Redact an entire parsed HAR file.

    Args:
        har_data: Parsed HAR JSON data (not modified)
        options: What to redact beyond the defaults
        keep_image_and_video: Skip the image/video pass
        custom_catalog: Optional path to custom catalog JSON file

    Returns:
        Redacted copy of the HAR data

    Raises:
        HarValidationError: If the HAR has no log.entries list
        CatalogLoadError: If the custom catalog cannot be loaded

    Example:
        >>> sanitize_har({"log": {"entries": []}})
        {'log': {'entries': []}}
    """
    return _run_pipeline(
        copy.deepcopy(har_data),
        options or SanitizeOptions(),
        keep_image_and_video,
        custom_catalog,
    )


def sanitize(
    text: str,
    options: SanitizeOptions | None = None,
    *,
    keep_image_and_video: bool = False,
    custom_catalog: Path | str | None = None,
) -> str:
    """Redact HAR JSON text.

    Args:
        text: Raw HAR JSON
        options: What to redact beyond the defaults
        keep_image_and_video: Skip the image/video pass
        custom_catalog: Optional path to custom catalog JSON file

    Returns:
        Redacted HAR as JSON indented by two spaces

    Raises:
        json.JSONDecodeError: If text is not valid JSON
        HarValidationError: If the HAR has no log.entries list
        CatalogLoadError: If the custom catalog cannot be loaded
    """
    result = _run_pipeline(
        json.loads(text),
        options or SanitizeOptions(),
        keep_image_and_video,
        custom_catalog,
    )
    return json.dumps(result, indent=2, ensure_ascii=False)


def sanitize_har_file(
    input_path: str | Path,
    output_path: str | Path | None = None,
    *,
    options: SanitizeOptions | None = None,
    keep_image_and_video: bool = False,
    custom_catalog: Path | str | None = None,
    max_size: int | None = DEFAULT_MAX_HAR_SIZE,
) -> str:
    """Redact a HAR file and write to a new file.

    Args:
        input_path: Path to input HAR file
        output_path: Path to output file (default: input_path with .sanitized.har suffix)
        options: What to redact beyond the defaults
        keep_image_and_video: Skip the image/video pass
        custom_catalog: Optional path to custom catalog JSON file
        max_size: Maximum file size in bytes (default: 100MB). Set to None to disable.

    Returns:
        Path to the sanitized file

    Raises:
        HarSizeError: If file exceeds max_size limit
        HarValidationError: If the HAR has no log.entries list
        FileNotFoundError: If input file doesn't exist
        json.JSONDecodeError: If file is not valid JSON

    Example:
        >>> # sanitize_har_file("capture.har")  # Creates capture.sanitized.har
        >>> # sanitize_har_file("capture.har", "clean.har")  # Creates clean.har
        >>> # sanitize_har_file("large.har", max_size=None)  # No size limit
    """
    from pathlib import Path as PathlibPath

    input_path = PathlibPath(input_path)
    input_str = str(input_path)

    if max_size is not None:
        file_size = input_path.stat().st_size
        if file_size > max_size:
            raise HarSizeError(file_size, max_size)

    if output_path is None:
        if input_str.endswith(".har"):
            output_str = input_str[:-4] + ".sanitized.har"
        else:
            output_str = input_str + ".sanitized.har"
    else:
        output_str = str(output_path)

    with open(input_str, encoding="utf-8") as f:
        text = f.read()

    har_data = json.loads(text)
    for warning in validate_har_structure(har_data):
        _LOGGER.warning("HAR validation: %s", warning)

    sanitized = _run_pipeline(
        har_data,
        options or SanitizeOptions(),
        keep_image_and_video,
        custom_catalog,
    )

    with open(output_str, "w", encoding="utf-8") as f:
        f.write(json.dumps(sanitized, indent=2, ensure_ascii=False))

    _LOGGER.info("Sanitized HAR written to: %s", output_str)
    return output_str
