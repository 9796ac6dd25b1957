"""Enumerate the names present in a HAR file.

Used to preview what could be redacted and to expand the "redact all X"
options into the names actually observed in a given file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from har_scrub.sanitization.validation import validate_har_structure


@dataclass
class HarInfo:
    """Distinct names observed in a HAR file, each list sorted.

    Attributes:
        headers: Request and response header names
        cookies: Request and response cookie names
        query_args: Request query string argument names
        post_params: Request post data parameter names
        mime_types: Response content mime types
    """

    headers: list[str] = field(default_factory=list)
    cookies: list[str] = field(default_factory=list)
    query_args: list[str] = field(default_factory=list)
    post_params: list[str] = field(default_factory=list)
    mime_types: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, list[str]]:
        """Return the names keyed the way HAR tooling usually names them."""
        return {
            "headers": list(self.headers),
            "cookies": list(self.cookies),
            "queryArgs": list(self.query_args),
            "postParams": list(self.post_params),
            "mimeTypes": list(self.mime_types),
        }


def _collect_names(items: Any, into: set[str]) -> None:
    if not isinstance(items, list):
        return
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("name"), str):
            into.add(item["name"])


def extract_info(har: dict[str, Any] | str) -> HarInfo:
    """Scan a HAR file for every header, cookie, query arg, post param and mime type.

    Read-only: the document is never modified.

    Args:
        har: Parsed HAR data or raw HAR JSON text

    Returns:
        HarInfo with sorted, duplicate-free name lists

    Raises:
        HarValidationError: If the HAR has no log.entries list
        json.JSONDecodeError: If text input is not valid JSON

    Example:
        >>> info = extract_info({"log": {"entries": []}})
        >>> info.headers
        []
    """
    har_data = json.loads(har) if isinstance(har, str) else har
    validate_har_structure(har_data)

    headers: set[str] = set()
    cookies: set[str] = set()
    query_args: set[str] = set()
    post_params: set[str] = set()
    mime_types: set[str] = set()

    for entry in har_data["log"]["entries"]:
        if not isinstance(entry, dict):
            continue

        response = entry.get("response")
        if isinstance(response, dict):
            _collect_names(response.get("headers"), headers)
            _collect_names(response.get("cookies"), cookies)
            content = response.get("content")
            if isinstance(content, dict) and isinstance(content.get("mimeType"), str):
                mime_types.add(content["mimeType"])

        request = entry.get("request")
        if isinstance(request, dict):
            _collect_names(request.get("headers"), headers)
            _collect_names(request.get("cookies"), cookies)
            _collect_names(request.get("queryString"), query_args)
            post_data = request.get("postData")
            if isinstance(post_data, dict):
                _collect_names(post_data.get("params"), post_params)

    return HarInfo(
        headers=sorted(headers),
        cookies=sorted(cookies),
        query_args=sorted(query_args),
        post_params=sorted(post_params),
        mime_types=sorted(mime_types),
    )
