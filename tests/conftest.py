"""Pytest configuration and fixtures for har-scrub tests."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from har_scrub.catalog import clear_catalog_cache


@pytest.fixture(autouse=True)
def _fresh_catalog_cache():
    """Start and end every test with an empty catalog cache."""
    clear_catalog_cache()
    yield
    clear_catalog_cache()


@pytest.fixture
def make_har():
    """Wrap entries in a minimal HAR document."""

    def _make_har(entries: list[dict] | None = None) -> dict:
        return {
            "log": {
                "version": "1.2",
                "creator": {"name": "test", "version": "1.0"},
                "entries": entries if entries is not None else [],
            }
        }

    return _make_har


@pytest.fixture
def temp_har_file(make_har):
    """Create a temporary HAR file for testing."""

    def _create_har(entries: list[dict] | None = None) -> Path:
        with tempfile.NamedTemporaryFile(mode="w", suffix=".har", delete=False) as f:
            json.dump(make_har(entries), f)
            return Path(f.name)

    return _create_har


@pytest.fixture
def sample_har_entry():
    """Create a sample HAR entry for testing."""

    def _create_entry(
        method: str = "GET",
        url: str = "http://example.com/",
        status: int = 200,
        content: str = "",
        mime_type: str = "text/html",
        headers: list[dict] | None = None,
        cookies: list[dict] | None = None,
        query_string: list[dict] | None = None,
        post_data: dict | None = None,
    ) -> dict:
        entry = {
            "request": {
                "method": method,
                "url": url,
                "headers": headers or [],
                "cookies": cookies or [],
                "queryString": query_string or [],
            },
            "response": {
                "status": status,
                "statusText": "OK",
                "headers": [],
                "cookies": [],
                "content": {"text": content, "mimeType": mime_type},
            },
        }
        if post_data:
            entry["request"]["postData"] = post_data
        return entry

    return _create_entry
