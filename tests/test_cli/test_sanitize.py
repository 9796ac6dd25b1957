"""Tests for CLI sanitize command."""

from __future__ import annotations

import gzip
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from har_scrub.cli.main import app

runner = CliRunner()


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def valid_har(tmp_path: Path) -> Path:
    """Create a valid HAR file with credentials for testing."""
    har_data = {
        "log": {
            "version": "1.2",
            "creator": {"name": "test", "version": "1.0"},
            "entries": [
                {
                    "request": {
                        "method": "GET",
                        "url": "https://app.example.com/home?state=abc123",
                        "headers": [
                            {"name": "Authorization", "value": "Bearer secret123"},
                            {"name": "X-Request-Id", "value": "req-42"},
                        ],
                        "cookies": [{"name": "session_id", "value": "sess-xyz"}],
                        "queryString": [{"name": "state", "value": "abc123"}],
                    },
                    "response": {
                        "status": 200,
                        "headers": [],
                        "content": {
                            "text": "session_id=sess-xyz&ok=1",
                            "mimeType": "text/plain",
                        },
                    },
                },
                {
                    "request": {"method": "GET", "url": "https://app.example.com/app.js", "headers": []},
                    "response": {
                        "status": 200,
                        "headers": [],
                        "content": {"text": "console.log(1)", "mimeType": "application/javascript"},
                    },
                },
                {
                    "request": {"method": "GET", "url": "https://app.example.com/logo.jpg", "headers": []},
                    "response": {
                        "status": 200,
                        "headers": [],
                        "content": {"text": "/9j/4AAQSkZJRg", "mimeType": "image/jpeg"},
                    },
                },
            ],
        }
    }
    har_file = tmp_path / "test.har"
    har_file.write_text(json.dumps(har_data))
    return har_file


@pytest.fixture
def invalid_json_file(tmp_path: Path) -> Path:
    """Create an invalid JSON file."""
    invalid_file = tmp_path / "invalid.har"
    invalid_file.write_text("{not valid json")
    return invalid_file


@pytest.fixture
def invalid_har_structure(tmp_path: Path) -> Path:
    """Create a JSON file that's not valid HAR."""
    invalid_file = tmp_path / "invalid_structure.har"
    invalid_file.write_text('{"not": "a har file"}')
    return invalid_file


@pytest.fixture
def large_har(tmp_path: Path) -> Path:
    """Create a HAR file larger than 1MB for size limit testing."""
    har_data = {
        "log": {
            "version": "1.2",
            "creator": {"name": "test", "version": "1.0"},
            "entries": [
                {
                    "request": {"method": "GET", "url": "http://test/", "headers": []},
                    "response": {
                        "status": 200,
                        "headers": [],
                        "content": {
                            "text": "x" * 500000,  # 500KB of padding
                            "mimeType": "text/plain",
                        },
                    },
                }
            ]
            * 3,  # 1.5MB total
        }
    }
    har_file = tmp_path / "large.har"
    har_file.write_text(json.dumps(har_data))
    return har_file


def _sanitized(har_file: Path) -> dict:
    return json.loads((har_file.parent / "test.sanitized.har").read_text(encoding="utf-8"))


def _entry(har: dict, index: int = 0) -> dict:
    return har["log"]["entries"][index]


# =============================================================================
# Test Classes
# =============================================================================


class TestSanitizeBasic:
    """Basic sanitize command tests."""

    def test_sanitize_valid_har(self, valid_har: Path) -> None:
        """Test sanitizing a valid HAR file."""
        result = runner.invoke(app, ["sanitize", str(valid_har)])
        assert result.exit_code == 0
        assert "Sanitized:" in result.stdout

    def test_sanitize_with_output(self, valid_har: Path, tmp_path: Path) -> None:
        """Test sanitizing with explicit output path."""
        output = tmp_path / "output.har"
        result = runner.invoke(app, ["sanitize", str(valid_har), "-o", str(output)])
        assert result.exit_code == 0
        assert output.exists()

    def test_sanitize_file_not_found(self, tmp_path: Path) -> None:
        """Test error when file doesn't exist."""
        result = runner.invoke(app, ["sanitize", str(tmp_path / "nonexistent.har")])
        assert result.exit_code == 1
        assert "File not found" in (result.output)

    def test_sanitize_invalid_json(self, invalid_json_file: Path) -> None:
        """Test error on invalid JSON."""
        result = runner.invoke(app, ["sanitize", str(invalid_json_file)])
        assert result.exit_code == 1
        assert "Invalid JSON" in (result.output)

    def test_sanitize_invalid_har_structure(self, invalid_har_structure: Path) -> None:
        """Test error on invalid HAR structure."""
        result = runner.invoke(app, ["sanitize", str(invalid_har_structure)])
        assert result.exit_code == 1
        assert "Invalid HAR" in (result.output)


class TestSanitizeDefaults:
    """Tests for what a plain sanitize run removes."""

    def test_credentials_removed(self, valid_har: Path) -> None:
        """Test built-in words are redacted and unrelated values kept."""
        result = runner.invoke(app, ["sanitize", str(valid_har)])
        assert result.exit_code == 0

        request = _entry(_sanitized(valid_har))["request"]
        assert request["headers"][0]["value"] == "[Authorization redacted]"
        assert request["headers"][1]["value"] == "req-42"
        assert request["url"] == "https://app.example.com/home?state=[state redacted]"
        assert request["queryString"][0]["value"] == "[state redacted]"

    def test_bodies_blanked(self, valid_har: Path) -> None:
        """Test scripts and images are blanked."""
        runner.invoke(app, ["sanitize", str(valid_har)])
        har = _sanitized(valid_har)

        assert _entry(har, 1)["response"]["content"]["text"] == "[application/javascript redacted]"
        assert _entry(har, 2)["response"]["content"]["text"] == "[image/jpeg redacted]"

    def test_session_cookie_kept(self, valid_har: Path) -> None:
        """Test a cookie outside the built-in list survives without --all-cookies."""
        runner.invoke(app, ["sanitize", str(valid_har)])
        assert _entry(_sanitized(valid_har))["request"]["cookies"][0]["value"] == "sess-xyz"

    def test_warning_message(self, valid_har: Path) -> None:
        """Test warning message is displayed."""
        result = runner.invoke(app, ["sanitize", str(valid_har)])
        assert result.exit_code == 0
        assert "WARNING: Automated redaction is best-effort" in result.stdout
        assert "bearer tokens" in result.stdout


class TestSanitizeRedactionOptions:
    """Tests for the word, mime type and "all X" options."""

    def test_all_cookies(self, valid_har: Path) -> None:
        """Test --all-cookies redacts every observed cookie."""
        result = runner.invoke(app, ["sanitize", str(valid_har), "--all-cookies"])
        assert result.exit_code == 0
        assert "Expanding names found in the file" in result.stdout

        har = _sanitized(valid_har)
        assert _entry(har)["request"]["cookies"][0]["value"] == "[session_id redacted]"
        assert _entry(har)["response"]["content"]["text"] == "session_id=[session_id redacted]&ok=1"

    def test_all_headers(self, valid_har: Path) -> None:
        """Test --all-headers redacts every observed header."""
        runner.invoke(app, ["sanitize", str(valid_har), "--all-headers"])
        headers = _entry(_sanitized(valid_har))["request"]["headers"]
        assert headers[1]["value"] == "[X-Request-Id redacted]"

    def test_explicit_words(self, valid_har: Path) -> None:
        """Test repeated --word replaces the built-in list."""
        result = runner.invoke(app, ["sanitize", str(valid_har), "-w", "session_id", "-w", "X-Request-Id"])
        assert result.exit_code == 0

        request = _entry(_sanitized(valid_har))["request"]
        assert request["headers"][0]["value"] == "Bearer secret123"
        assert request["headers"][1]["value"] == "[X-Request-Id redacted]"
        assert request["cookies"][0]["value"] == "[session_id redacted]"

    def test_explicit_mime_types(self, valid_har: Path) -> None:
        """Test --mime-type replaces the built-in mime list."""
        runner.invoke(app, ["sanitize", str(valid_har), "-m", "text/plain"])
        har = _sanitized(valid_har)

        assert _entry(har, 0)["response"]["content"]["text"] == "[text/plain redacted]"
        assert _entry(har, 1)["response"]["content"]["text"] == "console.log(1)"

    def test_all_mime_types(self, valid_har: Path) -> None:
        """Test --all-mime-types blanks every observed body type."""
        runner.invoke(app, ["sanitize", str(valid_har), "--all-mime-types", "--keep-media"])
        texts = [e["response"]["content"]["text"] for e in _sanitized(valid_har)["log"]["entries"]]
        assert texts == [
            "[text/plain redacted]",
            "[application/javascript redacted]",
            "[image/jpeg redacted]",
        ]

    def test_keep_media(self, valid_har: Path) -> None:
        """Test --keep-media leaves image bodies alone."""
        result = runner.invoke(app, ["sanitize", str(valid_har), "--keep-media"])
        assert result.exit_code == 0
        assert "Keeping image/video content" in result.stdout
        assert _entry(_sanitized(valid_har), 2)["response"]["content"]["text"] == "/9j/4AAQSkZJRg"


class TestSanitizeCompression:
    """Tests for compression options."""

    def test_sanitize_with_compress(self, valid_har: Path) -> None:
        """Test --compress option creates .har.gz file."""
        result = runner.invoke(app, ["sanitize", str(valid_har), "--compress"])
        assert result.exit_code == 0
        assert "Compressed:" in result.stdout

        sanitized_path = valid_har.parent / "test.sanitized.har"
        compressed_path = sanitized_path.with_suffix(".har.gz")
        assert compressed_path.exists()
        with gzip.open(compressed_path, "rt", encoding="utf-8") as f:
            assert f.read() == sanitized_path.read_text(encoding="utf-8")

    def test_sanitize_compression_level(self, valid_har: Path) -> None:
        """Test --compression-level option."""
        result = runner.invoke(app, ["sanitize", str(valid_har), "-z", "--compression-level", "1"])
        assert result.exit_code == 0

    @pytest.mark.parametrize("level", ["0", "10"])
    def test_sanitize_invalid_compression_level(self, valid_har: Path, level: str) -> None:
        """Test error on compression level outside 1-9."""
        result = runner.invoke(app, ["sanitize", str(valid_har), "--compression-level", level])
        assert result.exit_code == 1
        assert "compression-level must be 1-9" in (result.output)


class TestSanitizeSizeLimit:
    """Tests for size limit options."""

    def test_sanitize_default_size_limit(self, large_har: Path) -> None:
        """Test default 100MB limit allows normal files."""
        result = runner.invoke(app, ["sanitize", str(large_har)])
        assert result.exit_code == 0

    def test_sanitize_small_size_limit(self, large_har: Path) -> None:
        """Test --max-size limit enforced."""
        # Set limit to 1MB, file is ~1.5MB
        result = runner.invoke(app, ["sanitize", str(large_har), "--max-size", "1"])
        assert result.exit_code == 1
        assert "File too large" in (result.output)

    def test_sanitize_unlimited_size(self, large_har: Path) -> None:
        """Test --max-size 0 disables limit."""
        result = runner.invoke(app, ["sanitize", str(large_har), "--max-size", "0"])
        assert result.exit_code == 0

    def test_sanitize_negative_size_limit(self, valid_har: Path) -> None:
        """Test error on negative max-size."""
        result = runner.invoke(app, ["sanitize", str(valid_har), "--max-size", "-1"])
        assert result.exit_code == 1
        assert "max-size must be >= 0" in (result.output)


class TestSanitizeCustomCatalog:
    """Tests for the custom catalog option."""

    def test_custom_catalog_words(self, valid_har: Path, tmp_path: Path) -> None:
        """Test --catalog adds words to the built-in list."""
        custom = tmp_path / "custom.json"
        custom.write_text(json.dumps({"version": 1, "words": ["X-Request-Id"]}))

        result = runner.invoke(app, ["sanitize", str(valid_har), "--catalog", str(custom)])
        assert result.exit_code == 0

        headers = _entry(_sanitized(valid_har))["request"]["headers"]
        assert headers[0]["value"] == "[Authorization redacted]"
        assert headers[1]["value"] == "[X-Request-Id redacted]"

    def test_missing_catalog_file(self, valid_har: Path) -> None:
        """Test error on a catalog path that does not exist."""
        result = runner.invoke(app, ["sanitize", str(valid_har), "-c", "/nonexistent/catalog.json"])
        assert result.exit_code == 1
        assert "Failed to load catalog" in (result.output)

    def test_invalid_catalog_regex(self, valid_har: Path, tmp_path: Path) -> None:
        """Test error on a catalog regex that does not compile."""
        custom = tmp_path / "bad.json"
        custom.write_text(json.dumps({"signature_rules": [{"name": "bad", "regex": "([", "replacement": "x"}]}))

        result = runner.invoke(app, ["sanitize", str(valid_har), "-c", str(custom)])
        assert result.exit_code == 1
        assert "Invalid regex in catalog" in (result.output)
