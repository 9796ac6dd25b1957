"""Tests for CLI main module."""

from __future__ import annotations

import pytest


class TestCliImport:
    """Tests for CLI import availability."""

    def test_can_import_cli_with_typer(self) -> None:
        """Test CLI can be imported when typer is available."""
        pytest.importorskip("typer")
        from har_scrub.cli.main import app

        assert app is not None

    def test_version_option(self) -> None:
        """Test version option works."""
        pytest.importorskip("typer")
        from typer.testing import CliRunner

        from har_scrub import __version__
        from har_scrub.cli.main import app

        runner = CliRunner()
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"har-scrub {__version__}" in result.stdout

    def test_commands_registered(self) -> None:
        """Test both commands are listed in the help output."""
        pytest.importorskip("typer")
        from typer.testing import CliRunner

        from har_scrub.cli.main import app

        result = CliRunner().invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "sanitize" in result.stdout
        assert "info" in result.stdout
