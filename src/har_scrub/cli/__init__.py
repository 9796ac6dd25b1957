"""CLI for har-scrub.

This module provides a Typer-based CLI for HAR redaction and for previewing
the names a HAR file contains.

Requires the 'cli' optional dependency: pip install har-scrub[cli]
"""

from __future__ import annotations
