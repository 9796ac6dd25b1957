"""Structural checks shared by every sanitization entry point."""

from __future__ import annotations

from typing import Any

# Default maximum HAR file size (100 MB)
DEFAULT_MAX_HAR_SIZE = 100 * 1024 * 1024


class HarSizeError(ValueError):
    """Raised when HAR file exceeds size limit."""

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"HAR file size ({size:,} bytes) exceeds limit ({max_size:,} bytes). "
            f"Use max_size parameter to increase or set to None to disable."
        )


class HarValidationError(ValueError):
    """Raised when HAR structure is invalid."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        full_message = f"Invalid HAR structure: {message}"
        if path:
            full_message += f" (at {path})"
        super().__init__(full_message)


def validate_har_structure(har_data: Any) -> list[str]:
    """Check that a parsed HAR has the log.entries list every pass relies on.

    Args:
        har_data: Parsed HAR data

    Returns:
        List of validation warnings (empty if the recommended fields are present)

    Raises:
        HarValidationError: If the root, log or entries are missing or of the wrong type

    Example:
        >>> validate_har_structure({"log": {"version": "1.2", "creator": {}, "entries": []}})
        []
    """
    warnings: list[str] = []

    if not isinstance(har_data, dict):
        raise HarValidationError("root must be an object", "root")

    if "log" not in har_data:
        raise HarValidationError("Missing required 'log' key", "root")

    log = har_data["log"]
    if not isinstance(log, dict):
        raise HarValidationError("'log' must be an object", "log")

    if "entries" not in log:
        raise HarValidationError("Missing required 'entries' key", "log")

    if not isinstance(log["entries"], list):
        raise HarValidationError("'entries' must be an array", "log.entries")

    # Recommended fields (warnings only)
    if "version" not in log:
        warnings.append("Missing log.version (recommended)")
    if "creator" not in log:
        warnings.append("Missing log.creator (recommended)")

    return warnings
