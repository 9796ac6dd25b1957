"""Regex rule construction for word-based scrubbing.

Given the name of a sensitive value (a "scrub word"), builds the find/replace
rules that catch that value in the three supported text shapes:

1. Inline ``word=value`` pairs (query strings, cookie headers, form bodies)
2. ``"name": "word", ... "value": "<value>"`` objects
3. ``"value": "<value>", ... "name": "word"`` objects

Rules run against raw strings pulled out of the parsed HAR (URLs, header
values, body text), never against the serialized document, so a replacement
can not break the document's own JSON.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from har_scrub.catalog import compile_pattern, load_scrub_catalog

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

_LOGGER = logging.getLogger(__name__)

# Characters allowed in an inline value: anything up to a delimiter. Quotes
# and backslashes also end the value so a surrounding JSON string stays intact.
_INLINE_VALUE = r"[^&;\s\"\\]"

# What may precede an inline "word=" (or start of line)
_INLINE_LEAD = r"(?:(?<=[\s\";,&?])|^)"

# What may follow an inline value; a lookahead so the delimiter stays available
# for the next match
_INLINE_TAIL = r"(?=[&;\s]|\\?\"(?:[,}\]\s]|$)|$)"

# Body of a JSON string literal, escaped quotes included
_JSON_STRING_BODY = r'((?:[^"\\]|\\.)*)'

# Keys between "name" and "value" within the same object
_SAME_OBJECT_GAP = r"[^{}]*?"


@dataclass(frozen=True)
class ScrubRule:
    """A single find/replace rule.

    Attributes:
        pattern: Compiled expression to search for
        replacement: ``re.sub`` replacement template
    """

    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        """Apply this rule to every match in text."""
        return self.pattern.sub(self.replacement, text)


def redaction_marker(label: str) -> str:
    """Build the marker that replaces a redacted value.

    Example:
        >>> redaction_marker("token")
        '[token redacted]'
    """
    return f"[{label} redacted]"


def _escape_template(text: str) -> str:
    """Escape backslashes so text is taken literally in a replacement template."""
    return text.replace("\\", "\\\\")


def build_rules(word: str) -> list[ScrubRule]:
    """Build the three scrub rules for a word.

    Args:
        word: Field, header, cookie or parameter name whose value is sensitive

    Returns:
        Rules for the inline, name-before-value and value-before-name shapes,
        in that order

    Example:
        >>> rules = build_rules("token")
        >>> rules[0].apply("a=1&token=abc&b=2")
        'a=1&token=[token redacted]&b=2'
    """
    escaped = re.escape(word)
    marker = _escape_template(redaction_marker(word))

    inline = ScrubRule(
        pattern=re.compile(
            _INLINE_LEAD
            + "("
            + escaped
            + "=)"
            # A value that is already this word's marker is left alone
            + "(?!" + re.escape(redaction_marker(word)) + ")"
            + _INLINE_VALUE
            + "+?"
            + _INLINE_TAIL,
            re.MULTILINE,
        ),
        replacement=r"\g<1>" + marker,
    )

    name_first = ScrubRule(
        pattern=re.compile(
            r'("name"\s*:\s*"'
            + escaped
            + r'"\s*,'
            + _SAME_OBJECT_GAP
            + r'"value"\s*:\s*")'
            + _JSON_STRING_BODY
            + '(")'
        ),
        replacement=r"\g<1>" + marker + r"\g<3>",
    )

    value_first = ScrubRule(
        pattern=re.compile(
            r'("value"\s*:\s*")'
            + _JSON_STRING_BODY
            + r'("\s*,'
            + _SAME_OBJECT_GAP
            + r'"name"\s*:\s*"'
            + escaped
            + '")'
        ),
        replacement=r"\g<1>" + marker + r"\g<3>",
    )

    return [inline, name_first, value_first]


def signature_rules(custom_catalog: Path | str | None = None) -> list[ScrubRule]:
    """Build the catalog-level rules that run before any word rule.

    The built-in catalog carries one: keep the header and payload of a
    compact signed token and replace its signature with ``redacted``.

    Raises:
        re.error: If a catalog regex is invalid
    """
    catalog = load_scrub_catalog(custom_catalog)
    return [
        ScrubRule(pattern=compile_pattern(rule), replacement=rule["replacement"])
        for rule in catalog.get("signature_rules", [])
    ]


def build_scrub_rules(
    words: Iterable[str],
    custom_catalog: Path | str | None = None,
) -> list[ScrubRule]:
    """Build the full ordered rule list: signature rules, then three rules per word."""
    rules = signature_rules(custom_catalog)
    for word in words:
        rules.extend(build_rules(word))
    _LOGGER.debug("Built %d scrub rules", len(rules))
    return rules


def apply_rules(text: str, rules: Iterable[ScrubRule]) -> str:
    """Apply rules to text in order, each seeing the previous rule's output."""
    for rule in rules:
        text = rule.apply(text)
    return text
