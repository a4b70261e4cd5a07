"""JSON parsing helpers.

Generators sometimes wrap JSON in fences or extra text, emit partial JSON,
or escape things inconsistently. These helpers do the strict parsing and
the acceptance check shared by the extraction strategies.
"""

from __future__ import annotations

import json
import re
from typing import Any

from .exceptions import ParseFailure, ValidationFailure
from .models import FieldNames
from .patterns import PatternLibrary

_ESCAPE = re.compile(
    r"\\u([dD][89abAB][0-9a-fA-F]{2})\\u([dD][c-fC-F][0-9a-fA-F]{2})"
    r"|\\u([0-9a-fA-F]{4})"
    r"|\\([\s\S])"
)
_SIMPLE_ESCAPES = {'"': '"', "\\": "\\", "/": "/", "n": "\n", "t": "\t", "r": "\r"}


def strip_fences(text: str, patterns: PatternLibrary) -> str:
    """Remove a leading fence (with optional language tag) and a trailing fence."""
    cleaned = patterns.leading_fence.sub("", text.strip(), count=1)
    cleaned = patterns.trailing_fence.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_object(text: str, stage: str) -> dict[str, Any]:
    """Strictly parse text as a single JSON object.

    Raises ParseFailure for invalid JSON and for valid JSON that is not an
    object.
    """
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise ParseFailure(stage, details=str(exc)[:200]) from exc

    if not isinstance(data, dict):
        raise ParseFailure(stage, f"Parsed {type(data).__name__}, expected object")
    return data


def has_recognized_field(data: Any, fields: FieldNames) -> bool:
    if not isinstance(data, dict):
        return False
    return any(isinstance(data.get(key), str) for key in fields.keys())


def accept(data: dict[str, Any], fields: FieldNames, stage: str) -> dict[str, Any]:
    """Return data if it carries a recognized string field, else raise."""
    if not has_recognized_field(data, fields):
        raise ValidationFailure(stage, keys=[str(k) for k in data])
    return data


def _resolve_escape(match: re.Match[str]) -> str:
    high, low, code, char = match.groups()
    if high is not None:
        return chr(0x10000 + ((int(high, 16) - 0xD800) << 10) + (int(low, 16) - 0xDC00))
    if code is not None:
        value = int(code, 16)
        if 0xD800 <= value <= 0xDFFF:
            return "\ufffd"
        return chr(value)
    return _SIMPLE_ESCAPES.get(char, match.group(0))


def unescape_fragment(text: str) -> str:
    """Resolve JSON escapes in a string captured from malformed JSON.

    The text is read left to right in one pass, so an escaped backslash is
    consumed as a unit and never starts another escape. Unknown escapes are
    kept as written.
    """
    return _ESCAPE.sub(_resolve_escape, text)
