"""Targeted field extraction from JSON response bodies.

The WebCrawlerAPI responses only ever need a handful of known fields, so the
helpers here scan the raw text for ``"key":`` and decode the value that
follows instead of loading the whole document.  The contract is deliberately
forgiving:

* a missing key (or a JSON ``null``) is reported as ``None``;
* numbers and booleans come back as their literal text, conversion is left to
  the caller (see :func:`extract_int`);
* malformed or truncated documents degrade to ``None`` / empty results and
  never raise.

The textually first ``"key":`` wins, whatever its nesting depth.
"""
from __future__ import annotations

import re

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_UNESCAPES = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_ESCAPE_PATTERN = re.compile(r'[\\"\n\r\t]')
_UNESCAPE_PATTERN = re.compile(r'\\([\\"nrt])')
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

_TOKEN_TERMINATORS = {",", "}", "]"}


def escape_string(value: str | None) -> str:
    """Escape ``value`` for embedding inside a JSON string literal."""

    if value is None:
        return ""
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES[match.group(0)], value)


def unescape_string(value: str | None) -> str:
    """Reverse :func:`escape_string` in a single left-to-right pass."""

    if value is None:
        return ""
    return _UNESCAPE_PATTERN.sub(lambda match: _UNESCAPES[match.group(1)], value)


def _key_pattern(key: str) -> str:
    return f'"{key}":'


def _skip_whitespace(document: str, index: int) -> int:
    while index < len(document) and document[index].isspace():
        index += 1
    return index


def _read_string(document: str, start: int) -> str | None:
    """Read the string literal whose opening quote sits at ``start``."""

    escaped = False
    for index in range(start + 1, len(document)):
        char = document[index]
        if char == "\\" and not escaped:
            escaped = True
        elif char == '"' and not escaped:
            return unescape_string(document[start + 1 : index])
        else:
            escaped = False
    return None


def _read_token(document: str, start: int) -> str:
    end = start
    while end < len(document):
        char = document[end]
        if char in _TOKEN_TERMINATORS or char.isspace():
            break
        end += 1
    return document[start:end]


def extract_value(document: str, key: str) -> str | None:
    """Return the scalar value stored under ``key`` or ``None`` when absent.

    Strings are unescaped; any other token (number, boolean, the opening of a
    nested object or array) is returned as raw text up to the next ``,``,
    ``}``, ``]`` or whitespace.  Nested containers are therefore *not* safely
    extracted here, use :func:`extract_objects` for arrays of objects.
    """

    if not document or not key:
        return None

    pattern = _key_pattern(key)
    key_index = document.find(pattern)
    if key_index == -1:
        return None

    start = _skip_whitespace(document, key_index + len(pattern))
    if start >= len(document):
        return None

    if document[start] == '"':
        return _read_string(document, start)
    if document.startswith("null", start):
        return None
    return _read_token(document, start)


def extract_int(document: str, key: str, default: int = 0) -> int:
    """Best-effort integer lookup, ``default`` when absent or not numeric."""

    value = extract_value(document, key)
    if value is None or not _INTEGER_PATTERN.fullmatch(value):
        return default
    return int(value)


def _matching_bracket(document: str, start: int) -> int:
    depth = 0
    for index in range(start, len(document)):
        char = document[index]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
    return -1


def extract_objects(document: str, key: str) -> list[str]:
    """Return the top-level ``{...}`` spans of the array stored under ``key``.

    Each span is returned as text so the caller can run :func:`extract_value`
    on it.  A missing key, a missing ``[`` or an empty array yields ``[]``.
    When the closing bracket never arrives the rest of the document is
    scanned, so only the objects that are complete are returned.
    """

    if not document or not key:
        return []

    key_index = document.find(_key_pattern(key))
    if key_index == -1:
        return []

    array_start = document.find("[", key_index)
    if array_start == -1:
        return []

    array_end = _matching_bracket(document, array_start)
    if array_end == -1:
        array_end = len(document)
    body = document[array_start + 1 : array_end]

    objects: list[str] = []
    depth = 0
    object_start = -1
    for index, char in enumerate(body):
        if char == "{":
            if depth == 0:
                object_start = index
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0 and object_start != -1:
                objects.append(body[object_start : index + 1])
                object_start = -1
    return objects


__all__ = [
    "escape_string",
    "extract_int",
    "extract_objects",
    "extract_value",
    "unescape_string",
]
