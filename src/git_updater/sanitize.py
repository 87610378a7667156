"""Sanitizers for option keys and text values."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_FILE_NAME_SPECIAL_CHARS = set("?[]/\\=<>:;,'\"&$#*()|~`!{}%+’«»”“\x00")
_WHITESPACE_RE = re.compile(r"[\r\n\t ]+")
_TAG_RE = re.compile(r"<[^>]*>?")
_SCRIPT_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_OCTET_RE = re.compile(r"%[a-f0-9]{2}", re.IGNORECASE)


def sanitize_file_name(name: str) -> str:
    """Strip characters that are unsafe in file names and option keys."""
    name = "".join(char for char in name if char not in _FILE_NAME_SPECIAL_CHARS)
    name = re.sub(r"[\r\n\t -]+", "-", name)
    return name.strip(".-_")


def sanitize_text_field(value: Any) -> str:
    """Reduce a value to a single line of plain text.

    Tags are removed, whitespace runs collapse to a single space and
    percent-encoded octets are dropped. ``None`` becomes ``""``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    text = str(value)

    text = _SCRIPT_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()

    while True:
        text, count = _OCTET_RE.subn("", text)
        if not count:
            break

    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize(values: Mapping[Any, Any]) -> dict[str, str]:
    """Sanitize every key and value of a settings mapping."""
    sanitized: dict[str, str] = {}
    for key, value in values.items():
        if isinstance(key, str):
            sanitized[sanitize_file_name(key)] = sanitize_text_field(value)
        else:
            sanitized[sanitize_text_field(key)] = sanitize_text_field(value)
    return sanitized
