"""File name to identifier conversion."""

from __future__ import annotations

import re

_SEPARATOR_LETTER = re.compile(r"[-_]([a-z])")
_INVALID_IDENTIFIER_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def to_valid_identifier(name: str) -> str:
    """Strip characters that cannot appear in an identifier and guard a leading digit."""
    valid = _INVALID_IDENTIFIER_CHARS.sub("", name)
    if valid[:1].isdigit():
        valid = f"_{valid}"
    return valid


def transform_file_name(name: str, naming_convention: str) -> str:
    """Convert a file base name according to ``naming_convention``.

    Unknown conventions behave like ``PascalCase``.
    """
    camel = _SEPARATOR_LETTER.sub(lambda match: match.group(1).upper(), name)

    if naming_convention == "camelCase":
        return camel[:1].lower() + camel[1:]
    if naming_convention == "original":
        return to_valid_identifier(name)
    return camel[:1].upper() + camel[1:]


__all__ = ["to_valid_identifier", "transform_file_name"]
