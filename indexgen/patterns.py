"""Glob-lite matching of relative directory paths against watch patterns.

Supported wildcards:

- ``**`` matches any sequence of characters, including ``/``.
- ``*`` matches any sequence of characters within a single path segment.
- A trailing ``/**`` also matches the base directory itself.

Patterns without ``*`` are compared for exact equality after normalisation.
"""

from __future__ import annotations

import re

_REGEX_SPECIALS = re.compile(r"[.+^${}()|\[\]\\?]")
_REPEATED_SLASHES = re.compile(r"/+")


def normalize_path(value: str) -> str:
    """Return ``value`` with forward slashes, no repeated slashes and no leading ``./``."""
    result = value.replace("\\", "/")
    result = _REPEATED_SLASHES.sub("/", result)
    if result.startswith("./"):
        result = result[2:]
    return result


def is_glob(pattern: str) -> bool:
    return "*" in pattern


def _replace_globs(escaped: str) -> str:
    # ``**`` is swapped for a placeholder first so the single ``*`` pass leaves it alone.
    placeholder = "\0"
    return escaped.replace("**", placeholder).replace("*", "[^/]*").replace(placeholder, ".*")


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a normalised watch pattern into an anchored regular expression."""
    normalized = normalize_path(pattern)
    if normalized == "**":
        return re.compile(r"^.*$")

    if normalized.endswith("/**"):
        base = normalized[:-3]
        escaped_base = _replace_globs(_REGEX_SPECIALS.sub(lambda m: "\\" + m.group(0), base))
        return re.compile(f"^{escaped_base}(?:/.*)?$")

    escaped = _replace_globs(_REGEX_SPECIALS.sub(lambda m: "\\" + m.group(0), normalized))
    return re.compile(f"^{escaped}$")


def path_matches(relative_path: str, pattern: str) -> bool:
    """Return True when ``relative_path`` is selected by ``pattern``."""
    rel = normalize_path(relative_path)
    watch = normalize_path(pattern)

    if not is_glob(watch):
        return rel == watch

    return glob_to_regex(watch).match(rel) is not None


def glob_base(pattern: str) -> str:
    """Return the directory portion of ``pattern`` that precedes any wildcard segment.

    ``src/components/**`` -> ``src/components``; ``entities/*/model`` -> ``entities``;
    a pattern without wildcards only loses its trailing slash.
    """
    normalized = normalize_path(pattern)
    if not is_glob(normalized):
        stripped = normalized.rstrip("/")
        return stripped or normalized

    segments = normalized.split("/")
    base: list[str] = []
    for segment in segments:
        if "*" in segment:
            break
        base.append(segment)
    joined = "/".join(base)
    if not joined:
        return "/" if normalized.startswith("/") else "."
    return joined


__all__ = ["glob_base", "glob_to_regex", "is_glob", "normalize_path", "path_matches"]
