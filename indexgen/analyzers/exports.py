"""Lexical detection of the symbols a JavaScript/TypeScript module exports.

This is a heuristic scan over the source text, not a parser. Declarations
split across lines in unusual ways, or exports produced by other syntax
(``export let``, ``export declare``), are not detected.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, List, Optional

from ..logging import get_logger
from ..models import ExportInfo

_COMMENT_PREFIXES = ("//", "/*", "*")

_TEMPLATE_LITERAL = re.compile(r"`(?:\\.|[\s\S])*?`")
_DOUBLE_QUOTED = re.compile(r'"(?:\\.|[^"\\])*"')
_SINGLE_QUOTED = re.compile(r"'(?:\\.|[^'\\])*'")

_DEFAULT_EXPORT = re.compile(r"export\s+default\s+")
_VALUE_EXPORT = re.compile(r"export\s+(?:async\s+)?(?:function|const|class|enum)\s+(\w+)")
_TYPE_EXPORT = re.compile(r"export\s+(?:interface|type)\s+(\w+)")
_EXPORT_GROUP = re.compile(r"export\s+\{\s*([^}]+)\s*\}")
_NAMED_DEFAULT_EXPORT = re.compile(
    r"export\s+default\s+(?:async\s+)?(?:function|const|class)\s+(\w+)"
)

_NOT_A_NAME = {"extends", "implements"}


def analyze_exports(content: str, *, logger: Optional[logging.Logger] = None) -> ExportInfo:
    """Classify the exports found in ``content``.

    Never raises; on an unexpected failure an empty :class:`ExportInfo` is
    returned and the error is logged.
    """
    log = logger or get_logger("analyzers.exports")
    try:
        code = _strip_strings(_strip_comments(content))

        has_default_export = _DEFAULT_EXPORT.search(code) is not None
        log.debug(
            "Default export check: has_default=%s brace_default=%s",
            has_default_export,
            re.search(r"export\s+\{\s*default\s*\}", code) is not None,
        )

        named_exports: List[str] = []
        type_exports: List[str] = []
        default_exports: List[str] = []

        for match in _VALUE_EXPORT.finditer(code):
            _append_unique(named_exports, match.group(1))

        for match in _TYPE_EXPORT.finditer(code):
            _append_unique(type_exports, match.group(1))

        for line in code.split("\n"):
            stripped = line.strip()
            if stripped.startswith(_COMMENT_PREFIXES):
                continue
            for group in _EXPORT_GROUP.finditer(stripped):
                for entry in group.group(1).split(","):
                    name = entry.strip()
                    if not name or re.match(r"default\b", name):
                        continue
                    if "*" in name or " as " in name:
                        continue
                    _append_unique(named_exports, name)

        for match in _NAMED_DEFAULT_EXPORT.finditer(code):
            if match.group(1) not in _NOT_A_NAME:
                _append_unique(default_exports, match.group(1))

        info = ExportInfo(
            has_default_export=has_default_export,
            has_named_exports=bool(named_exports),
            named_exports=named_exports,
            type_exports=type_exports,
            default_exports=default_exports,
        )
        log.debug("Export analysis result: %s", info)
        return info
    except Exception as exc:
        log.error("Export analysis failed: %s", exc)
        return ExportInfo()


def _read_utf8(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def analyze_file(
    path: Path,
    *,
    read_text: Callable[[Path], str] = _read_utf8,
    logger: Optional[logging.Logger] = None,
) -> ExportInfo:
    """Read ``path`` and analyze its exports; unreadable files yield an empty result."""
    log = logger or get_logger("analyzers.exports")
    try:
        content = read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        log.error("Failed to analyze file %s: %s", path, exc)
        return ExportInfo()
    log.debug("Analyzing %s (%d chars)", path, len(content))
    return analyze_exports(content, logger=log)


def _strip_comments(content: str) -> str:
    lines = []
    for line in content.split("\n"):
        if line.strip().startswith(_COMMENT_PREFIXES):
            continue
        comment_index = line.find("//")
        if comment_index != -1:
            line = line[:comment_index].strip()
        lines.append(line)
    return "\n".join(lines)


def _strip_strings(code: str) -> str:
    code = _TEMPLATE_LITERAL.sub("", code)
    code = _DOUBLE_QUOTED.sub("", code)
    return _SINGLE_QUOTED.sub("", code)


def _append_unique(values: List[str], value: str) -> None:
    if value and value not in values:
        values.append(value)


__all__ = ["analyze_exports", "analyze_file"]
