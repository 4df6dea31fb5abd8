"""Rendering of re-export statements for a single module file."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, List, Optional

from .analyzers.exports import analyze_file
from .logging import get_logger
from .models import ExportInfo, TargetConfig

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_DEFAULT_MARKERS = ("export default", "export { default }")

ReadText = Callable[[Path], str]


def _read_utf8(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def from_path_for(file_name: str, config: TargetConfig) -> str:
    """Return the module specifier used in ``from './…'`` for ``file_name``."""
    if config.from_with_extension:
        return file_name
    return Path(file_name).stem


def build_export_statements(
    file_name: str,
    file_path: Path,
    from_path: str,
    transformed_name: str,
    config: TargetConfig,
    *,
    read_text: ReadText = _read_utf8,
    logger: Optional[logging.Logger] = None,
) -> List[str]:
    """Return the re-export line(s) for one file according to ``config.export_style``."""
    log = logger or get_logger("statements")
    style = config.export_style

    if style == "named":
        return [f"export {{ default as {transformed_name} }} from './{from_path}';"]
    if style == "default":
        return [f"export {{ default }} from './{from_path}';"]
    if style == "star":
        return [f"export * from './{from_path}';"]
    if style == "star-as":
        return [f"export * as {transformed_name} from './{from_path}';"]
    if style == "mixed":
        log.debug("Processing with mixed style: %s", file_name)
        info = analyze_file(file_path, read_text=read_text, logger=log)
        return mixed_statements(info, from_path, transformed_name)

    if style != "auto":
        log.warning("Unknown export style %r for %s; using auto", style, file_name)
    try:
        content = read_text(file_path)
    except (OSError, UnicodeDecodeError) as exc:
        log.error("Failed to read %s: %s", file_path, exc)
        content = ""
    if any(marker in content for marker in _DEFAULT_MARKERS):
        return [f"export {{ default as {transformed_name} }} from './{from_path}';"]
    return [f"export * from './{from_path}';"]


def mixed_statements(info: ExportInfo, from_path: str, transformed_name: str) -> List[str]:
    """Combine value and type re-exports detected in a file."""
    value_exports: List[str] = []
    if info.has_default_export:
        candidate = info.default_exports[0] if info.default_exports else transformed_name
        alias = candidate if IDENTIFIER_RE.match(candidate) else transformed_name
        value_exports.append(f"default as {alias}")

    if info.has_named_exports:
        value_exports.extend(_valid_unique(info.named_exports))

    type_exports = _valid_unique(info.type_exports)

    statements: List[str] = []
    if value_exports:
        statements.append(f"export {{ {', '.join(value_exports)} }} from './{from_path}';")
    if type_exports:
        statements.append(f"export type {{ {', '.join(type_exports)} }} from './{from_path}';")
    if not statements:
        statements.append(f"export * from './{from_path}';")
    return statements


def _valid_unique(names: List[str]) -> List[str]:
    seen: List[str] = []
    for name in names:
        if name not in seen and IDENTIFIER_RE.match(name):
            seen.append(name)
    return seen


__all__ = ["IDENTIFIER_RE", "build_export_statements", "from_path_for", "mixed_statements"]
