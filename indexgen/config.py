"""Configuration loading for indexgen (.indexgen-cli, .indexgen-cli.json, .indexgen-cli.yml)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .logging import get_logger
from .models import IndexGenConfig, TargetConfig, TargetOverrides
from .patterns import path_matches

CONFIG_FILENAMES: Tuple[str, ...] = (
    ".indexgen-cli",
    ".indexgen-cli.json",
    ".indexgen-cli.yml",
    ".indexgen-cli.yaml",
    "indexgen-cli.config.js",
    "indexgen-cli.config.mjs",
    "indexgen-cli.config.ts",
)

_SCRIPT_SUFFIXES = (".js", ".mjs", ".ts")
_YAML_SUFFIXES = (".yml", ".yaml")

DEFAULT_TARGET = TargetConfig()

# config key -> (TargetConfig field, snake_case alias)
_TARGET_KEYS: Tuple[Tuple[str, str], ...] = (
    ("paths", "paths"),
    ("outputFile", "output_file"),
    ("fileExtensions", "file_extensions"),
    ("exportStyle", "export_style"),
    ("namingConvention", "naming_convention"),
    ("fromWithExtension", "from_with_extension"),
    ("excludes", "excludes"),
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


def load_config(
    root: Path | None = None, *, logger: Optional[logging.Logger] = None
) -> Optional[IndexGenConfig]:
    """Load the first readable config file found under ``root`` (default: cwd).

    Returns ``None`` when no usable configuration exists.
    """
    log = logger or get_logger("config")
    base = Path(root) if root is not None else Path.cwd()

    for name in CONFIG_FILENAMES:
        config_file = base / name
        if not config_file.is_file():
            continue
        if name.endswith(_SCRIPT_SUFFIXES):
            log.warning(
                "Ignoring %s: executable config files are not supported, use .indexgen-cli.json or .indexgen-cli.yml",
                name,
            )
            continue
        try:
            data = _read_config(config_file)
            config = _build_config(data)
        except (ConfigError, OSError) as exc:
            log.warning("Failed to read config file %s: %s", name, exc)
            continue
        config.source = str(config_file)
        log.debug("Loaded config from %s (%d targets)", config_file, len(config.targets))
        return config

    return None


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.name.endswith(_YAML_SUFFIXES):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON: {exc}") from exc


def _build_config(data: Any) -> IndexGenConfig:
    if not isinstance(data, dict):
        raise ConfigError("config must contain a mapping at the root")

    config = IndexGenConfig()
    targets = data.get("targets")
    if isinstance(targets, list):
        config.targets = [
            parse_target(entry) for entry in targets if isinstance(entry, dict)
        ]

    log_value = _as_bool(data.get("log"))
    if log_value is not None:
        config.log = log_value
    debug_value = _as_bool(data.get("debug"))
    if debug_value is not None:
        config.debug = debug_value
    return config


def parse_target(data: Dict[str, Any]) -> TargetConfig:
    """Merge a raw target mapping over the default target shape."""
    overrides = TargetOverrides()
    for key, attr in _TARGET_KEYS:
        raw = data.get(key, data.get(attr))
        if raw is None:
            continue
        if attr in ("paths", "excludes"):
            setattr(overrides, attr, tuple(_as_str_list(raw)))
        elif attr == "file_extensions":
            setattr(overrides, attr, tuple(normalize_extensions(_as_str_list(raw))))
        elif attr == "from_with_extension":
            setattr(overrides, attr, _as_bool(raw))
        else:
            setattr(overrides, attr, _as_str(raw))
    return DEFAULT_TARGET.merged(overrides)


def resolve_target_config(
    folder_path: Optional[str],
    config: Optional[IndexGenConfig],
    overrides: Optional[TargetOverrides] = None,
    *,
    cwd: Path | None = None,
    logger: Optional[logging.Logger] = None,
) -> TargetConfig:
    """Return the effective target for ``folder_path``: defaults <- matched target <- overrides."""
    log = logger or get_logger("config")
    target: Optional[TargetConfig] = None

    if config is not None and config.targets:
        if folder_path:
            relative = relative_to_cwd(folder_path, cwd)
            log.debug("Resolving target for %s (relative: %s)", folder_path, relative)
            target = match_target(relative, config)
        else:
            log.debug("No folder given; using the first configured target")
            target = config.targets[0]

    if target is None:
        log.debug("Using default target settings")
        target = DEFAULT_TARGET

    return target.merged(overrides)


def match_target(relative_path: str, config: IndexGenConfig) -> Optional[TargetConfig]:
    """Return the first target whose path list selects ``relative_path``."""
    for target in config.targets:
        for watch_path in target.paths:
            if path_matches(relative_path, watch_path):
                return target
    return None


def relative_to_cwd(path: str, cwd: Path | None = None) -> str:
    base = str(cwd) if cwd is not None else os.getcwd()
    try:
        relative = os.path.relpath(os.path.join(base, path), base)
    except ValueError:
        return path
    return relative.replace(os.sep, "/")


def normalize_extensions(values: Sequence[str]) -> List[str]:
    return [value if value.startswith(".") else f".{value}" for value in values]


def parse_bool(value: Any) -> Optional[bool]:
    """Parse ``"true"``/``"false"`` (any case) or a literal bool; anything else is ``None``."""
    if value is None:
        return None
    if value is True:
        return True
    lowered = str(value).strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_comma_separated(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    items = [item.strip() for item in value.split(",")]
    items = [item for item in items if item]
    return items or None


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAMES",
    "ConfigError",
    "DEFAULT_TARGET",
    "load_config",
    "match_target",
    "normalize_extensions",
    "parse_bool",
    "parse_comma_separated",
    "parse_target",
    "relative_to_cwd",
    "resolve_target_config",
]
