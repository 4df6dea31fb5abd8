"""Tests for indexgen.config."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from indexgen.config import (
    DEFAULT_TARGET,
    load_config,
    parse_bool,
    parse_comma_separated,
    parse_target,
    resolve_target_config,
)
from indexgen.models import IndexGenConfig, TargetConfig, TargetOverrides


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_load_config_returns_none_when_missing(tmp_path: Path) -> None:
    assert load_config(tmp_path) is None


def test_load_config_reads_json_and_fills_defaults(tmp_path: Path) -> None:
    _write_json(
        tmp_path / ".indexgen-cli.json",
        {
            "targets": [
                {"paths": ["src"], "exportStyle": "named", "fileExtensions": ["tsx", ".ts"]},
            ],
            "log": False,
            "debug": True,
        },
    )

    config = load_config(tmp_path)

    assert isinstance(config, IndexGenConfig)
    assert config.log is False
    assert config.debug is True
    assert len(config.targets) == 1
    target = config.targets[0]
    assert target.paths == ("src",)
    assert target.export_style == "named"
    assert target.file_extensions == (".tsx", ".ts")
    assert target.output_file == "index.ts"
    assert target.naming_convention == DEFAULT_TARGET.naming_convention
    assert config.source == str(tmp_path / ".indexgen-cli.json")


def test_dotfile_without_extension_is_json_and_wins(tmp_path: Path) -> None:
    _write_json(tmp_path / ".indexgen-cli", {"targets": [{"paths": "lib", "outputFile": "barrel.ts"}]})
    _write_json(tmp_path / ".indexgen-cli.json", {"targets": [{"paths": ["ignored"]}]})

    config = load_config(tmp_path)

    assert config is not None
    assert config.targets[0].paths == ("lib",)
    assert config.targets[0].output_file == "barrel.ts"


def test_yaml_config_is_supported(tmp_path: Path) -> None:
    (tmp_path / ".indexgen-cli.yml").write_text(
        """
targets:
  - paths:
      - src/components/**
    exportStyle: mixed
    namingConvention: camelCase
    fromWithExtension: "true"
    excludes: ["*.test.ts"]
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config is not None
    target = config.targets[0]
    assert target.paths == ("src/components/**",)
    assert target.export_style == "mixed"
    assert target.naming_convention == "camelCase"
    assert target.from_with_extension is True
    assert target.excludes == ("*.test.ts",)


def test_malformed_config_is_logged_and_next_candidate_used(tmp_path: Path, caplog) -> None:
    (tmp_path / ".indexgen-cli").write_text("{ not json", encoding="utf-8")
    _write_json(tmp_path / ".indexgen-cli.json", {"targets": [{"paths": ["src"]}]})

    with caplog.at_level(logging.WARNING, logger="indexgen"):
        config = load_config(tmp_path)

    assert config is not None
    assert config.targets[0].paths == ("src",)
    assert "Failed to read config file .indexgen-cli" in caplog.text


def test_non_mapping_config_is_treated_as_absent(tmp_path: Path) -> None:
    _write_json(tmp_path / ".indexgen-cli.json", ["not", "a", "mapping"])

    assert load_config(tmp_path) is None


def test_script_config_is_not_executed(tmp_path: Path, caplog) -> None:
    (tmp_path / "indexgen-cli.config.js").write_text(
        "module.exports = { targets: [] };", encoding="utf-8"
    )

    with caplog.at_level(logging.WARNING, logger="indexgen"):
        config = load_config(tmp_path)

    assert config is None
    assert "executable config files are not supported" in caplog.text


def test_load_config_defaults_to_working_directory(tmp_path: Path, monkeypatch) -> None:
    _write_json(tmp_path / ".indexgen-cli.json", {"targets": [{"paths": ["app"]}]})
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config is not None
    assert config.targets[0].paths == ("app",)


def test_parse_target_accepts_snake_case_aliases() -> None:
    target = parse_target({"output_file": "exports.ts", "export_style": "star"})

    assert target.output_file == "exports.ts"
    assert target.export_style == "star"


def _config() -> IndexGenConfig:
    return IndexGenConfig(
        targets=[
            TargetConfig(paths=("src/components/**",), export_style="named"),
            TargetConfig(paths=("src/hooks",), export_style="star", output_file="hooks.ts"),
        ]
    )


def test_resolve_uses_first_matching_target(tmp_path: Path) -> None:
    target = resolve_target_config("src/hooks", _config(), cwd=tmp_path)

    assert target.export_style == "star"
    assert target.output_file == "hooks.ts"


def test_resolve_matches_glob_targets(tmp_path: Path) -> None:
    target = resolve_target_config("./src/components/forms", _config(), cwd=tmp_path)

    assert target.export_style == "named"


def test_resolve_without_match_returns_defaults(tmp_path: Path) -> None:
    assert resolve_target_config("lib", _config(), cwd=tmp_path) == DEFAULT_TARGET


def test_resolve_without_path_uses_first_target(tmp_path: Path) -> None:
    target = resolve_target_config(None, _config(), cwd=tmp_path)

    assert target.export_style == "named"


def test_resolve_without_config_returns_defaults() -> None:
    assert resolve_target_config("src", None) == DEFAULT_TARGET
    assert resolve_target_config("src", IndexGenConfig()) == DEFAULT_TARGET


def test_resolve_applies_only_defined_overrides(tmp_path: Path) -> None:
    target = resolve_target_config(
        "src/hooks",
        _config(),
        TargetOverrides(output_file="exports.ts"),
        cwd=tmp_path,
    )

    assert target.output_file == "exports.ts"
    assert target.export_style == "star"


def test_resolve_accepts_absolute_paths(tmp_path: Path) -> None:
    target = resolve_target_config(str(tmp_path / "src" / "hooks"), _config(), cwd=tmp_path)

    assert target.export_style == "star"


def test_parse_bool() -> None:
    assert parse_bool("true") is True
    assert parse_bool("FALSE") is False
    assert parse_bool(True) is True
    assert parse_bool(None) is None
    assert parse_bool("invalid") is None


def test_parse_comma_separated() -> None:
    assert parse_comma_separated("a,b,c") == ["a", "b", "c"]
    assert parse_comma_separated(" a , b , c ") == ["a", "b", "c"]
    assert parse_comma_separated("a,,b,c") == ["a", "b", "c"]
    assert parse_comma_separated("") is None
    assert parse_comma_separated(None) is None
    assert parse_comma_separated(" , ") is None
