"""Tests for indexgen.statements."""

from __future__ import annotations

from pathlib import Path

import pytest

from indexgen.models import ExportInfo, TargetConfig
from indexgen.statements import build_export_statements, from_path_for, mixed_statements


def _build(style: str, content: str = "", name: str = "Button") -> list[str]:
    config = TargetConfig(export_style=style)
    return build_export_statements(
        "button.tsx",
        Path("src/button.tsx"),
        "button",
        name,
        config,
        read_text=lambda path: content,
    )


@pytest.mark.parametrize(
    ("style", "expected"),
    [
        ("named", "export { default as Button } from './button';"),
        ("default", "export { default } from './button';"),
        ("star", "export * from './button';"),
        ("star-as", "export * as Button from './button';"),
    ],
)
def test_fixed_styles(style: str, expected: str) -> None:
    assert _build(style) == [expected]


def test_fixed_styles_do_not_read_the_file() -> None:
    def _fail(path: Path) -> str:
        raise AssertionError("file should not be read")

    config = TargetConfig(export_style="named")
    result = build_export_statements(
        "a.ts", Path("a.ts"), "a", "A", config, read_text=_fail
    )
    assert result == ["export { default as A } from './a';"]


def test_auto_uses_named_default_when_file_has_default_export() -> None:
    assert _build("auto", "export default Button;\n") == [
        "export { default as Button } from './button';"
    ]
    assert _build("auto", "export { default } from './impl';\n") == [
        "export { default as Button } from './button';"
    ]


def test_auto_uses_star_without_default_export() -> None:
    assert _build("auto", "export const a = 1;\n") == ["export * from './button';"]


def test_unknown_style_behaves_like_auto() -> None:
    assert _build("fancy", "export const a = 1;\n") == ["export * from './button';"]


def test_auto_falls_back_to_star_when_file_is_unreadable() -> None:
    def _missing(path: Path) -> str:
        raise FileNotFoundError(path)

    config = TargetConfig(export_style="auto")
    result = build_export_statements(
        "gone.ts", Path("gone.ts"), "gone", "Gone", config, read_text=_missing
    )
    assert result == ["export * from './gone';"]


def test_mixed_combines_default_named_and_type_exports() -> None:
    content = """
export default function Button() {}
export const useButton = () => null;
export interface ButtonProps {}
"""
    assert _build("mixed", content) == [
        "export { default as Button, useButton } from './button';",
        "export type { ButtonProps } from './button';",
    ]


def test_mixed_with_nothing_detected_falls_back_to_star() -> None:
    assert _build("mixed", "const internal = 1;\n") == ["export * from './button';"]


def test_mixed_statements_alias_falls_back_to_transformed_name() -> None:
    info = ExportInfo(has_default_export=True, default_exports=[])
    assert mixed_statements(info, "x", "X") == ["export { default as X } from './x';"]


def test_mixed_statements_drop_invalid_identifiers() -> None:
    info = ExportInfo(
        has_named_exports=True,
        named_exports=["good", "type Bad", "good"],
        type_exports=["Ok", "not valid"],
    )
    assert mixed_statements(info, "x", "X") == [
        "export { good } from './x';",
        "export type { Ok } from './x';",
    ]


def test_mixed_statements_type_only() -> None:
    info = ExportInfo(type_exports=["Props"])
    assert mixed_statements(info, "x", "X") == ["export type { Props } from './x';"]


def test_from_path_respects_extension_flag() -> None:
    assert from_path_for("button.tsx", TargetConfig()) == "button"
    assert from_path_for("button.tsx", TargetConfig(from_with_extension=True)) == "button.tsx"
    assert from_path_for("button.test.tsx", TargetConfig()) == "button.test"


def test_mixed_falls_back_to_star_when_file_is_unreadable(caplog) -> None:
    def _missing(path: Path) -> str:
        raise FileNotFoundError(path)

    config = TargetConfig(export_style="mixed")
    with caplog.at_level("ERROR", logger="indexgen"):
        result = build_export_statements(
            "gone.ts", Path("gone.ts"), "gone", "Gone", config, read_text=_missing
        )

    assert result == ["export * from './gone';"]
    assert "Failed to analyze file gone.ts" in caplog.text
