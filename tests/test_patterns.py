"""Tests for indexgen.patterns."""

from __future__ import annotations

import pytest

from indexgen.patterns import glob_base, normalize_path, path_matches


@pytest.mark.parametrize(
    ("relative", "pattern"),
    [
        ("src/components", "src/components"),
        ("entities/kakao/model", "entities/kakao/model"),
        ("./src/components", "src/components"),
        ("src\\components", "src/components"),
        ("src//components", "./src/components"),
    ],
)
def test_exact_paths_match_after_normalisation(relative: str, pattern: str) -> None:
    assert path_matches(relative, pattern) is True


def test_exact_paths_do_not_match_other_paths() -> None:
    assert path_matches("src/components", "src/utils") is False
    assert path_matches("src/components/button", "src/components") is False
    assert path_matches("src", "src/components") is False


def test_double_star_alone_matches_everything() -> None:
    assert path_matches("", "**") is True
    assert path_matches("anything/at/all", "**") is True
    assert path_matches(".", "**") is True


def test_double_star_in_middle_spans_segments() -> None:
    assert path_matches("entities/kakao/model", "entities/**/model") is True
    assert path_matches("entities/a/b/model", "entities/**/model") is True
    assert path_matches("entities/kakao/api", "entities/**/model") is False


def test_single_star_stays_within_segment() -> None:
    assert path_matches("src/components", "src/*") is True
    assert path_matches("src/utils", "src/*") is True
    assert path_matches("src/components", "src/*/components") is False
    assert path_matches("src/a/b", "src/*") is False


def test_trailing_double_star_matches_base_and_descendants() -> None:
    assert path_matches("src/components", "src/components/**") is True
    assert path_matches("src/components/button", "src/components/**") is True
    assert path_matches("src/components/a/b/c", "src/components/**") is True
    assert path_matches("src/componentsx", "src/components/**") is False


def test_nested_double_star_patterns() -> None:
    assert path_matches("test/depth1/api", "test/**/api") is True
    assert path_matches("test/depth1/api", "test/**/api/**") is True
    assert path_matches("test/depth1/depth2/api/**", "test/**/api/**") is True
    assert path_matches("other/depth1/api", "test/**/api") is False


def test_regex_metacharacters_are_literal() -> None:
    assert path_matches("src/a.b/ui", "src/a.b/*") is True
    assert path_matches("src/aXb/ui", "src/a.b/*") is False
    assert path_matches("src/(group)/ui", "src/(group)/**") is True


def test_matching_is_anchored() -> None:
    assert path_matches("prefix/src/components", "src/*") is False
    assert path_matches("src/components/extra", "src/*") is False


def test_normalize_path() -> None:
    assert normalize_path(".\\src\\\\components") == "src/components"
    assert normalize_path("./a//b///c") == "a/b/c"


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("src/components/**", "src/components"),
        ("entities/**/model", "entities"),
        ("src/*/ui", "src"),
        ("src/components/", "src/components"),
        ("src/components", "src/components"),
        ("**", "."),
    ],
)
def test_glob_base(pattern: str, expected: str) -> None:
    assert glob_base(pattern) == expected
