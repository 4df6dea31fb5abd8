from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.tree_builder import TreeBuilder


@pytest.fixture
def tree_builder(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TreeBuilder:
    """Provide a project tree rooted under tmp_path and make it the working directory."""
    builder = TreeBuilder(tmp_path)
    monkeypatch.chdir(builder.path())
    return builder


@pytest.fixture(autouse=True)
def _reset_indexgen_logger():
    """Undo configure_logging() side effects so caplog sees indexgen records."""
    logger = logging.getLogger("indexgen")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
