"""Directory traversal and classification of index-file candidates."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, Sequence

from .logging import get_logger
from .models import DirectoryScan, TargetConfig

_EXCLUDED_DIRS = {"node_modules"}


@dataclass(frozen=True)
class Entry:
    """A single directory entry as seen by the scanner."""

    name: str
    is_dir: bool


class FileSystem(Protocol):
    """File-system operations the scanner and generator depend on."""

    def list_dir(self, path: Path) -> List[Entry]: ...

    def is_file(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, content: str) -> None: ...

    def make_dirs(self, path: Path) -> None: ...


class LocalFileSystem:
    """:class:`FileSystem` backed by the real disk."""

    def list_dir(self, path: Path) -> List[Entry]:
        entries: List[Entry] = []
        with os.scandir(path) as iterator:
            for item in iterator:
                entries.append(Entry(name=item.name, is_dir=item.is_dir()))
        return sorted(entries, key=lambda entry: entry.name)

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        path.write_text(content, encoding="utf-8")

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)


def is_traversable_dir(name: str) -> bool:
    return not name.startswith(".") and name not in _EXCLUDED_DIRS


def is_excluded(file_name: str, excludes: Sequence[str]) -> bool:
    """Apply exclude rules: ``*.ext`` by extension, ``*suffix`` by suffix, else exact name."""
    for pattern in excludes:
        if pattern.startswith("*"):
            if file_name.endswith(pattern[1:]):
                return True
        elif file_name == pattern:
            return True
    return False


def is_output_dir(path: Path, output_file: str) -> bool:
    """Return True when ``path`` is where a parent directory's nested index file is written."""
    parts = Path(output_file).parent.parts
    return bool(parts) and path.parts[-len(parts):] == parts


def is_component_file(file_name: str, config: TargetConfig) -> bool:
    """Return True when ``file_name`` should be re-exported from its directory's index."""
    if is_excluded(file_name, config.excludes):
        return False
    if file_name == (config.output_file or "index.ts"):
        return False
    return Path(file_name).suffix in config.file_extensions


def classify(
    path: Path,
    entries: Sequence[Entry],
    config: TargetConfig,
    fs: FileSystem,
    *,
    known_indexes: Sequence[Path] = (),
) -> DirectoryScan:
    """Split ``entries`` into component files and index-bearing subfolders.

    ``known_indexes`` lists index files produced earlier in the same pass that
    may not exist on disk yet (dry runs).
    """
    scan = DirectoryScan(path=str(path))
    output_file = config.output_file or "index.ts"
    for entry in entries:
        if entry.is_dir:
            if not is_traversable_dir(entry.name):
                continue
            index_path = path / entry.name / output_file
            if index_path in known_indexes or fs.is_file(index_path):
                scan.subfolders.append(entry.name)
        elif is_component_file(entry.name, config):
            scan.component_files.append(entry.name)
    return scan


@dataclass
class Visit:
    """A directory yielded by :meth:`DirectoryScanner.walk`."""

    path: Path
    entries: List[Entry]
    error: Exception | None = None


class DirectoryScanner:
    """Walks a tree depth-first and yields directories children-first."""

    def __init__(
        self,
        fs: FileSystem | None = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.fs = fs or LocalFileSystem()
        self.logger = logger or get_logger("scanner")

    def walk(self, root: Path) -> Iterator[Visit]:
        """Yield every traversable directory under ``root`` in post-order.

        A directory whose listing fails is yielded once with ``error`` set and
        its subtree is not visited.
        """
        stack: List[tuple[Path, List[Entry] | None]] = [(root, None)]
        while stack:
            path, entries = stack.pop()
            if entries is not None:
                yield Visit(path=path, entries=entries)
                continue
            try:
                listed = self.fs.list_dir(path)
            except OSError as exc:
                self.logger.debug("Failed to list %s: %s", path, exc)
                yield Visit(path=path, entries=[], error=exc)
                continue
            stack.append((path, listed))
            for entry in reversed(listed):
                if entry.is_dir and is_traversable_dir(entry.name):
                    stack.append((path / entry.name, None))


__all__ = [
    "DirectoryScanner",
    "Entry",
    "FileSystem",
    "LocalFileSystem",
    "Visit",
    "classify",
    "is_component_file",
    "is_excluded",
    "is_output_dir",
    "is_traversable_dir",
]
