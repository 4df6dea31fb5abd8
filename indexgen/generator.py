"""Index file generation pipeline."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Set

from .config import match_target, relative_to_cwd, resolve_target_config
from .logging import get_logger
from .models import (
    DirectoryOutcome,
    DirectoryScan,
    IndexGenConfig,
    OutcomeStatus,
    TargetConfig,
    TargetOverrides,
)
from .naming import transform_file_name
from .patterns import glob_base, is_glob, path_matches
from .scanner import (
    DirectoryScanner,
    FileSystem,
    LocalFileSystem,
    Visit,
    classify,
    is_output_dir,
)
from .statements import build_export_statements, from_path_for


class IndexGenerator:
    """Builds index files for the directories selected by a path or by config targets."""

    def __init__(
        self,
        config: Optional[IndexGenConfig] = None,
        *,
        fs: FileSystem | None = None,
        cwd: Path | None = None,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.fs = fs or LocalFileSystem()
        self.logger = logger or get_logger("generator")
        self.scanner = DirectoryScanner(self.fs, logger=self.logger)
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.dry_run = dry_run

    def generate(
        self,
        folder_path: Optional[str] = None,
        overrides: Optional[TargetOverrides] = None,
    ) -> List[DirectoryOutcome]:
        """Generate index files for ``folder_path`` or, when omitted, for every config target.

        Errors are logged and reported through the returned outcomes, never raised.
        """
        if folder_path:
            return self._generate_for_path(folder_path, overrides)

        if self.config is None or not self.config.targets:
            self.logger.error("No indexgen configuration found in config file.")
            return []

        self.logger.info("Generating index files from config targets...")
        outcomes: List[DirectoryOutcome] = []
        seen: Set[Path] = set()
        for target in self.config.targets:
            for watch_path in target.paths:
                root = self._resolve(glob_base(watch_path))
                if root in seen:
                    continue
                seen.add(root)
                self.logger.info("Processing: %s", watch_path)
                if not self.fs.is_dir(root):
                    self.logger.error("Folder does not exist: %s", root)
                    continue
                outcomes.extend(self.generate_tree(root, None, None, overrides))
        return outcomes

    def _generate_for_path(
        self, folder_path: str, overrides: Optional[TargetOverrides]
    ) -> List[DirectoryOutcome]:
        pattern = folder_path if is_glob(folder_path) else folder_path.rstrip("/") or folder_path
        root = self._resolve(glob_base(pattern))
        if not self.fs.is_dir(root):
            self.logger.error("Folder does not exist: %s", root)
            return []

        if self.config is None:
            self.logger.debug("No config file, running with defaults + CLI options")
        target = resolve_target_config(
            pattern, self.config, overrides, cwd=self.cwd, logger=self.logger
        )
        return self.generate_tree(root, target, pattern, overrides)

    def generate_tree(
        self,
        root: Path,
        target: Optional[TargetConfig],
        pattern: Optional[str],
        overrides: Optional[TargetOverrides] = None,
    ) -> List[DirectoryOutcome]:
        """Process every directory under ``root`` children-first.

        With ``pattern`` set, ``target`` applies to every directory the pattern
        selects. Without it, each directory resolves its own target from the
        loaded config and is selected only when some target matches it.
        """
        outcomes: List[DirectoryOutcome] = []
        produced: Set[Path] = set()
        for visit in self.scanner.walk(root):
            outcome = self._process(visit, target, pattern, overrides, produced)
            if outcome.produced_index and outcome.index_path:
                produced.add(Path(outcome.index_path))
            outcomes.append(outcome)
        return outcomes

    def _process(
        self,
        visit: Visit,
        target: Optional[TargetConfig],
        pattern: Optional[str],
        overrides: Optional[TargetOverrides],
        produced: Set[Path],
    ) -> DirectoryOutcome:
        dir_path = visit.path
        try:
            if visit.error is not None:
                raise visit.error

            config = self._select(dir_path, target, pattern, overrides)
            if config is None:
                self.logger.debug("Pattern not matched, skipping: %s", dir_path)
                return DirectoryOutcome(path=str(dir_path), status=OutcomeStatus.SKIPPED)

            if is_output_dir(dir_path, config.output_file or "index.ts"):
                self.logger.debug("Output folder, skipping: %s", dir_path)
                return DirectoryOutcome(path=str(dir_path), status=OutcomeStatus.SKIPPED)

            scan = classify(dir_path, visit.entries, config, self.fs, known_indexes=tuple(produced))
            if scan.is_empty:
                self.logger.debug("No files or folders to process in %s", dir_path)
                return DirectoryOutcome(path=str(dir_path), status=OutcomeStatus.EMPTY)

            self.logger.debug("Pattern matching folder detected: %s", dir_path)
            content = render_index(scan, config, fs=self.fs, logger=self.logger)
            index_path = dir_path / (config.output_file or "index.ts")

            if self.dry_run:
                return DirectoryOutcome(
                    path=str(dir_path),
                    status=OutcomeStatus.DRY_RUN,
                    index_path=str(index_path),
                    content=content,
                )

            output_dir = index_path.parent
            if output_dir != dir_path and not self.fs.is_dir(output_dir):
                self.logger.info("Creating folder: %s", output_dir)
                self.fs.make_dirs(output_dir)
            self.fs.write_text(index_path, content)
            self.logger.info(
                "%s created successfully (%d files, %d folders)",
                index_path,
                len(scan.component_files),
                len(scan.subfolders),
            )
            return DirectoryOutcome(
                path=str(dir_path),
                status=OutcomeStatus.WRITTEN,
                index_path=str(index_path),
                content=content,
            )
        except (OSError, ValueError) as exc:
            self.logger.error("Directory processing error (%s): %s", dir_path, exc)
            return DirectoryOutcome(path=str(dir_path), status=OutcomeStatus.FAILED, error=str(exc))

    def _select(
        self,
        dir_path: Path,
        target: Optional[TargetConfig],
        pattern: Optional[str],
        overrides: Optional[TargetOverrides],
    ) -> Optional[TargetConfig]:
        relative = relative_to_cwd(str(dir_path), self.cwd)
        if pattern is not None:
            if path_matches(relative, pattern):
                return target
            if os.path.abspath(dir_path) == os.path.abspath(self._resolve(pattern)):
                self.logger.debug("Absolute path matching successful: %s", dir_path)
                return target
            return None

        if self.config is None:
            return None
        matched = match_target(relative, self.config)
        if matched is None:
            return None
        return matched.merged(overrides)

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.cwd / candidate
        return Path(os.path.normpath(candidate))


def render_index(
    scan: DirectoryScan,
    config: TargetConfig,
    *,
    fs: FileSystem | None = None,
    logger: Optional[logging.Logger] = None,
) -> str:
    """Return the index file content for a classified directory."""
    fs = fs or LocalFileSystem()
    log = logger or get_logger("generator")
    dir_path = Path(scan.path)
    lines: List[str] = []

    for file_name in scan.component_files:
        stem = Path(file_name).stem
        transformed = transform_file_name(stem, config.naming_convention)
        log.debug("Processing file: %s (exportStyle: %s)", file_name, config.export_style)
        lines.extend(
            build_export_statements(
                file_name,
                dir_path / file_name,
                from_path_for(file_name, config),
                transformed,
                config,
                read_text=fs.read_text,
                logger=log,
            )
        )

    lines.extend(_subfolder_statements(scan.subfolders))
    return "\n".join(lines) + "\n"


def _subfolder_statements(folders: Iterable[str]) -> List[str]:
    return [f"export * from './{folder}';" for folder in folders]


__all__ = ["IndexGenerator", "render_index"]
