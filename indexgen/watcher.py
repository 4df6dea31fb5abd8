"""Watch mode: regenerate index files when source files change.

Uses watchdog for cross-platform file system monitoring. Every relevant
event triggers a full regeneration for the watched path; events that arrive
while a regeneration is running are coalesced into one follow-up run.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import relative_to_cwd, resolve_target_config
from .generator import IndexGenerator
from .logging import get_logger
from .models import TargetOverrides
from .patterns import glob_base, is_glob, normalize_path, path_matches


@dataclass
class WatchSpec:
    """One watched path: the directory observed and the events it reacts to."""

    watch_path: str
    base_dir: Path
    output_file: str
    pattern: Optional[str] = None
    regenerate_path: Optional[str] = None

    def is_relevant(self, file_path: Path, cwd: Path) -> bool:
        if file_path.name.endswith(".d.ts") or self.is_output(file_path):
            return False
        if any(part.startswith(".") for part in _parts_below(file_path, self.base_dir)):
            return False
        if self.pattern is None:
            return True
        relative_dir = relative_to_cwd(str(file_path.parent), cwd)
        return path_matches(relative_dir, self.pattern)

    def is_output(self, file_path: Path) -> bool:
        """Return True when ``file_path`` is an index file this tool writes."""
        relative = "/".join(_parts_below(file_path, self.base_dir))
        output = normalize_path(self.output_file)
        return relative == output or relative.endswith(f"/{output}")


def _parts_below(file_path: Path, base_dir: Path) -> tuple[str, ...]:
    try:
        return file_path.relative_to(base_dir).parts
    except ValueError:
        return (file_path.name,)


@dataclass
class _SingleFlight:
    """At most one regeneration in flight per watched path; later events coalesce."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    running: bool = False
    pending: bool = False

    def run(self, action: Callable[[], None]) -> None:
        with self.lock:
            if self.running:
                self.pending = True
                return
            self.running = True
        try:
            while True:
                action()
                with self.lock:
                    if not self.pending:
                        self.running = False
                        return
                    self.pending = False
        except BaseException:
            with self.lock:
                self.running = False
                self.pending = False
            raise


class IndexEventHandler(FileSystemEventHandler):
    """Forwards relevant file events for one :class:`WatchSpec` to a callback."""

    def __init__(
        self,
        spec: WatchSpec,
        on_change: Callable[[WatchSpec, str, Path], None],
        *,
        cwd: Path,
    ) -> None:
        super().__init__()
        self.spec = spec
        self.on_change = on_change
        self.cwd = cwd

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle("added", event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle("changed", event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle("deleted", event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle("deleted", event.src_path)
            self._handle("added", event.dest_path)

    def _handle(self, kind: str, raw_path: str | bytes) -> None:
        file_path = Path(os.fsdecode(raw_path))
        if not self.spec.is_relevant(file_path, self.cwd):
            return
        self.on_change(self.spec, kind, file_path)


class Watcher:
    """Runs the generation pipeline again whenever a watched tree changes."""

    def __init__(
        self,
        generator: IndexGenerator,
        overrides: Optional[TargetOverrides] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.generator = generator
        self.overrides = overrides
        self.logger = logger or get_logger("watcher")
        self.specs: List[WatchSpec] = []
        self._guards: dict[str, _SingleFlight] = {}
        self._observer: Optional[Observer] = None

    def build_specs(self, folder_paths: Optional[Sequence[str]] = None) -> List[WatchSpec]:
        """Return watch specs for ``folder_paths`` or, when omitted, for every config target path."""
        config = self.generator.config
        if folder_paths:
            return [self._spec_for(path) for path in folder_paths]

        if config is None or not config.targets:
            self.logger.error("No indexgen configuration found in config file.")
            return []

        specs: List[WatchSpec] = []
        for target in config.targets:
            for watch_path in target.paths:
                specs.append(self._spec_for(watch_path))
        return specs

    def _spec_for(self, watch_path: str) -> WatchSpec:
        target = resolve_target_config(
            watch_path,
            self.generator.config,
            self.overrides,
            cwd=self.generator.cwd,
            logger=self.logger,
        )
        pattern: Optional[str] = None
        base = watch_path.rstrip("/") or watch_path
        if is_glob(watch_path):
            base = glob_base(watch_path)
            pattern = watch_path
            self.logger.debug("Converting to watch glob pattern: %s -> %s", watch_path, base)
        base_dir = Path(base)
        if not base_dir.is_absolute():
            base_dir = self.generator.cwd / base_dir
        return WatchSpec(
            watch_path=watch_path,
            base_dir=base_dir,
            output_file=target.output_file or "index.ts",
            pattern=pattern,
            regenerate_path=watch_path,
        )

    def handle_change(self, spec: WatchSpec, kind: str, file_path: Path) -> None:
        """Regenerate indexes for ``spec`` after a file event."""
        self.logger.info("File %s: %s (%s)", kind, file_path.name, spec.watch_path)
        guard = self._guards.setdefault(spec.watch_path, _SingleFlight())
        guard.run(lambda: self.generator.generate(spec.regenerate_path, self.overrides))

    def start(self, folder_paths: Optional[Sequence[str]] = None) -> bool:
        """Schedule observers; returns False when nothing could be watched."""
        self.specs = self.build_specs(folder_paths)
        observer = Observer()
        scheduled = 0
        for spec in self.specs:
            if not spec.base_dir.is_dir():
                self.logger.error("Watch root not found: %s", spec.base_dir)
                continue
            handler = IndexEventHandler(spec, self.handle_change, cwd=self.generator.cwd)
            observer.schedule(handler, str(spec.base_dir), recursive=True)
            self.logger.info("Starting file change detection: %s", spec.watch_path)
            scheduled += 1

        if not scheduled:
            return False
        observer.start()
        self._observer = observer
        return True

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=2)
            self._observer = None
        self.logger.info("Stopping watch mode...")

    def run_forever(
        self, folder_paths: Optional[Sequence[str]] = None, *, poll_interval: float = 1.0
    ) -> int:
        """Watch until interrupted; returns the process exit status."""
        if not self.start(folder_paths):
            return 0
        try:
            while True:
                time.sleep(poll_interval)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
        return 0


__all__ = ["IndexEventHandler", "WatchSpec", "Watcher"]
