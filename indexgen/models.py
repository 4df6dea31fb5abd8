"""Core data models shared across indexgen components."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_OUTPUT_FILE = "index.ts"
DEFAULT_FILE_EXTENSIONS: Tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js")
DEFAULT_EXCLUDES: Tuple[str, ...] = (
    "*.d.ts",
    "*.test.ts",
    "*.test.tsx",
    "*.spec.ts",
    "*.spec.tsx",
    "*.stories.tsx",
)


@dataclass(frozen=True)
class TargetConfig:
    """Effective settings applied to one generation pass over a directory."""

    paths: Tuple[str, ...] = ()
    output_file: str = DEFAULT_OUTPUT_FILE
    file_extensions: Tuple[str, ...] = DEFAULT_FILE_EXTENSIONS
    export_style: str = "auto"
    naming_convention: str = "original"
    from_with_extension: bool = False
    excludes: Tuple[str, ...] = DEFAULT_EXCLUDES

    def merged(self, overrides: "TargetOverrides | None") -> "TargetConfig":
        """Return a copy with every defined override applied."""
        if overrides is None:
            return self
        return replace(self, **overrides.as_dict())


@dataclass
class TargetOverrides:
    """Partial target settings, typically collected from CLI flags."""

    paths: Optional[Tuple[str, ...]] = None
    output_file: Optional[str] = None
    file_extensions: Optional[Tuple[str, ...]] = None
    export_style: Optional[str] = None
    naming_convention: Optional[str] = None
    from_with_extension: Optional[bool] = None
    excludes: Optional[Tuple[str, ...]] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


@dataclass
class IndexGenConfig:
    """Represents the settings loaded from an indexgen config file."""

    targets: List[TargetConfig] = field(default_factory=list)
    log: bool = True
    debug: bool = False
    source: Optional[str] = None


@dataclass
class ExportInfo:
    """Exported symbols detected in a single source file."""

    has_default_export: bool = False
    has_named_exports: bool = False
    named_exports: List[str] = field(default_factory=list)
    type_exports: List[str] = field(default_factory=list)
    default_exports: List[str] = field(default_factory=list)


@dataclass
class DirectoryScan:
    """Eligible entries of one directory."""

    path: str
    component_files: List[str] = field(default_factory=list)
    subfolders: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.component_files and not self.subfolders


class OutcomeStatus(Enum):
    """What happened to a directory during a generation pass."""

    WRITTEN = "written"
    DRY_RUN = "dry-run"
    SKIPPED = "skipped"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class DirectoryOutcome:
    """Typed result for one visited directory."""

    path: str
    status: OutcomeStatus
    index_path: Optional[str] = None
    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def produced_index(self) -> bool:
        return self.status in (OutcomeStatus.WRITTEN, OutcomeStatus.DRY_RUN)
