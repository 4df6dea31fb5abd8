"""Generate barrel (index) files that re-export sibling modules."""

from .generator import IndexGenerator
from .models import ExportInfo, IndexGenConfig, TargetConfig, TargetOverrides

__version__ = "0.1.0"

__all__ = ["ExportInfo", "IndexGenConfig", "IndexGenerator", "TargetConfig", "TargetOverrides"]
