"""Source analyzers used while building index files."""

from .exports import analyze_exports, analyze_file

__all__ = ["analyze_exports", "analyze_file"]
