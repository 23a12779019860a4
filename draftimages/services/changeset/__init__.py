"""Changed-file discovery between two revisions."""

from .resolver import filter_by_extension, list_changed_files, resolve_changed_files

__all__ = ["filter_by_extension", "list_changed_files", "resolve_changed_files"]
