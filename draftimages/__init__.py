"""Sync DraftImage elements from changed JSX files into the editorial sheet."""

__version__ = "0.1.0"
