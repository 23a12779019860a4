"""Custom exceptions used across draftimages."""


class DraftImagesError(Exception):
    """Base error for the application."""


class ConfigError(DraftImagesError):
    """Configuration related error."""


class ChangeSetError(DraftImagesError):
    """Raised when the changed files between two revisions cannot be listed."""


class ExtractionError(DraftImagesError):
    """Raised when a source file cannot be parsed."""


class SchemaMismatchError(DraftImagesError):
    """Raised when the sheet header does not match the expected columns."""
