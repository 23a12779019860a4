"""DraftImage metadata extraction from JSX sources."""

from .jsx import document_name, extract_draft_images, extract_from_files
from .models import DraftImageRecord, LiteralValue, OtherExpression

__all__ = [
    "DraftImageRecord",
    "LiteralValue",
    "OtherExpression",
    "document_name",
    "extract_draft_images",
    "extract_from_files",
]
