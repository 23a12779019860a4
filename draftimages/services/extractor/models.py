"""Domain models for DraftImage extraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class LiteralValue:
    """Attribute given as a literal: ``id="a"`` or ``id={"a"}``."""

    value: object

    @property
    def text(self) -> str | None:
        value = self.value
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


@dataclass(frozen=True, slots=True)
class OtherExpression:
    """Attribute given as any non-literal expression, e.g. ``id={imageId}``."""

    kind: str

    @property
    def text(self) -> None:
        return None


AttributeValue = Union[LiteralValue, OtherExpression]


@dataclass(slots=True)
class DraftImageRecord:
    """One ``<DraftImage>`` occurrence, shaped like a row of the sheet."""

    id: str | None
    original_url: str | None
    comment: str | None
    document_name: str
    figma_url: str = ""
    design_review: str = ""
    new_url: str = ""
    editor_review: str = ""
    added_to_worksheet: str = ""


__all__ = [
    "AttributeValue",
    "DraftImageRecord",
    "LiteralValue",
    "OtherExpression",
]
