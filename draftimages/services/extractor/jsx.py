"""Collect ``<DraftImage>`` elements from JSX source text."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Any, Iterable

import esprima
from esprima.error_handler import Error as EsprimaError

from draftimages.core.errors import ExtractionError
from draftimages.core.logger import get_logger

from .models import AttributeValue, DraftImageRecord, LiteralValue, OtherExpression

LOGGER = get_logger()

TAG_NAME = "DraftImage"
ID_ATTRIBUTE = "id"
URL_ATTRIBUTE = "originalUrl"
COMMENT_ATTRIBUTE = "comment"

PARSE_OPTIONS = {"jsx": True, "range": True}


def document_name(path: str) -> str:
    """Return the final segment of a repository path, verbatim."""

    return posixpath.basename(str(path).replace("\\", "/"))


def parse_attribute_value(node: Any) -> AttributeValue:
    """Classify a JSX attribute value node.

    Only string literals and expression containers wrapping a literal carry a
    value; every other form is reported as :class:`OtherExpression`.
    """

    if node is None:
        return OtherExpression(kind="Missing")
    if node.type == "Literal":
        return LiteralValue(node.value)
    if node.type == "JSXExpressionContainer":
        expression = node.expression
        if expression.type == "Literal" and getattr(expression, "regex", None) is None:
            return LiteralValue(expression.value)
        return OtherExpression(kind=expression.type)
    return OtherExpression(kind=node.type)


def read_attributes(opening: Any) -> dict[str, AttributeValue]:
    """Map attribute name to value for one opening element (spreads ignored)."""

    values: dict[str, AttributeValue] = {}
    for attribute in opening.attributes or []:
        if attribute.type != "JSXAttribute" or attribute.name.type != "JSXIdentifier":
            continue
        values[attribute.name.name] = parse_attribute_value(attribute.value)
    return values


def _is_draft_image(node: Any) -> bool:
    return (
        node.type == "JSXOpeningElement"
        and node.name.type == "JSXIdentifier"
        and node.name.name == TAG_NAME
    )


def _text(values: dict[str, AttributeValue], name: str) -> str | None:
    value = values.get(name)
    if value is None:
        return None
    return value.text


def extract_draft_images(source: str, document_path: str) -> list[DraftImageRecord]:
    """Parse JSX source and return one record per ``<DraftImage>``, in source order.

    Raises:
        ExtractionError: If the source cannot be parsed.
    """

    openings: list[Any] = []

    def _collect(node: Any, metadata: Any) -> None:
        if _is_draft_image(node):
            openings.append(node)

    try:
        esprima.parseModule(source, PARSE_OPTIONS, _collect)
    except EsprimaError as exc:
        raise ExtractionError(f"Could not parse {document_path}: {exc}") from exc

    name = document_name(document_path)
    records: list[DraftImageRecord] = []
    for opening in sorted(openings, key=lambda node: node.range[0]):
        values = read_attributes(opening)
        records.append(
            DraftImageRecord(
                id=_text(values, ID_ATTRIBUTE),
                original_url=_text(values, URL_ATTRIBUTE),
                comment=_text(values, COMMENT_ATTRIBUTE),
                document_name=name,
            )
        )
    return records


def extract_from_files(
    paths: Iterable[str],
    *,
    root: str | Path | None = None,
    logger: logging.Logger | None = None,
) -> list[DraftImageRecord]:
    """Extract records from every changed file, in file order.

    Paths that no longer exist (deleted by the push) are skipped.
    """

    log = logger or LOGGER
    base = Path(root) if root is not None else Path.cwd()
    records: list[DraftImageRecord] = []
    for path in paths:
        full_path = base / path
        if not full_path.is_file():
            log.warning("extractor.skip_missing path=%s", path)
            continue
        source = full_path.read_text(encoding="utf-8")
        found = extract_draft_images(source, path)
        log.info("extractor.scanned path=%s draft_images=%d", path, len(found))
        records.extend(found)
    return records


__all__ = [
    "COMMENT_ATTRIBUTE",
    "ID_ATTRIBUTE",
    "TAG_NAME",
    "URL_ATTRIBUTE",
    "document_name",
    "extract_draft_images",
    "extract_from_files",
    "parse_attribute_value",
    "read_attributes",
]
