"""Diagnostics reported alongside segmentation results."""

import logging
from enum import Enum

from pydantic import BaseModel


class DiagnosticKind(str, Enum):
    MISSING_MARKER = "missing_marker"
    UNEXPECTED_MARKER = "unexpected_marker"
    UNASSIGNED_PARAGRAPH = "unassigned_paragraph"
    ORPHAN_ANNOTATION = "orphan_annotation"
    MALFORMED_INPUT = "malformed_input"


class Diagnostic(BaseModel):
    """A recovered data-quality problem."""

    kind: DiagnosticKind
    message: str
    paragraph_id: int | str | None = None
    chapter_key: str | None = None


def report(
    diagnostics: list[Diagnostic],
    logger: logging.Logger,
    kind: DiagnosticKind,
    message: str,
    *,
    paragraph_id: int | str | None = None,
    chapter_key: str | None = None,
) -> None:
    """Record a diagnostic and log it as a warning."""
    logger.warning(message)
    diagnostics.append(
        Diagnostic(
            kind=kind,
            message=message,
            paragraph_id=paragraph_id,
            chapter_key=chapter_key,
        )
    )
