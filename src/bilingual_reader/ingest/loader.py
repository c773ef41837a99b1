"""Load translation-pipeline JSON artifacts."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from bilingual_reader.config import get_settings
from bilingual_reader.errors import MalformedInputError
from bilingual_reader.models.book import BilingualBook, BookInfo, LanguagePair, VocabularyBook
from bilingual_reader.models.diagnostics import Diagnostic, DiagnosticKind, report

logger = logging.getLogger(__name__)

BookT = TypeVar("BookT", bound=BookInfo)


def load_bilingual(source: Path | str | Mapping[str, Any]) -> tuple[BilingualBook, list[Diagnostic]]:
    """
    Load a paragraph artifact from a path or an already-parsed mapping.

    A missing ``paragraphs`` array yields an empty book and a
    ``malformed_input`` diagnostic; anything structurally wrong raises
    ``MalformedInputError``.
    """
    return _load(source, "paragraphs", BilingualBook)


def load_vocabulary(source: Path | str | Mapping[str, Any]) -> tuple[VocabularyBook, list[Diagnostic]]:
    """Load a vocabulary artifact; same contract as ``load_bilingual``."""
    return _load(source, "vocabulary", VocabularyBook)


def read_json(path: Path) -> Any:
    """Read a JSON file, turning decode problems into ``MalformedInputError``."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise MalformedInputError(f"{path} is not valid JSON: {exc}") from exc


def _load(
    source: Path | str | Mapping[str, Any], array_field: str, model: type[BookT]
) -> tuple[BookT, list[Diagnostic]]:
    if isinstance(source, (str, Path)):
        label = str(source)
        data = read_json(Path(source))
    else:
        label = "<mapping>"
        data = source

    if not isinstance(data, Mapping):
        raise MalformedInputError(f"{label}: expected a JSON object, got {type(data).__name__}")

    diagnostics: list[Diagnostic] = []
    data = dict(data)
    if array_field not in data:
        report(
            diagnostics,
            logger,
            DiagnosticKind.MALFORMED_INPUT,
            f"{label}: no '{array_field}' array found",
        )
        data[array_field] = []
    elif not isinstance(data[array_field], list):
        raise MalformedInputError(f"{label}: '{array_field}' must be an array")

    if data.get("language") is None:
        settings = get_settings()
        data["language"] = LanguagePair(
            source=settings.source_language, target=settings.target_language
        )

    try:
        book = model.model_validate(data)
    except ValidationError as exc:
        raise MalformedInputError(f"{label}: {exc}") from exc

    logger.info("Loaded %d %s from %s", len(getattr(book, array_field)), array_field, label)
    return book, diagnostics
