"""Distribute vocabulary annotations into chapter bundles."""

import logging
from collections.abc import Iterable, Mapping

from bilingual_reader.models.chapter import PartitionResult
from bilingual_reader.models.diagnostics import Diagnostic, DiagnosticKind, report
from bilingual_reader.models.paragraph import id_key
from bilingual_reader.models.vocabulary import AnnotationRecord, KeyTerm

logger = logging.getLogger(__name__)


def partition_annotations(
    paragraph_map: Mapping[str, str],
    annotations: Iterable[AnnotationRecord],
) -> PartitionResult:
    """
    Bundle annotations by the chapter that owns their paragraph.

    ``paragraph_map`` is the map produced by segmentation, so vocabulary
    always lands where its paragraph did. Annotations for paragraphs that
    were dropped during segmentation are dropped too and reported.
    """
    bundles: dict[str, list[AnnotationRecord]] = {}
    diagnostics: list[Diagnostic] = []

    for annotation in annotations:
        key = paragraph_map.get(id_key(annotation.id))
        if key is None:
            report(
                diagnostics,
                logger,
                DiagnosticKind.ORPHAN_ANNOTATION,
                f"Vocabulary for paragraph {annotation.id} has no chapter",
                paragraph_id=annotation.id,
            )
            continue
        bundles.setdefault(key, []).append(annotation)

    return PartitionResult(bundles=bundles, diagnostics=diagnostics)


def lookup_key_terms(
    bundle: Iterable[AnnotationRecord], paragraph_id: int | str
) -> list[KeyTerm]:
    """Key terms for one paragraph of a bundle (empty if it has none)."""
    wanted = id_key(paragraph_id)
    for annotation in bundle:
        if id_key(annotation.id) == wanted:
            return list(annotation.key_words)
    return []
