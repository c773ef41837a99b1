"""Id-range segmentation for books whose pipeline emitted no sentinels."""

import logging
from collections.abc import Iterable, Sequence

from bilingual_reader.models.chapter import ChapterRecord, SectionDescriptor, SegmentationResult
from bilingual_reader.models.diagnostics import Diagnostic, DiagnosticKind, report
from bilingual_reader.models.paragraph import ChapterParagraph, ParagraphRecord, id_key
from bilingual_reader.segment.keys import chapter_key, paragraph_key

logger = logging.getLogger(__name__)


def segment_by_ranges(
    paragraphs: Iterable[ParagraphRecord],
    descriptors: Sequence[SectionDescriptor],
    book_id: str = "book",
) -> SegmentationResult:
    """
    Put each paragraph in the first section whose inclusive id range holds it.

    One section is emitted per descriptor, in descriptor order, even when it
    ends up empty. Paragraphs with non-integer ids or ids outside every range
    are dropped and reported. Overlap between descriptors is not checked here;
    see ``validate_descriptors``.
    """
    diagnostics: list[Diagnostic] = []
    members: list[list[ParagraphRecord]] = [[] for _ in descriptors]

    for paragraph in paragraphs:
        numeric_id = _numeric_id(paragraph.id)
        index = None
        if numeric_id is not None:
            index = next(
                (i for i, d in enumerate(descriptors) if d.contains(numeric_id)), None
            )
        if index is None:
            report(
                diagnostics,
                logger,
                DiagnosticKind.UNASSIGNED_PARAGRAPH,
                f"Paragraph {paragraph.id} ({paragraph.source[:30]!r}) "
                "is not in any section range",
                paragraph_id=paragraph.id,
            )
            continue
        members[index].append(paragraph)

    chapters = []
    paragraph_map: dict[str, str] = {}
    for number, (descriptor, section) in enumerate(zip(descriptors, members), start=1):
        key = chapter_key(book_id, number)
        chapters.append(
            ChapterRecord(
                chapter_key=key,
                sequence_number=number,
                title=descriptor.title,
                chapter=number,
                paragraphs=[
                    ChapterParagraph(
                        id=paragraph_key(key, p.id),
                        original_id=p.id,
                        source=p.source,
                        translation=p.translation,
                        image=p.image,
                    )
                    for p in section
                ],
            )
        )
        paragraph_map.update({id_key(p.id): key for p in section})
        logger.debug("Section %r holds %d paragraphs", descriptor.title, len(section))

    return SegmentationResult(
        chapters=chapters, paragraph_map=paragraph_map, diagnostics=diagnostics
    )


def validate_descriptors(descriptors: Sequence[SectionDescriptor]) -> list[str]:
    """Return human-readable problems with a descriptor list (empty when valid)."""
    problems = []
    for i, descriptor in enumerate(descriptors):
        if descriptor.end_id is not None and descriptor.end_id < descriptor.start_id:
            problems.append(
                f"{descriptor.title!r}: end_id {descriptor.end_id} is before start_id {descriptor.start_id}"
            )
        if descriptor.end_id is None and i != len(descriptors) - 1:
            problems.append(f"{descriptor.title!r}: only the last section may be open-ended")

    ordered = sorted(descriptors, key=lambda d: d.start_id)
    for current, following in zip(ordered, ordered[1:]):
        if current.end_id is None or current.end_id >= following.start_id:
            problems.append(f"{current.title!r} overlaps {following.title!r}")
        elif current.end_id + 1 < following.start_id:
            problems.append(
                f"Ids {current.end_id + 1}-{following.start_id - 1} "
                f"between {current.title!r} and {following.title!r} are not covered"
            )
    return problems


def _numeric_id(paragraph_id: int | str) -> int | None:
    if isinstance(paragraph_id, int):
        return paragraph_id
    text = paragraph_id.strip()
    if text.lstrip("-").isdigit():
        return int(text)
    return None
