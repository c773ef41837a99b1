"""
Marker-based chapter segmentation.

Translation pipelines keep structural headings ("Part I", "Chapter One",
"XIV") as ordinary paragraphs. A paragraph is a sentinel only when its whole
source text equals a known marker; sentinels delimit chapters and are never
chapter content.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import partial, reduce
from typing import NamedTuple

from bilingual_reader.errors import StructureError
from bilingual_reader.models.chapter import ChapterRecord, SegmentationResult
from bilingual_reader.models.diagnostics import Diagnostic, DiagnosticKind, report
from bilingual_reader.models.paragraph import ChapterParagraph, ParagraphRecord, id_key
from bilingual_reader.segment.keys import chapter_key, chapter_title, paragraph_key
from bilingual_reader.segment.numerals import NumeralStyle, coerce_style, parse_numeral

logger = logging.getLogger(__name__)


class MarkerKind(str, Enum):
    PART = "part"
    CHAPTER = "chapter"


class Marker(NamedTuple):
    kind: MarkerKind
    ordinal: int


@dataclass(frozen=True)
class NumeralRule:
    """Recognizes ``"{prefix} {numeral}"`` (or a bare numeral when prefix is empty)."""

    kind: MarkerKind
    style: NumeralStyle
    prefix: str = ""

    def match(self, text: str) -> Marker | None:
        if self.prefix:
            head = f"{self.prefix} "
            if not text.startswith(head):
                return None
            text = text[len(head):]
        ordinal = parse_numeral(text, self.style)
        if ordinal is None:
            return None
        return Marker(self.kind, ordinal)


@dataclass
class MarkerVocabulary:
    """Exact sentinel strings and numeral rules that mark part/chapter starts.

    Explicit sentinels are checked before rules.
    """

    sentinels: dict[str, Marker] = field(default_factory=dict)
    rules: list[NumeralRule] = field(default_factory=list)

    @classmethod
    def from_pairs(
        cls,
        chapters: Mapping[str, int] | Iterable[tuple[str, int]] = (),
        parts: Mapping[str, int] | Iterable[tuple[str, int]] = (),
    ) -> "MarkerVocabulary":
        """Build from ``(sentinel_text, ordinal)`` pairs."""
        sentinels: dict[str, Marker] = {}
        for kind, pairs in ((MarkerKind.PART, parts), (MarkerKind.CHAPTER, chapters)):
            items = pairs.items() if isinstance(pairs, Mapping) else pairs
            for text, ordinal in items:
                if text in sentinels:
                    raise StructureError(f"Sentinel {text!r} is defined twice")
                sentinels[text] = Marker(kind, int(ordinal))
        return cls(sentinels=sentinels)

    @classmethod
    def numbered(
        cls,
        chapter_style: NumeralStyle | str,
        chapter_prefix: str = "Chapter",
        part_style: NumeralStyle | str | None = None,
        part_prefix: str = "Part",
    ) -> "MarkerVocabulary":
        """
        Build from numeral rules.

        ``numbered("words", part_style="roman")`` recognizes "Part II" and
        "Chapter Fourteen"; ``numbered("roman", chapter_prefix="")`` recognizes
        bare "XIV".
        """
        rules = []
        if part_style is not None:
            rules.append(NumeralRule(MarkerKind.PART, coerce_style(part_style), part_prefix))
        rules.append(NumeralRule(MarkerKind.CHAPTER, coerce_style(chapter_style), chapter_prefix))
        return cls(rules=rules)

    @classmethod
    def from_config(cls, config: Mapping) -> "MarkerVocabulary":
        """
        Build from a JSON-style description.

        Either ``{"chapters": {"Chapter One": 1, ...}, "parts": {...}}`` or
        ``{"chapters": {"style": "words", "prefix": "Chapter"},
        "parts": {"style": "roman", "prefix": "Part"}}``.
        """
        chapters = config.get("chapters")
        parts = config.get("parts")
        if not isinstance(chapters, Mapping):
            raise StructureError("Marker config needs a 'chapters' mapping")
        if parts is not None and not isinstance(parts, Mapping):
            raise StructureError("Marker config 'parts' must be a mapping")

        if "style" in chapters:
            if parts is not None and "style" not in parts:
                raise StructureError("Cannot mix numbered chapters with explicit part sentinels")
            return cls.numbered(
                chapter_style=chapters["style"],
                chapter_prefix=chapters.get("prefix", "Chapter"),
                part_style=parts["style"] if parts else None,
                part_prefix=parts.get("prefix", "Part") if parts else "Part",
            )
        return cls.from_pairs(chapters=chapters, parts=parts or {})

    @property
    def has_parts(self) -> bool:
        return any(m.kind is MarkerKind.PART for m in self.sentinels.values()) or any(
            r.kind is MarkerKind.PART for r in self.rules
        )

    def classify(self, text: str) -> Marker | None:
        """Return the marker ``text`` denotes, or None for prose."""
        marker = self.sentinels.get(text)
        if marker is not None:
            return marker
        for rule in self.rules:
            marker = rule.match(text)
            if marker is not None:
                return marker
        return None


# ============================================================================
# Sequential scan
# ============================================================================


class _ScanState(NamedTuple):
    part: int | None
    chapter: int | None
    buckets: dict[tuple[int | None, int], list[ParagraphRecord]]
    diagnostics: list[Diagnostic]


def _scan_step(
    vocabulary: MarkerVocabulary, state: _ScanState, paragraph: ParagraphRecord
) -> _ScanState:
    marker = vocabulary.classify(paragraph.source)

    if marker is not None and marker.kind is MarkerKind.PART:
        logger.debug("Part %d starts at paragraph %s", marker.ordinal, paragraph.id)
        return state._replace(part=marker.ordinal, chapter=None)

    if marker is not None:
        if vocabulary.has_parts and state.part is None:
            report(
                state.diagnostics,
                logger,
                DiagnosticKind.MISSING_MARKER,
                f"Chapter marker {paragraph.source!r} (paragraph {paragraph.id}) "
                "appears before any part marker",
                paragraph_id=paragraph.id,
            )
            return state
        state.buckets.setdefault((state.part, marker.ordinal), [])
        logger.debug("Chapter %d starts at paragraph %s", marker.ordinal, paragraph.id)
        return state._replace(chapter=marker.ordinal)

    if state.chapter is None:
        report(
            state.diagnostics,
            logger,
            DiagnosticKind.UNASSIGNED_PARAGRAPH,
            f"Paragraph {paragraph.id} precedes the first chapter marker"
            + (f" of part {state.part}" if state.part is not None else ""),
            paragraph_id=paragraph.id,
        )
        return state

    state.buckets[(state.part, state.chapter)].append(paragraph)
    return state


def scan_markers(
    paragraphs: Iterable[ParagraphRecord],
    vocabulary: MarkerVocabulary,
    book_id: str = "book",
) -> SegmentationResult:
    """
    Segment a paragraph stream by scanning for sentinels in reading order.

    A part sentinel starts a new part and clears the current chapter; a
    chapter sentinel opens ``(part, chapter)``. Every other paragraph joins the
    open chapter, or is dropped (and reported) when no chapter is open.
    Chapters come out in first-appearance order with contiguous sequence
    numbers.
    """
    initial = _ScanState(part=None, chapter=None, buckets={}, diagnostics=[])
    state = reduce(partial(_scan_step, vocabulary), paragraphs, initial)

    chapters = [
        _make_chapter(book_id, sequence, part, chapter, members)
        for sequence, ((part, chapter), members) in enumerate(state.buckets.items(), start=1)
    ]
    return SegmentationResult(
        chapters=chapters,
        paragraph_map=_paragraph_map(chapters),
        diagnostics=state.diagnostics,
    )


# ============================================================================
# Expected-structure resolution
# ============================================================================


def resolve_structure(
    paragraphs: Sequence[ParagraphRecord],
    vocabulary: MarkerVocabulary,
    expected: Mapping[int, int] | int,
    book_id: str = "book",
) -> SegmentationResult:
    """
    Slice chapters for a book whose chapter counts are known up front.

    ``expected`` maps part number to chapter count (``{1: 9, 2: 15, 3: 11}``),
    or is a plain chapter count for books without parts. Each chapter runs
    from its start sentinel to the next sentinel or the end of its part.
    Chapters (and later parts) whose start sentinel is missing are skipped and
    reported; the first part starts at the top of the stream when its own
    sentinel is missing.
    """
    markers = [vocabulary.classify(p.source) for p in paragraphs]
    boundaries = [i for i, m in enumerate(markers) if m is not None]
    diagnostics: list[Diagnostic] = []
    chapters: list[ChapterRecord] = []
    used: set[int] = set()

    for part, count, start, end in _part_ranges(markers, expected, book_id, diagnostics, used):
        for number in range(1, count + 1):
            key = chapter_key(book_id, number, part)
            wanted = Marker(MarkerKind.CHAPTER, number)
            position = next((i for i in range(start, end) if markers[i] == wanted), None)
            if position is None:
                report(
                    diagnostics,
                    logger,
                    DiagnosticKind.MISSING_MARKER,
                    f"No start marker for {chapter_title(number, part)}; skipping {key}",
                    chapter_key=key,
                )
                continue
            used.add(position)
            stop = next((b for b in boundaries if b > position), len(paragraphs))
            members = paragraphs[position + 1:min(stop, end)]
            chapters.append(
                _make_chapter(book_id, len(chapters) + 1, part, number, members)
            )

    paragraph_map = _paragraph_map(chapters)
    for position, (paragraph, marker) in enumerate(zip(paragraphs, markers)):
        if marker is not None and position not in used:
            report(
                diagnostics,
                logger,
                DiagnosticKind.UNEXPECTED_MARKER,
                f"Marker {paragraph.source!r} (paragraph {paragraph.id}) "
                "is not part of the expected structure",
                paragraph_id=paragraph.id,
            )
        elif marker is None and id_key(paragraph.id) not in paragraph_map:
            report(
                diagnostics,
                logger,
                DiagnosticKind.UNASSIGNED_PARAGRAPH,
                f"Paragraph {paragraph.id} is outside every resolved chapter",
                paragraph_id=paragraph.id,
            )

    return SegmentationResult(
        chapters=chapters, paragraph_map=paragraph_map, diagnostics=diagnostics
    )


def _part_ranges(
    markers: list[Marker | None],
    expected: Mapping[int, int] | int,
    book_id: str,
    diagnostics: list[Diagnostic],
    used: set[int],
) -> list[tuple[int | None, int, int, int]]:
    """
    Return ``(part, chapter_count, start, end)`` for every part that can be located.

    Positions of the part markers that were found are added to ``used``.
    """
    total = len(markers)
    if isinstance(expected, int):
        return [(None, expected, 0, total)]

    part_positions = [i for i, m in enumerate(markers) if m is not None and m.kind is MarkerKind.PART]
    ranges = []
    cursor = 0
    for index, (part, count) in enumerate(sorted(expected.items())):
        wanted = Marker(MarkerKind.PART, part)
        found = next((i for i in range(cursor, total) if markers[i] == wanted), None)
        if found is None and index > 0:
            report(
                diagnostics,
                logger,
                DiagnosticKind.MISSING_MARKER,
                f"No marker for part {part}; skipping its {count} chapters",
                chapter_key=f"{book_id}-{part}",
            )
            continue
        if found is not None:
            used.add(found)
        start = found + 1 if found is not None else 0
        end = next((i for i in part_positions if i >= start), total)
        ranges.append((part, count, start, end))
        cursor = start
    return ranges


def _make_chapter(
    book_id: str,
    sequence: int,
    part: int | None,
    chapter: int,
    members: Iterable[ParagraphRecord],
) -> ChapterRecord:
    key = chapter_key(book_id, chapter, part)
    return ChapterRecord(
        chapter_key=key,
        sequence_number=sequence,
        title=chapter_title(chapter, part),
        part=part,
        chapter=chapter,
        paragraphs=[
            ChapterParagraph(
                id=paragraph_key(key, p.id),
                original_id=p.id,
                source=p.source,
                translation=p.translation,
                image=p.image,
            )
            for p in members
        ],
    )


def _paragraph_map(chapters: Iterable[ChapterRecord]) -> dict[str, str]:
    return {
        id_key(p.original_id): chapter.chapter_key
        for chapter in chapters
        for p in chapter.paragraphs
    }
