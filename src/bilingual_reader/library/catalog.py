"""
Book catalog

Describes each book's source artifacts and structure, segments books on
first use and answers the reading app's lookups: chapter lists, single
chapters by absolute number, and vocabulary for a chapter-qualified
paragraph id.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, ValidationError

from bilingual_reader.errors import MalformedInputError
from bilingual_reader.ingest.loader import load_bilingual, load_vocabulary, read_json
from bilingual_reader.models.book import BilingualBook, VocabularyBook
from bilingual_reader.models.chapter import (
    ChapterRecord,
    PartitionResult,
    SectionDescriptor,
    SegmentationResult,
)
from bilingual_reader.models.diagnostics import Diagnostic
from bilingual_reader.models.vocabulary import KeyTerm
from bilingual_reader.segment.keys import parse_paragraph_key
from bilingual_reader.segment.markers import MarkerVocabulary, resolve_structure, scan_markers
from bilingual_reader.segment.ranges import segment_by_ranges
from bilingual_reader.vocabulary.partition import lookup_key_terms, partition_annotations

logger = logging.getLogger(__name__)


class MarkerStructure(BaseModel):
    """Chapters delimited by sentinel paragraphs."""

    kind: Literal["markers"] = "markers"
    markers: dict
    # part -> chapter count, or a plain chapter count; None scans instead
    expected: dict[int, int] | int | None = None

    def vocabulary(self) -> MarkerVocabulary:
        return MarkerVocabulary.from_config(self.markers)


class RangeStructure(BaseModel):
    """Sections delimited by paragraph-id intervals."""

    kind: Literal["ranges"] = "ranges"
    sections: list[SectionDescriptor]


class BookConfig(BaseModel):
    id: str
    title: str
    author: str = ""
    bilingual: Path
    vocabulary: Path | None = None
    structure: Annotated[MarkerStructure | RangeStructure, Field(discriminator="kind")]


@dataclass
class SegmentedBook:
    book: BilingualBook
    segmentation: SegmentationResult
    partition: PartitionResult | None = None
    vocabulary: VocabularyBook | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


def segment_book(config: BookConfig, base_dir: Path | None = None) -> SegmentedBook:
    """Load, segment and (when configured) partition vocabulary for one book."""
    base_dir = base_dir or Path(".")
    book, diagnostics = load_bilingual(base_dir / config.bilingual)
    segmentation = segment(book, config.structure, config.id)
    diagnostics.extend(segmentation.diagnostics)

    vocabulary = partition = None
    if config.vocabulary is not None:
        vocabulary, vocab_diagnostics = load_vocabulary(base_dir / config.vocabulary)
        partition = partition_annotations(segmentation.paragraph_map, vocabulary.vocabulary)
        diagnostics.extend(vocab_diagnostics)
        diagnostics.extend(partition.diagnostics)

    logger.info(
        "Segmented %s into %d chapters (%d diagnostics)",
        config.id,
        len(segmentation.chapters),
        len(diagnostics),
    )
    return SegmentedBook(book, segmentation, partition, vocabulary, diagnostics)


def segment(
    book: BilingualBook, structure: MarkerStructure | RangeStructure, book_id: str
) -> SegmentationResult:
    """Dispatch to the segmenter the structure calls for."""
    if isinstance(structure, RangeStructure):
        return segment_by_ranges(book.paragraphs, structure.sections, book_id)
    vocabulary = structure.vocabulary()
    if structure.expected is None:
        return scan_markers(book.paragraphs, vocabulary, book_id)
    return resolve_structure(book.paragraphs, vocabulary, structure.expected, book_id)


class BookCatalog:
    """
    Lookup layer over a set of configured books.

    Usage:
        catalog = BookCatalog.from_file(Path("data/books.json"))
        chapters = catalog.get_chapter_metadata("8")
        chapter = catalog.get_chapter("8", 10)
    """

    def __init__(self, books: list[BookConfig], base_dir: Path | None = None):
        self.books = {b.id: b for b in books}
        self.base_dir = base_dir or Path(".")
        self._segmented: dict[str, SegmentedBook] = {}

    @classmethod
    def from_file(cls, path: Path) -> "BookCatalog":
        """Load ``{"books": [...]}``; relative artifact paths resolve against the file's directory."""
        data = read_json(path)
        if not isinstance(data, Mapping) or not isinstance(data.get("books"), list):
            raise MalformedInputError(f"{path}: expected an object with a 'books' array")
        try:
            books = [BookConfig.model_validate(b) for b in data["books"]]
        except ValidationError as exc:
            raise MalformedInputError(f"{path}: {exc}") from exc
        return cls(books, base_dir=path.parent)

    def segmented(self, book_id: str) -> SegmentedBook | None:
        """Segment a book once and cache the result."""
        if book_id in self._segmented:
            return self._segmented[book_id]
        config = self.books.get(book_id)
        if config is None:
            logger.error("Book config not found for ID: %s", book_id)
            return None
        result = segment_book(config, self.base_dir)
        self._segmented[book_id] = result
        return result

    def get_chapter_metadata(self, book_id: str) -> list[ChapterRecord]:
        """All chapters of a book without their paragraphs."""
        segmented = self.segmented(book_id)
        if segmented is None:
            return []
        return [c.metadata() for c in segmented.segmentation.chapters]

    def get_chapter(self, book_id: str, sequence_number: int) -> ChapterRecord | None:
        """A chapter with content, by its absolute (1-based) number."""
        segmented = self.segmented(book_id)
        if segmented is None:
            return None
        for chapter in segmented.segmentation.chapters:
            if chapter.sequence_number == sequence_number:
                return chapter
        logger.error("Chapter %d not found for book %s", sequence_number, book_id)
        return None

    def get_vocabulary_for_paragraph(self, qualified_id: str) -> list[KeyTerm]:
        """
        Key terms for ``book-part-chapter-id`` (or ``book-chapter-id``).

        Book ids are matched as prefixes, longest first, so ids such as
        ``little-prince`` resolve correctly.
        """
        candidates = sorted(
            (b for b in self.books if qualified_id.startswith(f"{b}-")), key=len, reverse=True
        )
        for book_id in candidates:
            segmented = self.segmented(book_id)
            has_parts = any(c.part is not None for c in segmented.segmentation.chapters)
            location = parse_paragraph_key(qualified_id, book_id, has_parts)
            if location is None:
                continue
            if segmented.partition is None:
                return []
            bundle = segmented.partition.bundles.get(location.chapter_key, [])
            return lookup_key_terms(bundle, location.paragraph_id)

        logger.warning("Invalid paragraph ID format: %s", qualified_id)
        return []
