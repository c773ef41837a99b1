"""Data models for paragraphs, chapters and vocabulary."""

from bilingual_reader.models.book import BilingualBook, LanguagePair, VocabularyBook
from bilingual_reader.models.chapter import (
    ChapterRecord,
    PartitionResult,
    SectionDescriptor,
    SegmentationResult,
)
from bilingual_reader.models.diagnostics import Diagnostic, DiagnosticKind
from bilingual_reader.models.paragraph import ChapterParagraph, ParagraphRecord
from bilingual_reader.models.vocabulary import AnnotationRecord, KeyTerm

__all__ = [
    "AnnotationRecord",
    "BilingualBook",
    "ChapterParagraph",
    "ChapterRecord",
    "Diagnostic",
    "DiagnosticKind",
    "KeyTerm",
    "LanguagePair",
    "ParagraphRecord",
    "PartitionResult",
    "SectionDescriptor",
    "SegmentationResult",
    "VocabularyBook",
]
