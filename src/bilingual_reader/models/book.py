"""Whole-book artifacts produced by the translation pipeline."""

from pydantic import BaseModel, Field

from bilingual_reader.models.paragraph import ParagraphRecord
from bilingual_reader.models.vocabulary import AnnotationRecord


class LanguagePair(BaseModel):
    source: str = "English"
    target: str = "Chinese"


class BookInfo(BaseModel):
    title: str = ""
    author: str = ""
    language: LanguagePair = Field(default_factory=LanguagePair)


class BilingualBook(BookInfo):
    """The pipeline's paragraph artifact: ``{title, author, language, paragraphs}``."""

    paragraphs: list[ParagraphRecord] = Field(default_factory=list)


class VocabularyBook(BookInfo):
    """The pipeline's vocabulary artifact: ``{title, author, language, vocabulary}``."""

    vocabulary: list[AnnotationRecord] = Field(default_factory=list)
