"""Chapter and section models."""

from pydantic import BaseModel, Field

from bilingual_reader.models.diagnostics import Diagnostic
from bilingual_reader.models.paragraph import ChapterParagraph
from bilingual_reader.models.vocabulary import AnnotationRecord


class ChapterRecord(BaseModel):
    """A chapter (or id-range section) owning a contiguous run of paragraphs."""

    chapter_key: str
    sequence_number: int
    title: str
    part: int | None = None
    chapter: int
    paragraphs: list[ChapterParagraph] = Field(default_factory=list)

    @property
    def file_suffix(self) -> str:
        """Suffix used in artifact file names, e.g. ``2-7`` or ``14``."""
        if self.part is None:
            return str(self.chapter)
        return f"{self.part}-{self.chapter}"

    def metadata(self) -> "ChapterRecord":
        """Return a copy without paragraph content."""
        return self.model_copy(update={"paragraphs": []})


class SectionDescriptor(BaseModel):
    """An inclusive paragraph-id interval; ``end_id=None`` is open-ended."""

    title: str
    start_id: int
    end_id: int | None = None

    def contains(self, paragraph_id: int) -> bool:
        if paragraph_id < self.start_id:
            return False
        return self.end_id is None or paragraph_id <= self.end_id


class SegmentationResult(BaseModel):
    """Chapters plus the paragraph-id to chapter-key map built while segmenting."""

    chapters: list[ChapterRecord] = Field(default_factory=list)
    paragraph_map: dict[str, str] = Field(default_factory=dict)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def paragraph_count(self) -> int:
        return sum(len(c.paragraphs) for c in self.chapters)


class PartitionResult(BaseModel):
    """Annotation bundles keyed by chapter key."""

    bundles: dict[str, list[AnnotationRecord]] = Field(default_factory=dict)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def annotation_count(self) -> int:
        return sum(len(b) for b in self.bundles.values())
