"""Paragraph models for bilingual text."""

from pydantic import BaseModel, ConfigDict


class ParagraphRecord(BaseModel):
    """One aligned paragraph from the translation pipeline."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    source: str
    translation: str = ""
    image: str | None = None

    def to_artifact(self) -> dict:
        """Return the pipeline JSON shape, omitting an absent image."""
        data = {"id": self.id, "source": self.source, "translation": self.translation}
        if self.image:
            data["image"] = self.image
        return data


class ChapterParagraph(ParagraphRecord):
    """A paragraph re-keyed with its chapter-qualified id."""

    original_id: int | str

    def to_artifact(self) -> dict:
        data = super().to_artifact()
        data["id"] = self.original_id
        return data


def id_key(paragraph_id: int | str) -> str:
    """Normalize a paragraph id for lookups (``5`` and ``"5"`` are the same paragraph)."""
    return str(paragraph_id).strip()
