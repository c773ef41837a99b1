"""Vocabulary annotation models."""

from pydantic import BaseModel, ConfigDict, Field


class KeyTerm(BaseModel):
    """A term pair: surface forms and glosses in both languages."""

    model_config = ConfigDict(frozen=True)

    raw_en: str = ""
    en: str = ""
    raw_cn: str = ""
    cn: str = ""


class AnnotationRecord(BaseModel):
    """Key terms anchored to one paragraph (``id`` is the paragraph id)."""

    model_config = ConfigDict(frozen=True)

    id: int
    key_words: list[KeyTerm] = Field(default_factory=list)
