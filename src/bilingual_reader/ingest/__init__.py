"""Reading pipeline artifacts and writing chapter artifacts."""

from bilingual_reader.ingest.loader import load_bilingual, load_vocabulary
from bilingual_reader.ingest.writer import write_chapter_artifacts, write_vocabulary_artifacts

__all__ = [
    "load_bilingual",
    "load_vocabulary",
    "write_chapter_artifacts",
    "write_vocabulary_artifacts",
]
