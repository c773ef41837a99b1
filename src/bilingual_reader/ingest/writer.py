"""Write per-chapter artifacts for the reading app."""

import json
import logging
from pathlib import Path

from bilingual_reader.models.book import BilingualBook, VocabularyBook
from bilingual_reader.models.chapter import ChapterRecord, PartitionResult, SegmentationResult

logger = logging.getLogger(__name__)


def chapter_artifact(book: BilingualBook, chapter: ChapterRecord) -> dict:
    """``{title, author, language, part?, chapter, paragraphs}`` with the pipeline's own ids."""
    data = {
        "title": book.title,
        "author": book.author,
        "language": book.language.model_dump(),
    }
    if chapter.part is not None:
        data["part"] = chapter.part
    data["chapter"] = chapter.chapter
    data["section_title"] = chapter.title
    data["paragraphs"] = [p.to_artifact() for p in chapter.paragraphs]
    return data


def write_chapter_artifacts(
    book: BilingualBook, result: SegmentationResult, out_dir: Path
) -> list[Path]:
    """Write ``bilingual_{suffix}.json`` per non-empty chapter; return the paths written."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for chapter in result.chapters:
        if not chapter.paragraphs:
            logger.info("Skipping empty chapter %s", chapter.chapter_key)
            continue
        path = out_dir / f"bilingual_{chapter.file_suffix}.json"
        _dump(chapter_artifact(book, chapter), path)
        written.append(path)
    return written


def write_vocabulary_artifacts(
    vocabulary: VocabularyBook,
    result: SegmentationResult,
    partition: PartitionResult,
    out_dir: Path,
) -> list[Path]:
    """Write ``vocabulary_{suffix}.json`` per chapter that has vocabulary."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for chapter in result.chapters:
        bundle = partition.bundles.get(chapter.chapter_key)
        if not bundle:
            logger.info("No vocabulary for chapter %s", chapter.chapter_key)
            continue
        data = {
            "title": vocabulary.title,
            "author": vocabulary.author,
            "language": vocabulary.language.model_dump(),
            "vocabulary": [a.model_dump() for a in bundle],
        }
        path = out_dir / f"vocabulary_{chapter.file_suffix}.json"
        _dump(data, path)
        written.append(path)
    return written


def _dump(data: dict, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.info("Created %s", path)
