"""Stable identifiers for chapters and chapter-qualified paragraphs."""

from dataclasses import dataclass


def chapter_key(book_id: str, chapter: int, part: int | None = None) -> str:
    """``{book}-{part}-{chapter}``, or ``{book}-{chapter}`` without a part level."""
    if part is None:
        return f"{book_id}-{chapter}"
    return f"{book_id}-{part}-{chapter}"


def paragraph_key(chapter_key: str, original_id: int | str) -> str:
    return f"{chapter_key}-{original_id}"


def chapter_title(chapter: int, part: int | None = None) -> str:
    if part is None:
        return f"Chapter {chapter}"
    return f"Part {part}, Chapter {chapter}"


@dataclass(frozen=True)
class ParagraphLocation:
    """A chapter-qualified paragraph id split back into its pieces."""

    book_id: str
    part: int | None
    chapter: int
    paragraph_id: str

    @property
    def chapter_key(self) -> str:
        return chapter_key(self.book_id, self.chapter, self.part)


def parse_paragraph_key(key: str, book_id: str, has_parts: bool = True) -> ParagraphLocation | None:
    """
    Split ``{book_id}-part-chapter-id``, or ``{book_id}-chapter-id`` for a
    book without parts.

    The book id is matched as a prefix and the paragraph id is everything
    after the chapter number, so both may contain dashes. Returns None for
    keys that don't have the expected shape.
    """
    head = f"{book_id}-"
    if not book_id or not key.startswith(head):
        return None

    pieces = key[len(head):].split("-", 2 if has_parts else 1)
    if has_parts and len(pieces) == 3:
        part, chapter, paragraph_id = pieces
    elif not has_parts and len(pieces) == 2:
        chapter, paragraph_id = pieces
        part = None
    else:
        return None

    if not paragraph_id or not chapter.isdigit():
        return None
    if part is not None and not part.isdigit():
        return None

    return ParagraphLocation(
        book_id=book_id,
        part=int(part) if part is not None else None,
        chapter=int(chapter),
        paragraph_id=paragraph_id,
    )
