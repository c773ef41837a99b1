"""Book catalog and chapter lookup for the reading app."""

from bilingual_reader.library.catalog import (
    BookCatalog,
    BookConfig,
    SegmentedBook,
    segment_book,
)

__all__ = ["BookCatalog", "BookConfig", "SegmentedBook", "segment_book"]
