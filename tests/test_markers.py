"""Tests for marker-based chapter segmentation."""

import pytest

from bilingual_reader.errors import StructureError
from bilingual_reader.models import DiagnosticKind, ParagraphRecord
from bilingual_reader.segment.markers import (
    Marker,
    MarkerKind,
    MarkerVocabulary,
    resolve_structure,
    scan_markers,
)


def make_stream(*sources: str, start_id: int = 1) -> list[ParagraphRecord]:
    """Build paragraphs with consecutive ids."""
    return [
        ParagraphRecord(id=i, source=s, translation=f"译文{i}")
        for i, s in enumerate(sources, start=start_id)
    ]


@pytest.fixture
def bovary_vocabulary():
    return MarkerVocabulary.numbered("words", part_style="roman")


@pytest.fixture
def three_part_stream():
    return make_stream(
        "Part I",
        "Chapter One",
        "We were in class when the head-master came in.",
        "He was followed by a new fellow.",
        "Chapter Two",
        "One night towards eleven o'clock they were awakened.",
        "Part II",
        "Chapter One",
        "Yonville-l'Abbaye is a market-town.",
        "Part III",
        "Chapter One",
        "Monsieur Leon, while studying law, had gone pretty often to the dancing-rooms.",
        "Chapter Two",
        "On reaching the inn, Madame Bovary was surprised not to see the diligence.",
    )


class TestMarkerVocabulary:
    """Test sentinel recognition."""

    def test_explicit_pairs(self):
        vocab = MarkerVocabulary.from_pairs(chapters={"Chapter One": 1, "Chapter Two": 2})
        assert vocab.classify("Chapter One") == Marker(MarkerKind.CHAPTER, 1)
        assert vocab.classify("Chapter Two") == Marker(MarkerKind.CHAPTER, 2)
        assert vocab.classify("Chapter Three") is None
        assert not vocab.has_parts

    def test_exact_match_only(self, bovary_vocabulary):
        assert bovary_vocabulary.classify("Chapter One") is not None
        assert bovary_vocabulary.classify("chapter one") is None
        assert bovary_vocabulary.classify("Chapter One.") is None
        assert bovary_vocabulary.classify(" Chapter One") is None
        assert bovary_vocabulary.classify("In Chapter One we meet Charles.") is None

    def test_no_fixed_maximum(self, bovary_vocabulary):
        assert bovary_vocabulary.classify("Chapter Twenty-Seven") == Marker(MarkerKind.CHAPTER, 27)
        assert bovary_vocabulary.classify("Part XII") == Marker(MarkerKind.PART, 12)
        assert bovary_vocabulary.has_parts

    def test_bare_roman_numerals(self):
        vocab = MarkerVocabulary.numbered("roman", chapter_prefix="")
        assert vocab.classify("XXVII") == Marker(MarkerKind.CHAPTER, 27)
        assert vocab.classify("I") == Marker(MarkerKind.CHAPTER, 1)
        assert vocab.classify("I was six years old.") is None

    def test_explicit_sentinels_win_over_rules(self):
        vocab = MarkerVocabulary.numbered("roman", chapter_prefix="")
        vocab.sentinels["Epilogue"] = Marker(MarkerKind.CHAPTER, 99)
        assert vocab.classify("Epilogue") == Marker(MarkerKind.CHAPTER, 99)

    def test_from_config_numbered(self):
        vocab = MarkerVocabulary.from_config(
            {"chapters": {"style": "words", "prefix": "Chapter"}, "parts": {"style": "roman"}}
        )
        assert vocab.classify("Part III") == Marker(MarkerKind.PART, 3)
        assert vocab.classify("Chapter Eleven") == Marker(MarkerKind.CHAPTER, 11)

    def test_from_config_pairs(self):
        vocab = MarkerVocabulary.from_config(
            {"chapters": {"Chapter One": 1}, "parts": {"Part I": 1}}
        )
        assert vocab.classify("Part I") == Marker(MarkerKind.PART, 1)
        assert vocab.has_parts

    def test_bad_config(self):
        with pytest.raises(StructureError):
            MarkerVocabulary.from_config({"parts": {"Part I": 1}})
        with pytest.raises(StructureError):
            MarkerVocabulary.from_config({"chapters": {"style": "klingon"}})

    def test_duplicate_sentinel(self):
        with pytest.raises(StructureError):
            MarkerVocabulary.from_pairs(chapters={"One": 1}, parts={"One": 1})


class TestScanMarkers:
    """Test the sequential marker scan."""

    def test_two_chapter_scenario(self):
        paragraphs = [
            ParagraphRecord(id=1, source="Chapter One", translation=""),
            ParagraphRecord(id=2, source="It was a dark night.", translation="那是一个黑夜。"),
            ParagraphRecord(id=3, source="Chapter Two", translation=""),
            ParagraphRecord(id=4, source="The sun rose.", translation="太阳升起了。"),
        ]
        vocab = MarkerVocabulary.from_pairs(chapters={"Chapter One": 1, "Chapter Two": 2})

        result = scan_markers(paragraphs, vocab)

        assert len(result.chapters) == 2
        assert [p.original_id for p in result.chapters[0].paragraphs] == [2]
        assert [p.original_id for p in result.chapters[1].paragraphs] == [4]
        assert result.diagnostics == []

    def test_single_part_keys_omit_part(self):
        vocab = MarkerVocabulary.from_pairs(chapters={"Chapter One": 1})
        result = scan_markers(make_stream("Chapter One", "Prose here."), vocab, book_id="9")

        chapter = result.chapters[0]
        assert chapter.chapter_key == "9-1"
        assert chapter.part is None
        assert chapter.title == "Chapter 1"
        assert chapter.paragraphs[0].id == "9-1-2"

    def test_parts_and_sequence_numbers(self, bovary_vocabulary, three_part_stream):
        result = scan_markers(three_part_stream, bovary_vocabulary, book_id="8")

        keys = [c.chapter_key for c in result.chapters]
        assert keys == ["8-1-1", "8-1-2", "8-2-1", "8-3-1", "8-3-2"]
        assert [c.sequence_number for c in result.chapters] == [1, 2, 3, 4, 5]
        assert result.chapters[2].title == "Part 2, Chapter 1"

    def test_sentinels_are_not_content(self, bovary_vocabulary, three_part_stream):
        result = scan_markers(three_part_stream, bovary_vocabulary)

        for chapter in result.chapters:
            for p in chapter.paragraphs:
                assert bovary_vocabulary.classify(p.source) is None

    def test_leading_paragraphs_dropped_and_reported(self):
        vocab = MarkerVocabulary.numbered("words")
        paragraphs = make_stream("Translator's note.", "Dedication.", "Chapter One", "Text.")

        result = scan_markers(paragraphs, vocab)

        assert result.paragraph_count == 1
        dropped = [d for d in result.diagnostics if d.kind is DiagnosticKind.UNASSIGNED_PARAGRAPH]
        assert [d.paragraph_id for d in dropped] == [1, 2]

    def test_paragraph_between_part_and_chapter_is_dropped(self, bovary_vocabulary):
        paragraphs = make_stream("Part I", "To Marie-Antoine-Jules Senard.", "Chapter One", "Text.")

        result = scan_markers(paragraphs, bovary_vocabulary)

        assert [c.chapter_key for c in result.chapters] == ["book-1-1"]
        assert result.diagnostics[0].paragraph_id == 2

    def test_chapter_before_part_is_ignored(self, bovary_vocabulary):
        paragraphs = make_stream("Chapter One", "Orphan text.", "Part I", "Chapter One", "Text.")

        result = scan_markers(paragraphs, bovary_vocabulary)

        assert [c.chapter_key for c in result.chapters] == ["book-1-1"]
        kinds = [d.kind for d in result.diagnostics]
        assert kinds == [DiagnosticKind.MISSING_MARKER, DiagnosticKind.UNASSIGNED_PARAGRAPH]

    def test_empty_chapter_is_emitted(self):
        vocab = MarkerVocabulary.numbered("words")
        result = scan_markers(make_stream("Chapter One", "Chapter Two", "Text."), vocab)

        assert [len(c.paragraphs) for c in result.chapters] == [0, 1]

    def test_paragraph_map(self, bovary_vocabulary, three_part_stream):
        result = scan_markers(three_part_stream, bovary_vocabulary, book_id="8")

        assert result.paragraph_map["3"] == "8-1-1"
        assert result.paragraph_map["9"] == "8-2-1"
        assert "1" not in result.paragraph_map

    def test_idempotent(self, bovary_vocabulary, three_part_stream):
        first = scan_markers(three_part_stream, bovary_vocabulary)
        second = scan_markers(three_part_stream, bovary_vocabulary)
        assert first.model_dump_json() == second.model_dump_json()

    def test_no_markers(self):
        vocab = MarkerVocabulary.numbered("words")
        result = scan_markers(make_stream("Just prose.", "More prose."), vocab)

        assert result.chapters == []
        assert len(result.diagnostics) == 2


class TestResolveStructure:
    """Test boundary resolution against a known chapter layout."""

    def test_matches_scan_on_clean_input(self, bovary_vocabulary, three_part_stream):
        scanned = scan_markers(three_part_stream, bovary_vocabulary, book_id="8")
        resolved = resolve_structure(
            three_part_stream, bovary_vocabulary, {1: 2, 2: 1, 3: 2}, book_id="8"
        )

        assert resolved.model_dump() == scanned.model_dump()

    def test_missing_start_marker_skips_chapter(self, bovary_vocabulary):
        paragraphs = make_stream(
            "Part I", "Chapter One", "A.", "Chapter Three", "C.",
        )

        result = resolve_structure(paragraphs, bovary_vocabulary, {1: 3})

        assert [c.chapter_key for c in result.chapters] == ["book-1-1", "book-1-3"]
        assert [c.sequence_number for c in result.chapters] == [1, 2]
        missing = [d for d in result.diagnostics if d.kind is DiagnosticKind.MISSING_MARKER]
        assert [d.chapter_key for d in missing] == ["book-1-2"]

    def test_chapter_ends_at_next_part(self, bovary_vocabulary):
        paragraphs = make_stream(
            "Part I", "Chapter One", "A.", "B.", "Part II", "Chapter One", "C.",
        )

        result = resolve_structure(paragraphs, bovary_vocabulary, {1: 1, 2: 1})

        assert [p.source for p in result.chapters[0].paragraphs] == ["A.", "B."]
        assert [p.source for p in result.chapters[1].paragraphs] == ["C."]
        assert result.chapters[1].sequence_number == 2

    def test_missing_later_part_is_skipped(self, bovary_vocabulary):
        paragraphs = make_stream("Part I", "Chapter One", "A.", "Chapter Two", "B.")

        result = resolve_structure(paragraphs, bovary_vocabulary, {1: 2, 2: 15, 3: 11})

        assert [c.chapter_key for c in result.chapters] == ["book-1-1", "book-1-2"]
        missing = [d.chapter_key for d in result.diagnostics]
        assert missing == ["book-2", "book-3"]

    def test_first_part_marker_optional(self, bovary_vocabulary):
        paragraphs = make_stream("Chapter One", "A.", "Part II", "Chapter One", "B.")

        result = resolve_structure(paragraphs, bovary_vocabulary, {1: 1, 2: 1})

        assert [c.chapter_key for c in result.chapters] == ["book-1-1", "book-2-1"]
        assert result.chapters[0].paragraphs[0].source == "A."

    def test_part_chapters_searched_within_part(self, bovary_vocabulary):
        paragraphs = make_stream(
            "Part I", "Chapter One", "A.", "Part II", "Chapter Two", "B.",
        )

        result = resolve_structure(paragraphs, bovary_vocabulary, {1: 2, 2: 2})

        assert [c.chapter_key for c in result.chapters] == ["book-1-1", "book-2-2"]

    def test_partless_count(self):
        vocab = MarkerVocabulary.numbered("roman", chapter_prefix="")
        paragraphs = make_stream("I", "Once when I was six.", "II", "So I lived my life alone.")

        result = resolve_structure(paragraphs, vocab, 27, book_id="9")

        assert [c.chapter_key for c in result.chapters] == ["9-1", "9-2"]
        assert sum(d.kind is DiagnosticKind.MISSING_MARKER for d in result.diagnostics) == 25

    def test_extra_paragraphs_reported(self):
        vocab = MarkerVocabulary.numbered("words")
        paragraphs = make_stream("Preface.", "Chapter One", "A.", "Chapter Two", "B.")

        result = resolve_structure(paragraphs, vocab, 1)

        assert result.paragraph_count == 1
        unassigned = [
            d.paragraph_id
            for d in result.diagnostics
            if d.kind is DiagnosticKind.UNASSIGNED_PARAGRAPH
        ]
        assert unassigned == [1, 5]

    def test_markers_outside_structure_reported(self, bovary_vocabulary):
        paragraphs = make_stream(
            "Part I", "Chapter One", "A.", "Chapter One", "B.", "Chapter Ten", "C.",
        )

        result = resolve_structure(paragraphs, bovary_vocabulary, {1: 1})

        assert [p.source for p in result.chapters[0].paragraphs] == ["A."]
        unexpected = [
            d.paragraph_id
            for d in result.diagnostics
            if d.kind is DiagnosticKind.UNEXPECTED_MARKER
        ]
        assert unexpected == [4, 6]
        unassigned = [
            d.paragraph_id
            for d in result.diagnostics
            if d.kind is DiagnosticKind.UNASSIGNED_PARAGRAPH
        ]
        assert unassigned == [5, 7]

    def test_chapters_never_overlap(self, bovary_vocabulary):
        # Chapter Two is missing, so Chapter One must stop at Chapter Three
        paragraphs = make_stream("Chapter One", "A.", "Chapter Three", "C.")

        result = resolve_structure(paragraphs, bovary_vocabulary, {1: 3})

        seen = [p.original_id for c in result.chapters for p in c.paragraphs]
        assert len(seen) == len(set(seen))
        assert [p.source for p in result.chapters[0].paragraphs] == ["A."]
