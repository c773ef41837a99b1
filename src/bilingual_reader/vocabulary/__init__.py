"""Vocabulary partitioning and highlighting."""

from bilingual_reader.vocabulary.highlight import Span, TextSide, highlight
from bilingual_reader.vocabulary.partition import lookup_key_terms, partition_annotations

__all__ = ["Span", "TextSide", "highlight", "lookup_key_terms", "partition_annotations"]
