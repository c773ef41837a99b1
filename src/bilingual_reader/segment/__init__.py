"""Chapter segmentation of bilingual paragraph streams."""

from bilingual_reader.segment.markers import (
    Marker,
    MarkerKind,
    MarkerVocabulary,
    resolve_structure,
    scan_markers,
)
from bilingual_reader.segment.ranges import segment_by_ranges, validate_descriptors

__all__ = [
    "Marker",
    "MarkerKind",
    "MarkerVocabulary",
    "resolve_structure",
    "scan_markers",
    "segment_by_ranges",
    "validate_descriptors",
]
