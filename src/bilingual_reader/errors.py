"""Exceptions raised for structurally invalid input.

Data-quality problems (missing markers, id gaps, orphan vocabulary) are not
exceptions; they are reported as ``Diagnostic`` records on the result.
"""


class BilingualReaderError(Exception):
    """Base class for errors surfaced to callers."""


class MalformedInputError(BilingualReaderError):
    """The input is not shaped like a translation-pipeline artifact."""


class StructureError(BilingualReaderError):
    """A book structure description (markers, ranges) is invalid."""
