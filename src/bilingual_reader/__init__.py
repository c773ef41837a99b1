"""Bilingual Reader - segment bilingual novels into chapters for reading."""

__version__ = "0.1.0"
