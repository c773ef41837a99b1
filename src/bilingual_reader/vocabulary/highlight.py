"""Split paragraph text into plain and highlighted vocabulary spans."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from bilingual_reader.models.vocabulary import KeyTerm


class TextSide(str, Enum):
    SOURCE = "source"
    TARGET = "target"


@dataclass(frozen=True)
class Span:
    """A run of text; ``term`` is set when the run is a vocabulary hit."""

    text: str
    term: KeyTerm | None = None

    @property
    def highlighted(self) -> bool:
        return self.term is not None

    def gloss(self, side: TextSide | str) -> str:
        """Tooltip for a hit: the other language's gloss."""
        if self.term is None:
            return ""
        return self.term.cn if TextSide(side) is TextSide.SOURCE else self.term.en


def surface_form(term: KeyTerm, side: TextSide | str) -> str:
    return term.raw_en if TextSide(side) is TextSide.SOURCE else term.raw_cn


def highlight(text: str, terms: Iterable[KeyTerm], side: TextSide | str = TextSide.SOURCE) -> list[Span]:
    """
    Mark every case-insensitive occurrence of the terms' surface forms.

    Longer forms are matched first and claimed text is never searched again,
    so when forms overlap the longest one wins. There is no word-boundary
    check: "well" also matches inside "swell". Joining the span texts gives
    back ``text`` unchanged.
    """
    side = TextSide(side)
    forms: dict[str, tuple[str, KeyTerm]] = {}
    for term in terms:
        form = surface_form(term, side).strip()
        if form and form.casefold() not in forms:
            forms[form.casefold()] = (form, term)

    # sorted() is stable, so equal-length forms keep their input order
    ordered = sorted(forms.values(), key=lambda item: len(item[0]), reverse=True)

    spans = [Span(text)] if text else []
    for form, term in ordered:
        pattern = re.compile(re.escape(form), re.IGNORECASE)
        spans = [piece for span in spans for piece in _split(span, pattern, term)]
    return spans


def _split(span: Span, pattern: re.Pattern, term: KeyTerm) -> list[Span]:
    if span.highlighted:
        return [span]

    pieces = []
    cursor = 0
    for match in pattern.finditer(span.text):
        if match.start() > cursor:
            pieces.append(Span(span.text[cursor:match.start()]))
        pieces.append(Span(match.group(0), term))
        cursor = match.end()
    if cursor < len(span.text):
        pieces.append(Span(span.text[cursor:]))
    return pieces
