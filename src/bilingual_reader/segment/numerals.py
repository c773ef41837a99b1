"""Numeral parsing for chapter and part markers.

Parsers accept only the canonical spelling produced by the matching
renderer, so marker recognition stays exact and case-sensitive: ``"XIV"``
parses, ``"xiv"`` and ``"XIIII"`` do not; ``"Twenty-One"`` parses,
``"twenty one"`` does not.
"""

from enum import Enum

from bilingual_reader.errors import StructureError


class NumeralStyle(str, Enum):
    ROMAN = "roman"
    WORDS = "words"
    DIGITS = "digits"


_ROMAN_VALUES = [
    ("M", 1000), ("CM", 900), ("D", 500), ("CD", 400),
    ("C", 100), ("XC", 90), ("L", 50), ("XL", 40),
    ("X", 10), ("IX", 9), ("V", 5), ("IV", 4), ("I", 1),
]

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]

_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety",
]

_WORD_VALUES = {word: value for value, word in enumerate(_ONES) if word}
_WORD_VALUES.update({word: value * 10 for value, word in enumerate(_TENS) if word})


def int_to_roman(n: int) -> str:
    """Convert an integer (1-3999) to an uppercase Roman numeral."""
    if not 0 < n < 4000:
        raise ValueError(f"Roman numerals cover 1-3999, got {n}")
    result = []
    for numeral, value in _ROMAN_VALUES:
        while n >= value:
            result.append(numeral)
            n -= value
    return "".join(result)


def roman_to_int(text: str) -> int | None:
    """Parse a canonical uppercase Roman numeral, or return None."""
    if not text or any(c not in "MDCLXVI" for c in text):
        return None
    total = 0
    i = 0
    for numeral, value in _ROMAN_VALUES:
        while text[i:i + len(numeral)] == numeral:
            total += value
            i += len(numeral)
    if i != len(text) or not 0 < total < 4000:
        return None
    return total if int_to_roman(total) == text else None


def int_to_words(n: int) -> str:
    """Spell out 1-999 in title case: ``21 -> "Twenty-One"``."""
    if not 0 < n < 1000:
        raise ValueError(f"Number words cover 1-999, got {n}")
    hundreds, rest = divmod(n, 100)
    words = []
    if hundreds:
        words.append(f"{_ONES[hundreds]} Hundred")
    if rest >= 20:
        tens, ones = divmod(rest, 10)
        words.append(_TENS[tens] + (f"-{_ONES[ones]}" if ones else ""))
    elif rest:
        words.append(_ONES[rest])
    return " ".join(words)


def words_to_int(text: str) -> int | None:
    """Parse a canonical title-case number phrase, or return None."""
    total = 0
    for token in text.split(" "):
        if token == "Hundred":
            if total == 0 or total >= 10:
                return None
            total *= 100
            continue
        value = 0
        for piece in token.split("-"):
            if piece not in _WORD_VALUES:
                return None
            value += _WORD_VALUES[piece]
        total += value
    if not 0 < total < 1000:
        return None
    return total if int_to_words(total) == text else None


def digits_to_int(text: str) -> int | None:
    if not text.isascii() or not text.isdigit() or text.startswith("0"):
        return None
    return int(text)


_PARSERS = {
    NumeralStyle.ROMAN: roman_to_int,
    NumeralStyle.WORDS: words_to_int,
    NumeralStyle.DIGITS: digits_to_int,
}

_RENDERERS = {
    NumeralStyle.ROMAN: int_to_roman,
    NumeralStyle.WORDS: int_to_words,
    NumeralStyle.DIGITS: str,
}


def parse_numeral(text: str, style: NumeralStyle | str) -> int | None:
    """Parse ``text`` in the given numeral style."""
    return _PARSERS[coerce_style(style)](text)


def render_numeral(n: int, style: NumeralStyle | str) -> str:
    """Render ``n`` in the given numeral style."""
    return _RENDERERS[coerce_style(style)](n)


def coerce_style(style: NumeralStyle | str) -> NumeralStyle:
    try:
        return NumeralStyle(style)
    except ValueError:
        raise StructureError(f"Unknown numeral style: {style!r}") from None
