"""Display width helpers for fixed-column receipt layout.

Anything outside 7-bit ASCII is printed by CJK code pages as a double-width
glyph, so it counts as two columns.
"""

from __future__ import annotations

from typing import Optional


def char_length(char: str) -> int:
    """Return 2 for a non-ASCII character, 1 otherwise."""
    return 2 if ord(char) > 0x7F else 1


def text_length(text: str) -> int:
    """Return the number of printer columns ``text`` occupies."""
    return sum(char_length(ch) for ch in text)


def text_substring(text: str, start: float, end: Optional[float] = None) -> str:
    """Cut ``text`` by display columns.

    A character is kept when the running width after it is past ``start``
    and, unless ``end`` is falsy, not past ``end``. A double-width character
    straddling ``end`` therefore belongs to the remainder, which makes
    ``text_substring(s, 0, n) + text_substring(s, n) == s`` for any n > 0.
    """
    acc = 0
    kept = []
    for ch in text:
        acc += char_length(ch)
        if acc > start and (not end or acc <= end):
            kept.append(ch)
    return "".join(kept)
