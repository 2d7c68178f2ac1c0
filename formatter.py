"""Text style helpers: map style mnemonics to ESC/POS escape sequences.

A style is a (bold, italic, underline) triple. It can be written out in
full or with a short mnemonic built from the letters B, I and U, where
``U2`` selects the double underline:

    B I U U2 BI BU BU2 IU IU2 BIU BIU2 NORMAL

Unknown mnemonics fall back to NORMAL.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union

from commands import TEXT_FORMAT


@dataclass(frozen=True)
class TextStyle:
    """Emphasis flags; ``underline`` is 0 (off), 1 (single) or 2 (double)."""

    bold: bool = False
    italic: bool = False
    underline: int = 0


NORMAL = TextStyle()

_MNEMONICS: Dict[str, TextStyle] = {
    "B": TextStyle(bold=True),
    "I": TextStyle(italic=True),
    "U": TextStyle(underline=1),
    "U2": TextStyle(underline=2),
    "BI": TextStyle(bold=True, italic=True),
    "BIU": TextStyle(bold=True, italic=True, underline=1),
    "BIU2": TextStyle(bold=True, italic=True, underline=2),
    "BU": TextStyle(bold=True, underline=1),
    "BU2": TextStyle(bold=True, underline=2),
    "IU": TextStyle(italic=True, underline=1),
    "IU2": TextStyle(italic=True, underline=2),
    "NORMAL": NORMAL,
}


def parse_style(mnemonic: str) -> TextStyle:
    """Return the style for ``mnemonic`` (case-insensitive)."""
    return _MNEMONICS.get(mnemonic.upper(), NORMAL)


def style_sequence(
    bold_or_mnemonic: Union[str, bool, TextStyle, None] = False,
    italic: bool = False,
    underline: Union[int, bool] = 0,
) -> bytes:
    """Build the bold + italic + underline escape bytes for a style."""
    if isinstance(bold_or_mnemonic, str):
        style = parse_style(bold_or_mnemonic)
    elif isinstance(bold_or_mnemonic, TextStyle):
        style = bold_or_mnemonic
    else:
        style = TextStyle(bool(bold_or_mnemonic), bool(italic), int(underline))

    seq = TEXT_FORMAT["TXT_BOLD_ON" if style.bold else "TXT_BOLD_OFF"]
    seq += TEXT_FORMAT["TXT_ITALIC_ON" if style.italic else "TXT_ITALIC_OFF"]
    if style.underline == 0:
        seq += TEXT_FORMAT["TXT_UNDERL_OFF"]
    elif style.underline == 1:
        seq += TEXT_FORMAT["TXT_UNDERL_ON"]
    elif style.underline == 2:
        seq += TEXT_FORMAT["TXT_UNDERL2_ON"]
    return seq
