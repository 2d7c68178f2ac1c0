"""ESC/POS command table.

Byte sequences grouped by category, plus builders for the commands that
take a parameter. The basic control bytes come from python-escpos so both
libraries agree on them.

Usage:
    >>> from commands import TEXT_FORMAT, custom_size
    >>> TEXT_FORMAT["TXT_BOLD_ON"] + b"Total" + TEXT_FORMAT["TXT_BOLD_OFF"]
    >>> custom_size(2, 2)
    b'\\x1d!\\x11'
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Final, Mapping, NamedTuple, TypeVar

from escpos.constants import (
    CODEPAGE_CHANGE,
    CTL_CR,
    CTL_FF,
    CTL_HT,
    CTL_LF,
    CTL_VT,
    ESC,
    GS,
    HW_INIT,
    NUL,
)

from errors import ConfigurationError

EOL: Final[bytes] = CTL_LF

# ESC t n
CODE_TABLE_SELECT: Final[bytes] = CODEPAGE_CHANGE
BEEP: Final[bytes] = ESC + b"\x42"
# Terminates a GS k payload
BARCODE_TERMINATOR: Final[bytes] = NUL
# Byte values a printer acts on instead of printing a glyph
CTL_BYTES: Final[frozenset] = frozenset(
    seq[0] for seq in (ESC, GS, NUL, CTL_LF, CTL_FF, CTL_CR, CTL_HT, CTL_VT)
)

# =============================================================================
# PRINTER MODELS
# =============================================================================


class PrinterModel(Enum):
    """Printer families with diverging command subsets."""

    GENERIC = "generic"
    QSPRINTER = "qsprinter"

    @classmethod
    def parse(cls, value: "PrinterModel | str | None") -> "PrinterModel":
        """Accept an enum member, a model name, or None/"" for generic."""
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return cls.GENERIC
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unsupported printer model: {value!r}") from None


# =============================================================================
# FEED / HARDWARE
# =============================================================================

FEED_CONTROL_SEQUENCES: Final[Dict[str, bytes]] = {
    "CTL_LF": CTL_LF,  # Print and line feed
    "CTL_GLF": b"\x4a\x00",  # Print and feed paper (without spaces between lines)
    "CTL_FF": CTL_FF,  # Form feed
    "CTL_CR": CTL_CR,  # Carriage return
    "CTL_HT": CTL_HT,  # Horizontal tab
    "CTL_VT": CTL_VT,  # Vertical tab
}

HARDWARE: Final[Dict[str, bytes]] = {
    "HW_INIT": HW_INIT,  # Clear data in buffer and reset modes
    "HW_SELECT": ESC + b"\x3d\x01",  # Printer select
    "HW_RESET": ESC + b"\x3f\x0a\x00",  # Reset printer hardware
}

CHARACTER_SPACING: Final[Dict[str, bytes]] = {
    "CS_DEFAULT": ESC + b"\x20\x00",
    "CS_SET": ESC + b"\x20",
}

LINE_SPACING: Final[Dict[str, bytes]] = {
    "LS_DEFAULT": ESC + b"\x32",
    "LS_SET": ESC + b"\x33",
}

MARGINS: Final[Dict[str, bytes]] = {
    "BOTTOM": ESC + b"\x4f",
    "LEFT": ESC + b"\x6c",
    "RIGHT": ESC + b"\x51",
}

CASH_DRAWER: Final[Dict[str, bytes]] = {
    "CD_KICK_2": ESC + b"\x70\x00\x19\x78",  # Pulse to pin 2
    "CD_KICK_5": ESC + b"\x70\x01\x19\x78",  # Pulse to pin 5
}

PAPER: Final[Dict[str, bytes]] = {
    "PAPER_FULL_CUT": GS + b"\x56\x00",
    "PAPER_PART_CUT": GS + b"\x56\x01",
    "PAPER_CUT_A": GS + b"\x56\x41",
    "PAPER_CUT_B": GS + b"\x56\x42",
    "STAR_FULL_CUT": ESC + b"\x64\x02",
}

COLOR: Final[Dict[object, bytes]] = {
    0: ESC + b"\x72\x00",  # Primary colour (black)
    1: ESC + b"\x72\x01",  # Secondary colour (red)
    "REVERSE": GS + b"B1",
    "UNREVERSE": GS + b"B0",
}

# =============================================================================
# TEXT FORMAT
# =============================================================================

TEXT_FORMAT: Final[Dict[str, bytes]] = {
    "TXT_NORMAL": ESC + b"\x21\x00",
    "TXT_2HEIGHT": ESC + b"\x21\x10",
    "TXT_2WIDTH": ESC + b"\x21\x20",
    "TXT_4SQUARE": ESC + b"\x21\x30",
    "STAR_TXT_EMPHASIZED": ESC + b"\x45",
    "STAR_CANCEL_TXT_EMPHASIZED": ESC + b"\x46",
    "TXT_UNDERL_OFF": ESC + b"\x2d\x00",
    "TXT_UNDERL_ON": ESC + b"\x2d\x01",
    "TXT_UNDERL2_ON": ESC + b"\x2d\x02",
    "TXT_BOLD_OFF": ESC + b"\x45\x00",
    "TXT_BOLD_ON": ESC + b"\x45\x01",
    "TXT_ITALIC_OFF": ESC + b"\x35",
    "TXT_ITALIC_ON": ESC + b"\x34",
    "TXT_FONT_A": ESC + b"\x4d\x00",
    "TXT_FONT_B": ESC + b"\x4d\x01",
    "TXT_FONT_C": ESC + b"\x4d\x02",
    "TXT_ALIGN_LT": ESC + b"\x61\x00",
    "TXT_ALIGN_CT": ESC + b"\x61\x01",
    "TXT_ALIGN_RT": ESC + b"\x61\x02",
}


def custom_size(width: int, height: int) -> bytes:
    """GS ! n with both magnification factors clamped to 1..8."""
    width = min(max(int(width), 1), 8)
    height = min(max(int(height), 1), 8)
    return GS + b"\x21" + bytes(((width - 1) * 16 + (height - 1),))


# =============================================================================
# BARCODE
# =============================================================================

BARCODE_FORMAT: Final[Dict[str, bytes]] = {
    # HRI (human readable) text position
    "BARCODE_TXT_OFF": GS + b"\x48\x00",
    "BARCODE_TXT_ABV": GS + b"\x48\x01",
    "BARCODE_TXT_BLW": GS + b"\x48\x02",
    "BARCODE_TXT_BTH": GS + b"\x48\x03",
    "BARCODE_FONT_A": GS + b"\x66\x00",
    "BARCODE_FONT_B": GS + b"\x66\x01",
    "BARCODE_HEIGHT_DEFAULT": GS + b"\x68\x64",  # 100 dots
    "BARCODE_WIDTH_DEFAULT": GS + b"\x77\x01",
}

# Symbology selectors (GS k m)
BARCODE_TYPES: Final[Dict[str, bytes]] = {
    "UPC_A": GS + b"\x6b\x00",
    "UPC_E": GS + b"\x6b\x01",
    "EAN13": GS + b"\x6b\x02",
    "EAN8": GS + b"\x6b\x03",
    "CODE39": GS + b"\x6b\x04",
    "ITF": GS + b"\x6b\x05",
    "NW7": GS + b"\x6b\x06",
    "CODE93": GS + b"\x6b\x48",
    "CODE128": GS + b"\x6b\x49",
}

# Module width class -> GS w n
BARCODE_WIDTH: Final[Dict[int, bytes]] = {
    1: GS + b"\x77\x02",
    2: GS + b"\x77\x03",
    3: GS + b"\x77\x04",
    4: GS + b"\x77\x05",
    5: GS + b"\x77\x06",
}


def barcode_height(height: int) -> bytes:
    """GS h n, caller guarantees 1 <= height <= 255."""
    return GS + b"\x68" + bytes((height,))


# =============================================================================
# 2D CODE / IMAGES
# =============================================================================

CODE2D_FORMAT: Final[Dict[str, bytes]] = {
    "TYPE_PDF417": GS + b"Z" + b"\x00",
    "TYPE_DATAMATRIX": GS + b"Z" + b"\x01",
    "TYPE_QR": GS + b"Z" + b"\x02",
    "CODE2D": ESC + b"Z",
    "QR_LEVEL_L": b"L",
    "QR_LEVEL_M": b"M",
    "QR_LEVEL_Q": b"Q",
    "QR_LEVEL_H": b"H",
}

# ESC * m, column format bit image
BITMAP_FORMAT: Final[Dict[str, bytes]] = {
    "BITMAP_S8": ESC + b"\x2a\x00",
    "BITMAP_D8": ESC + b"\x2a\x01",
    "BITMAP_S24": ESC + b"\x2a\x20",
    "BITMAP_D24": ESC + b"\x2a\x21",
}

# GS v 0 m, raster bit image
GSV0_FORMAT: Final[Dict[str, bytes]] = {
    "GSV0_NORMAL": GS + b"\x76\x30\x00",
    "GSV0_DW": GS + b"\x76\x30\x01",
    "GSV0_DH": GS + b"\x76\x30\x02",
    "GSV0_DWDH": GS + b"\x76\x30\x03",
}

# =============================================================================
# MODEL OVERRIDES (qsprinter)
# =============================================================================


class ParamRange(NamedTuple):
    """Accepted range of a one-byte parameter and its fallback."""

    min: int
    max: int
    default: int

    def clamp(self, value: object) -> int:
        """Clamp ``value`` into range; missing or non-numeric gives default."""
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
            return self.default
        return int(min(max(value, self.min), self.max))


QS_BARCODE_MODE_ON: Final[bytes] = GS + b"\x45\x43\x01"
QS_BARCODE_MODE_OFF: Final[bytes] = GS + b"\x45\x43\x00"
QS_BARCODE_HEIGHT_DEFAULT: Final[bytes] = GS + b"\x68\xa2"  # 162 dots

QS_PIXEL_SIZE_CMD: Final[bytes] = ESC + b"\x23\x23\x51\x50\x49\x58"
QS_PIXEL_SIZE: Final[ParamRange] = ParamRange(min=1, max=24, default=12)
QS_VERSION_CMD: Final[bytes] = GS + b"\x28\x6b\x03\x00\x31\x43"
QS_VERSION: Final[ParamRange] = ParamRange(min=1, max=16, default=3)
QS_LEVEL_CMD: Final[bytes] = GS + b"\x28\x6b\x03\x00\x31\x45"
QS_LEVEL_OPTIONS: Final[Dict[str, bytes]] = {
    "L": b"\x30",
    "M": b"\x31",
    "Q": b"\x32",
    "H": b"\x33",
}
# Added to the payload length in both buffer commands
QS_LEN_OFFSET: Final[int] = 3
# CMD_P1 {len+offset, 2 bytes LE} CMD_P2 {data}
QS_SAVEBUF_P1: Final[bytes] = GS + b"\x28\x6b"
QS_SAVEBUF_P2: Final[bytes] = b"\x31\x50\x30"
# CMD_P1 {len+offset, 2 bytes LE} CMD_P2
QS_PRINTBUF_P1: Final[bytes] = GS + b"\x28\x6b"
QS_PRINTBUF_P2: Final[bytes] = b"\x31\x51\x30"
# Largest UTF-8 payload the save-to-buffer command accepts
QS_MAX_CODE_BYTES: Final[int] = 2710

_V = TypeVar("_V")


def lookup(table: Mapping[str, _V], key: str, what: str) -> _V:
    """Return ``table[key]`` or raise ConfigurationError naming ``what``."""
    try:
        return table[key]
    except KeyError:
        raise ConfigurationError(f"Unknown {what}: {key!r}") from None
