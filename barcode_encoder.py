"""1D barcode encoding (GS k) with qsprinter-specific framing.

The whole command is assembled in memory so a rejected request never
leaves partial bytes in the output stream.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from commands import (
    BARCODE_FORMAT,
    BARCODE_TERMINATOR,
    BARCODE_TYPES,
    BARCODE_WIDTH,
    QS_BARCODE_HEIGHT_DEFAULT,
    QS_BARCODE_MODE_OFF,
    QS_BARCODE_MODE_ON,
    PrinterModel,
    barcode_height,
    lookup,
)
from errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

# Payload length (without check digit) for fixed-length symbologies
FIXED_LENGTHS = {"EAN13": 12, "EAN8": 7}
# Symbologies whose check digit is computed here
PARITY_SYMBOLOGIES = ("EAN13", "EAN8")
# Symbologies sent with an explicit length byte (GS k function B)
LENGTH_PREFIXED = ("CODE128", "CODE93")

_ALIASES = {"UPC-A": "UPC_A", "UPC-E": "UPC_E"}


@dataclass
class BarcodeOptions:
    """Rendering options for :func:`encode_barcode`.

    ``width`` is a module width class 1..5, ``height`` in dots 1..255,
    ``position`` one of OFF/ABV/BLW/BTH, ``font`` A or B.
    """

    width: Optional[int] = None
    height: Optional[int] = None
    position: str = "BLW"
    font: str = "A"
    include_parity: bool = True


def parity_digit(code: str) -> str:
    """EAN/UPC check digit: weights 3,1,3,... from the rightmost digit."""
    total = 0
    for i, digit in enumerate(reversed(code), start=1):
        total += int(digit) * (3 if i % 2 else 1)
    return str((10 - total % 10) % 10)


def length_prefix(code: str) -> bytes:
    """Single length byte preceding a function B payload."""
    if len(code) > 0xFF:
        raise ValidationError(f"Barcode payload too long: {len(code)} characters (max 255)")
    return bytes((len(code),))


def normalize_symbology(symbology: str) -> str:
    name = symbology.upper()
    return _ALIASES.get(name, name)


def encode_barcode(
    code: Union[str, int],
    symbology: Optional[str],
    options: Optional[BarcodeOptions] = None,
    model: PrinterModel = PrinterModel.GENERIC,
) -> bytes:
    """Return the complete command sequence printing ``code``.

    Raises:
        TypeError: symbology not given.
        ValidationError: wrong payload length for EAN13 / EAN8.
        ConfigurationError: unknown symbology, HRI position or font.
    """
    options = options or BarcodeOptions()
    font = options.font or "A"
    position = options.position or "BLW"

    if symbology is None:
        raise TypeError("barcode type is required")
    data = str(code)
    kind = normalize_symbology(symbology)

    expected = FIXED_LENGTHS.get(kind)
    if expected is not None and len(data) != expected:
        raise ValidationError(f"{kind} Barcode type requires code length {expected}")

    qs = model is PrinterModel.QSPRINTER
    parts: List[bytes] = []

    if qs:
        parts.append(QS_BARCODE_MODE_ON)
    else:
        # qsprinter firmware has no GS w
        parts.append(BARCODE_WIDTH.get(options.width, BARCODE_FORMAT["BARCODE_WIDTH_DEFAULT"]))

    if options.height is not None and 1 <= options.height <= 255:
        parts.append(barcode_height(options.height))
    elif qs:
        parts.append(QS_BARCODE_HEIGHT_DEFAULT)
    else:
        parts.append(BARCODE_FORMAT["BARCODE_HEIGHT_DEFAULT"])

    if not qs:
        parts.append(lookup(BARCODE_FORMAT, f"BARCODE_FONT_{font.upper()}", "barcode font"))
    parts.append(lookup(BARCODE_FORMAT, f"BARCODE_TXT_{position.upper()}", "barcode text position"))

    try:
        parts.append(BARCODE_TYPES[kind])
    except KeyError:
        raise ConfigurationError(f"Unsupported barcode type: {symbology!r}") from None

    try:
        payload = data.encode("ascii")
    except UnicodeEncodeError:
        raise ValidationError(f"Barcode data must be ASCII: {data!r}") from None
    if kind in PARITY_SYMBOLOGIES and not data.isdigit():
        raise ValidationError(f"{kind} Barcode type requires numeric code: {data!r}")
    if options.include_parity and kind in PARITY_SYMBOLOGIES:
        payload += parity_digit(data).encode("ascii")
    if kind in LENGTH_PREFIXED:
        payload = length_prefix(data) + payload
    parts.append(payload + BARCODE_TERMINATOR)

    if qs:
        parts.append(QS_BARCODE_MODE_OFF)

    result = b"".join(parts)
    logger.debug("Barcode %s (%s, model=%s): %d bytes", data, kind, model.value, len(result))
    return result
