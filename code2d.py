"""QR code command encoding for generic and qsprinter models.

Generic printers take a single ``GS Z`` / ``ESC Z`` command. The qsprinter
firmware needs five: pixel size, version, error correction level, save the
payload to its symbol buffer, then print from that buffer.
"""

from __future__ import annotations

import logging
import struct
from typing import List, Optional, Union

from commands import (
    CODE2D_FORMAT,
    QS_LEN_OFFSET,
    QS_LEVEL_CMD,
    QS_LEVEL_OPTIONS,
    QS_MAX_CODE_BYTES,
    QS_PIXEL_SIZE,
    QS_PIXEL_SIZE_CMD,
    QS_PRINTBUF_P1,
    QS_PRINTBUF_P2,
    QS_SAVEBUF_P1,
    QS_SAVEBUF_P2,
    QS_VERSION,
    QS_VERSION_CMD,
    PrinterModel,
    lookup,
)
from errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_VERSION = 3
DEFAULT_LEVEL = "L"
DEFAULT_SIZE = 6


def _uint8(value: int, what: str) -> bytes:
    if not 0 <= value <= 0xFF:
        raise ValidationError(f"{what} must fit in one byte, got {value}")
    return bytes((value,))


def encode_qrcode(
    content: Union[str, bytes],
    version: Optional[int] = None,
    level: Optional[str] = None,
    size: Optional[int] = None,
    model: PrinterModel = PrinterModel.GENERIC,
) -> bytes:
    """Return the command sequence printing ``content`` as a QR code."""
    data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    level_name = (level or DEFAULT_LEVEL).upper()

    if model is PrinterModel.QSPRINTER:
        result = _encode_qsprinter(data, version, level_name, size)
    else:
        result = _encode_generic(data, version, level_name, size)
    logger.debug("QR code (model=%s): %d payload bytes, %d total", model.value, len(data), len(result))
    return result


def _encode_generic(data: bytes, version: Optional[int], level: str, size: Optional[int]) -> bytes:
    if len(data) > 0xFFFF:
        raise ValidationError(f"QR payload too long: {len(data)} bytes")
    return b"".join(
        [
            CODE2D_FORMAT["TYPE_QR"],
            CODE2D_FORMAT["CODE2D"],
            _uint8(version or DEFAULT_VERSION, "QR version"),
            lookup(CODE2D_FORMAT, f"QR_LEVEL_{level}", "QR error correction level"),
            _uint8(size or DEFAULT_SIZE, "QR pixel size"),
            struct.pack("<H", len(data)),
            data,
        ]
    )


def _encode_qsprinter(data: bytes, version: object, level: str, size: object) -> bytes:
    # Either bound rejects; the historical driver joined them with "and", so it never fired
    if len(data) < 1 or len(data) > QS_MAX_CODE_BYTES:
        raise ValidationError(
            f"Invalid code length in byte. Must be between 1 and {QS_MAX_CODE_BYTES}"
        )

    framed_len = struct.pack("<H", len(data) + QS_LEN_OFFSET)
    parts: List[bytes] = [
        QS_PIXEL_SIZE_CMD,
        bytes((QS_PIXEL_SIZE.clamp(size),)),
        QS_VERSION_CMD,
        bytes((QS_VERSION.clamp(version),)),
        QS_LEVEL_CMD,
        lookup(QS_LEVEL_OPTIONS, level, "QR error correction level"),
        # Load the symbol buffer
        QS_SAVEBUF_P1,
        framed_len,
        QS_SAVEBUF_P2,
        data,
        # Print what was loaded
        QS_PRINTBUF_P1,
        framed_len,
        QS_PRINTBUF_P2,
    ]
    return b"".join(parts)
