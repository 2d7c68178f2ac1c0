"""Tests for QR code command encoding."""

import pytest

from code2d import encode_qrcode
from commands import PrinterModel
from errors import ConfigurationError, ValidationError

QS = PrinterModel.QSPRINTER


class TestGenericQr:
    """Tests for the single-command protocol."""

    def test_defaults(self):
        assert encode_qrcode("hi") == b"\x1dZ\x02\x1bZ\x03L\x06\x02\x00hi"

    def test_explicit_parameters_not_clamped(self):
        result = encode_qrcode("hi", version=40, level="h", size=30)
        assert result == b"\x1dZ\x02\x1bZ\x28H\x1e\x02\x00hi"

    def test_length_counts_utf8_bytes(self):
        result = encode_qrcode("Привет")
        payload = "Привет".encode("utf-8")
        assert result.endswith(len(payload).to_bytes(2, "little") + payload)

    def test_unknown_level(self):
        with pytest.raises(ConfigurationError):
            encode_qrcode("hi", level="X")


class TestQsprinterQr:
    """Tests for the five-step buffer protocol."""

    def test_full_sequence(self):
        result = encode_qrcode("hi", version=40, level="h", model=QS)
        assert result == (
            b"\x1b##QPIX\x0c"  # pixel size default 12
            b"\x1d(k\x03\x001C\x10"  # version clamped to 16
            b"\x1d(k\x03\x001E\x33"  # level H
            b"\x1d(k\x05\x001P0hi"  # save: len 2 + offset 3
            b"\x1d(k\x05\x001Q0"  # print from buffer
        )

    def test_small_values_clamped_to_min(self):
        result = encode_qrcode("hi", version=-2, size=-5, model=QS)
        assert result.startswith(b"\x1b##QPIX\x01\x1d(k\x03\x001C\x01")

    def test_non_numeric_uses_default(self):
        result = encode_qrcode("hi", version="big", size="huge", model=QS)
        assert result.startswith(b"\x1b##QPIX\x0c\x1d(k\x03\x001C\x03")

    def test_empty_content_rejected(self):
        with pytest.raises(ValidationError):
            encode_qrcode("", model=QS)

    def test_too_long_content_rejected(self):
        with pytest.raises(ValidationError):
            encode_qrcode("a" * 2711, model=QS)

    def test_max_length_accepted(self):
        assert encode_qrcode("a" * 2710, model=QS)
