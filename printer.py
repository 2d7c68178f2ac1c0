"""ESC/POS printer session: a fluent builder for one receipt's byte stream.

Every call appends command bytes to the session buffer and returns the
session, so calls chain:

    p = Printer(encoding="cp866", width=32)
    p.align("ct").style("B").text("RECEIPT").style("NORMAL")
    p.table_custom([{"text": "Tea", "width": 0.5}, {"text": "1.50", "align": "RIGHT"}])
    p.cut()
    p.flush(escpos.printer.Serial("/dev/serial0"))

Nothing is sent anywhere until :meth:`Printer.flush` hands the bytes to a
python-escpos printer object. :meth:`Printer.image` is the only coroutine:
it pauses after the bitmap so slow links can drain, and the session refuses
other writes until it returns.
"""

import asyncio
import codecs
import logging
import struct
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import config
from barcode_encoder import BarcodeOptions, encode_barcode
from code2d import encode_qrcode
from commands import (
    BEEP,
    BITMAP_FORMAT,
    CASH_DRAWER,
    CHARACTER_SPACING,
    CODE_TABLE_SELECT,
    COLOR,
    EOL,
    FEED_CONTROL_SEQUENCES,
    GSV0_FORMAT,
    HARDWARE,
    LINE_SPACING,
    MARGINS,
    PAPER,
    TEXT_FORMAT,
    PrinterModel,
    custom_size,
    lookup,
)
from errors import ConfigurationError, ValidationError
from formatter import TextStyle, style_sequence
from print_image import PrintImage
from table_layout import layout_simple, layout_table

logger = logging.getLogger(__name__)

_ALIGN_ALIASES = {"LEFT": "LT", "CENTER": "CT", "RIGHT": "RT"}
_RASTER_ALIASES = {"DHDW": "DWDH", "DWH": "DWDH", "DHW": "DWDH"}


def _uint8(value: int) -> bytes:
    if not 0 <= int(value) <= 0xFF:
        raise ValidationError(f"Value must fit in one byte, got {value}")
    return bytes((int(value),))


def _uint16le(value: int) -> bytes:
    if not 0 <= int(value) <= 0xFFFF:
        raise ValidationError(f"Value must fit in two bytes, got {value}")
    return struct.pack("<H", int(value))


class Printer:
    """Builder for an ESC/POS command stream."""

    def __init__(
        self,
        encoding: Optional[str] = None,
        width: Optional[int] = None,
        model: Union[PrinterModel, str, None] = None,
    ) -> None:
        self.encoding: str = encoding or config.ENCODING
        self._fixed_width = width
        self.width: int = width or config.WIDTH
        self._model = PrinterModel.parse(model if model is not None else config.MODEL)
        self._buffer = bytearray()
        self._draining = False

    # ------------------------
    # Output stream
    # ------------------------
    def _check_idle(self) -> None:
        if self._draining:
            raise RuntimeError("Printer is draining image data; await image() before the next command")

    def _write(self, data: bytes) -> None:
        self._check_idle()
        self._buffer += data

    def _encode(self, content: str, encoding: Optional[str] = None) -> bytes:
        return content.encode(encoding or self.encoding)

    @property
    def buffer(self) -> bytes:
        """Bytes appended so far."""
        return bytes(self._buffer)

    def flush(self, device: Any = None) -> bytes:
        """Empty the buffer, hand it to ``device`` (a python-escpos printer) and return it."""
        self._check_idle()
        data = bytes(self._buffer)
        self._buffer.clear()
        if device is not None:
            device._raw(data)
            logger.info("Flushed %d bytes to %s", len(data), type(device).__name__)
        return data

    # ------------------------
    # Session state
    # ------------------------
    @property
    def printer_model(self) -> PrinterModel:
        return self._model

    def model(self, model: Union[PrinterModel, str, None]) -> "Printer":
        """Select model-specific commands: None/"generic" or "qsprinter"."""
        self._check_idle()
        self._model = PrinterModel.parse(model)
        return self

    def encode(self, encoding: str) -> "Printer":
        """Set the codec used by text(), tables and drawn lines."""
        self._check_idle()
        try:
            codecs.lookup(encoding)
        except LookupError:
            raise ConfigurationError(f"Unknown text encoding: {encoding!r}") from None
        self.encoding = encoding
        return self

    def set_character_code_table(self, code_table: int) -> "Printer":
        """ESC t n: select the printer's character code table."""
        self._write(CODE_TABLE_SELECT + _uint8(code_table))
        return self

    def margin_bottom(self, size: int) -> "Printer":
        self._write(MARGINS["BOTTOM"] + _uint8(size))
        return self

    def margin_left(self, size: int) -> "Printer":
        self._write(MARGINS["LEFT"] + _uint8(size))
        return self

    def margin_right(self, size: int) -> "Printer":
        self._write(MARGINS["RIGHT"] + _uint8(size))
        return self

    # ------------------------
    # Text
    # ------------------------
    def print(self, content: Union[str, bytes, bytearray]) -> "Printer":
        """Append ``content`` as is (str is encoded with the session codec)."""
        self._write(bytes(content) if isinstance(content, (bytes, bytearray)) else self._encode(content))
        return self

    def println(self, content: Union[str, bytes]) -> "Printer":
        if isinstance(content, (bytes, bytearray)):
            return self.print(bytes(content) + EOL)
        return self.print(content + EOL.decode("ascii"))

    def new_line(self) -> "Printer":
        return self.print(EOL)

    def text(self, content: Any, encoding: Optional[str] = None) -> "Printer":
        """Encoded text followed by a line feed."""
        return self.print(self._encode(f"{content}\n", encoding))

    def pure_text(self, content: Any, encoding: Optional[str] = None) -> "Printer":
        """Encoded text without line feed."""
        return self.print(self._encode(f"{content}", encoding))

    def draw_line(self, character: str = "-") -> "Printer":
        """A full-width rule of ``character``."""
        self._write(self._encode(character) * self.width + EOL)
        return self

    def table(self, data: Sequence[Any], encoding: Optional[str] = None) -> "Printer":
        """Evenly split, left aligned row."""
        self._write(self._encode(layout_simple(data, self.width) + "\n", encoding))
        return self

    def table_custom(
        self,
        data: Sequence[Any],
        size: Tuple[int, int] = (1, 1),
        encoding: Optional[str] = None,
    ) -> "Printer":
        """Row of aligned, optionally styled cells; long text wraps below.

        ``data`` items are :class:`table_layout.Cell` objects or mappings
        with ``text``, ``align``, ``style``, ``width`` or ``cols`` keys.
        """
        lines = layout_table(data, self.width, size)
        self._write(b"".join(self._encode(line + "\n", encoding) for line in lines))
        return self

    def feed(self, n: int = 1) -> "Printer":
        """Print ``n`` line feeds."""
        self._write(EOL * n)
        return self

    def control(self, ctrl: str) -> "Printer":
        """Feed control: LF, GLF, FF, CR, HT, VT."""
        self._write(lookup(FEED_CONTROL_SEQUENCES, f"CTL_{ctrl.upper()}", "control sequence"))
        return self

    def hardware(self, hw: str) -> "Printer":
        """Hardware command: INIT, SELECT, RESET."""
        self._write(lookup(HARDWARE, f"HW_{hw.upper()}", "hardware command"))
        return self

    def align(self, align: str) -> "Printer":
        """Justification: LT/CT/RT (or left/center/right)."""
        name = align.upper()
        name = _ALIGN_ALIASES.get(name, name)
        self._write(lookup(TEXT_FORMAT, f"TXT_ALIGN_{name}", "alignment"))
        return self

    def font(self, family: str) -> "Printer":
        """Select font A, B or C; resets the column count to the font's default."""
        name = family.upper()
        self._write(lookup(TEXT_FORMAT, f"TXT_FONT_{name}", "font"))
        if self._fixed_width:
            self.width = self._fixed_width
        elif name == "A":
            self.width = config.FONT_A_WIDTH
        else:
            self.width = config.FONT_B_WIDTH
        return self

    def style(
        self,
        bold_or_mnemonic: Union[str, bool, TextStyle, None] = False,
        italic: bool = False,
        underline: Union[int, bool] = 0,
    ) -> "Printer":
        """Bold/italic/underline, e.g. ``style("BU2")`` or ``style(True, False, 1)``."""
        self._write(style_sequence(bold_or_mnemonic, italic, underline))
        return self

    def size(self, width: int, height: int) -> "Printer":
        """Character magnification, 1..8 in each direction."""
        self._write(custom_size(width, height))
        return self

    def spacing(self, n: Optional[int] = None) -> "Printer":
        """Right-side character spacing; None restores the default."""
        if n is None:
            self._write(CHARACTER_SPACING["CS_DEFAULT"])
        else:
            self._write(CHARACTER_SPACING["CS_SET"] + _uint8(n))
        return self

    def line_space(self, n: Optional[int] = None) -> "Printer":
        """Line spacing in dots; None restores the default."""
        if n is None:
            self._write(LINE_SPACING["LS_DEFAULT"])
        else:
            self._write(LINE_SPACING["LS_SET"] + _uint8(n))
        return self

    # ------------------------
    # Codes
    # ------------------------
    def barcode(
        self,
        code: Union[str, int],
        barcode_type: Optional[str],
        options: Union[BarcodeOptions, Mapping[str, Any], int, None] = None,
        *legacy: Any,
    ) -> "Printer":
        """Print a 1D barcode; EAN13/EAN8 take 12/7 digits and get a check digit.

        Options are a :class:`BarcodeOptions`, a mapping of its fields, or the
        positional form ``barcode(code, type, width, height, position, font)``.
        """
        if isinstance(options, (BarcodeOptions, Mapping)):
            if legacy:
                raise TypeError("barcode() takes either an options object or positional options, not both")
            if isinstance(options, Mapping):
                options = BarcodeOptions(**options)
        elif options is not None or legacy:
            if len(legacy) > 3:
                raise TypeError("barcode() takes at most width, height, position and font positionally")
            width, height, position, font = (options, *legacy, None, None, None)[:4]
            options = BarcodeOptions(width=width, height=height, position=position or "BLW", font=font or "A")
        self._write(encode_barcode(code, barcode_type, options, self._model))
        return self

    def qrcode(
        self,
        content: Union[str, bytes],
        version: Optional[int] = None,
        level: Optional[str] = None,
        size: Optional[int] = None,
    ) -> "Printer":
        """Print a QR code using the protocol of the selected model."""
        self._write(encode_qrcode(content, version, level, size, self._model))
        return self

    # ------------------------
    # Images
    # ------------------------
    async def image(self, image: PrintImage, density: Optional[str] = None) -> "Printer":
        """Print ``image`` as ESC * bit image strips (S8, D8, S24, D24).

        Line spacing is set to 0 for the strips and restored afterwards.
        Waits ``config.IMAGE_DRAIN_DELAY`` seconds after the data so the
        printer can process it over slow connections (e.g. serial).
        """
        if not isinstance(image, PrintImage):
            raise TypeError("Only PrintImage supported")
        name = (density or config.IMAGE_DENSITY).upper()
        header = lookup(BITMAP_FORMAT, f"BITMAP_{name}", "bitmap density")
        n = 1 if name in ("D8", "S8") else 3
        bitmap = image.to_bitmap(n * 8)

        data = bytearray(LINE_SPACING["LS_SET"] + _uint8(0))
        for line in bitmap.lines:
            data += header + _uint16le(len(line) // n) + line + EOL
        self._write(bytes(data))
        logger.debug("Image %dx%d: %d strips, %d bytes", image.width, image.height, len(bitmap.lines), len(data))

        self._draining = True
        try:
            await asyncio.sleep(config.IMAGE_DRAIN_DELAY)
        finally:
            self._draining = False
        return self.line_space()

    def raster(self, image: PrintImage, mode: str = "NORMAL") -> "Printer":
        """Print ``image`` with GS v 0; mode NORMAL, DW, DH or DWDH."""
        if not isinstance(image, PrintImage):
            raise TypeError("Only PrintImage supported")
        name = mode.upper()
        name = _RASTER_ALIASES.get(name, name)
        header = lookup(GSV0_FORMAT, f"GSV0_{name}", "raster mode")
        raster = image.to_raster()
        self._write(header + _uint16le(raster.width) + _uint16le(raster.height) + raster.data)
        return self

    # ------------------------
    # Peripherals / paper
    # ------------------------
    def cashdraw(self, pin: int = 2) -> "Printer":
        """Kick the cash drawer on pin 2 or 5."""
        self._write(CASH_DRAWER["CD_KICK_5" if pin == 5 else "CD_KICK_2"])
        return self

    def beep(self, n: int, t: int) -> "Printer":
        """Buzz ``n`` times, each ``t * 100`` ms long."""
        self._write(BEEP + _uint8(n) + _uint8(t))
        return self

    def cut(self, partial: bool = False, feed: int = 3) -> "Printer":
        """Feed ``feed`` lines, then cut (partial cut is not on every printer)."""
        self.feed(feed)
        self._write(PAPER["PAPER_PART_CUT" if partial else "PAPER_FULL_CUT"])
        return self

    def color(self, color: int) -> "Printer":
        """Select print colour 0 (black) or 1 (red, if fitted)."""
        if color not in (0, 1) or isinstance(color, bool):
            logger.warning("Unknown color %r, falling back to 0", color)
            color = 0
        self._write(COLOR[color])
        return self

    def set_reverse_colors(self, reverse: bool) -> "Printer":
        """White on black printing on/off."""
        self._write(COLOR["REVERSE" if reverse else "UNREVERSE"])
        return self

    def raw(self, data: Union[bytes, bytearray, str]) -> "Printer":
        """Append a low level command unchanged.

        Accepts bytes or a hex string, optionally separated by spaces or
        colons: ``raw("1d:77:06")``, ``raw("1d 77 06")``, ``raw(b"\\x1dw\\x06")``.
        """
        if isinstance(data, (bytes, bytearray)):
            self._write(bytes(data))
        elif isinstance(data, str):
            cleaned = "".join(ch for ch in data if not ch.isspace() and ch != ":")
            try:
                payload = bytes.fromhex(cleaned)
            except ValueError:
                raise ValidationError(f"Invalid hex command: {data!r}") from None
            self._write(payload)
        else:
            raise TypeError(f"raw() expects bytes or a hex string, got {type(data).__name__}")
        return self

    # ------------------------
    # Star line mode
    # ------------------------
    def star_full_cut(self) -> "Printer":
        self._write(PAPER["STAR_FULL_CUT"])
        return self

    def emphasize(self) -> "Printer":
        self._write(TEXT_FORMAT["STAR_TXT_EMPHASIZED"])
        return self

    def cancel_emphasize(self) -> "Printer":
        self._write(TEXT_FORMAT["STAR_CANCEL_TXT_EMPHASIZED"])
        return self
