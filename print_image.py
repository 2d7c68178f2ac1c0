"""Monochrome image conversion for ESC * bit images and GS v 0 rasters.

A :class:`PrintImage` reduces a rectangular RGBA pixel grid to an ink mask
once, then projects that mask into the two layouts the printer accepts:

* bitmap: vertical strips ``density`` dots tall, column-major, MSB first;
* raster: row-major, one bit per dot, rows padded to whole bytes.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

BITMAP_DENSITIES = (8, 16, 24)


@dataclass(frozen=True)
class PixelGrid:
    """Decoded pixels: ``channels`` values per pixel, row-major."""

    width: int
    height: int
    channels: int
    data: Union[bytes, bytearray, Sequence[int]]

    def __post_init__(self) -> None:
        if self.channels not in (1, 2, 3, 4):
            raise ValueError(f"Unsupported channel count: {self.channels}")
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel data has {len(self.data)} values, expected {expected} "
                f"({self.width}x{self.height}x{self.channels})"
            )

    def rgba(self, index: int) -> Tuple[int, int, int, int]:
        """Return pixel ``index`` as an (r, g, b, a) tuple."""
        base = index * self.channels
        px = self.data[base:base + self.channels]
        if self.channels == 1:
            return px[0], px[0], px[0], 255
        if self.channels == 2:
            return px[0], px[0], px[0], px[1]
        if self.channels == 3:
            return px[0], px[1], px[2], 255
        return px[0], px[1], px[2], px[3]


def is_ink(r: int, g: int, b: int, a: int) -> bool:
    """Mask predicate: a visible, near-white pixel is marked.

    This is the opposite of the usual "dark pixel prints" rule and is kept
    as is: callers feed pre-inverted sources. Swap this function to change
    the thresholding.
    """
    return a != 0 and r > 200 and g > 200 and b > 200


@dataclass(frozen=True)
class Bitmap:
    """Column format projection, one byte string per strip."""

    lines: List[bytes]
    density: int


@dataclass(frozen=True)
class Raster:
    """Raster projection; ``width`` is in bytes, ``height`` in dots."""

    data: bytes
    width: int
    height: int


class PrintImage:
    """Immutable ink mask built from a pixel grid."""

    def __init__(self, pixels: PixelGrid) -> None:
        self.pixels = pixels
        self._mask: Tuple[bool, ...] = tuple(
            is_ink(*pixels.rgba(i)) for i in range(pixels.width * pixels.height)
        )

    @property
    def width(self) -> int:
        return self.pixels.width

    @property
    def height(self) -> int:
        return self.pixels.height

    @property
    def mask(self) -> Tuple[bool, ...]:
        """Row-major ink mask, ``width * height`` entries."""
        return self._mask

    def is_set(self, x: int, y: int) -> bool:
        return self._mask[y * self.width + x]

    def to_bitmap(self, density: int = 24) -> Bitmap:
        """Pack the mask into ``ceil(height / density)`` column strips.

        Each strip holds ``width * density / 8`` bytes: for every column,
        ``density / 8`` bytes top to bottom, most significant bit first.
        Rows past the bottom of the image stay zero.
        """
        if density not in BITMAP_DENSITIES:
            raise ValueError(f"Bitmap density must be one of {BITMAP_DENSITIES}, got {density}")
        width, height = self.width, self.height
        per_column = density // 8
        blocks = -(-height // density)

        lines: List[bytes] = []
        for y in range(blocks):
            line = bytearray(width * per_column)
            for x in range(width):
                for b in range(density):
                    row = y * density + b
                    if row < height and self._mask[row * width + x]:
                        line[x * per_column + (b >> 3)] |= 0x80 >> (b & 0x7)
            lines.append(bytes(line))
        return Bitmap(lines=lines, density=density)

    def to_raster(self) -> Raster:
        """Pack the mask row by row into ``ceil(width / 8)`` bytes per row."""
        width, height = self.width, self.height
        n = -(-width // 8)

        data = bytearray(height * n)
        for y in range(height):
            for x in range(n):
                for b in range(8):
                    c = x * 8 + b
                    if c < width and self._mask[y * width + c]:
                        data[y * n + x] |= 0x80 >> b
        return Raster(data=bytes(data), width=n, height=height)


def load_image(source: Any, size: Optional[Tuple[int, int]] = None) -> PrintImage:
    """Decode ``source`` with Pillow and build a :class:`PrintImage`.

    ``source`` may be a path, a binary file object or a ``PIL.Image.Image``.
    With ``size`` the picture is resized to exactly (width, height) first.
    """
    from PIL import Image

    img = source if isinstance(source, Image.Image) else Image.open(source)
    img = img.convert("RGBA")
    if size is not None and img.size != tuple(size):
        img = img.resize(tuple(size), Image.Resampling.LANCZOS)

    logger.debug("Loaded image: mode=%s, size=%s", img.mode, img.size)
    return PrintImage(PixelGrid(img.width, img.height, 4, img.tobytes()))


async def get_image(source: Any, size: Optional[Tuple[int, int]] = None) -> PrintImage:
    """Non-blocking :func:`load_image` (decodes in the default executor)."""
    return await asyncio.get_running_loop().run_in_executor(None, load_image, source, size)
