"""Tests for ink mask conversion and bitmap / raster packing."""

import asyncio

import pytest
from PIL import Image

from print_image import PixelGrid, PrintImage, get_image, is_ink, load_image

INK = (255, 255, 255, 255)
BLANK = (0, 0, 0, 255)


def image_from_rows(rows):
    """Build a PrintImage from strings where '#' is a marked dot."""
    height = len(rows)
    width = len(rows[0])
    data = bytearray()
    for row in rows:
        for ch in row:
            data += bytes(INK if ch == "#" else BLANK)
    return PrintImage(PixelGrid(width, height, 4, bytes(data)))


def mask_from_bitmap(lines, density, width, height):
    """Unpack ESC * strips back into a row-major mask."""
    per_column = density // 8
    mask = []
    for y in range(height):
        block, b = divmod(y, density)
        for x in range(width):
            byte = lines[block][x * per_column + (b >> 3)]
            mask.append(bool(byte & (0x80 >> (b & 0x7))))
    return tuple(mask)


def mask_from_raster(raster, width):
    mask = []
    for y in range(raster.height):
        for c in range(width):
            byte = raster.data[y * raster.width + c // 8]
            mask.append(bool(byte & (0x80 >> (c % 8))))
    return tuple(mask)


PATTERN = [
    "#.........#",
    ".#.......#.",
    "..#.....#..",
    "...#...#...",
    "....#.#....",
    ".....#.....",
    "....#.#....",
    "...#...#...",
    "..#.....#..",
    ".#.......#.",
]


class TestInkMask:
    """Tests for is_ink and mask construction."""

    def test_near_white_opaque_pixel_is_marked(self):
        assert is_ink(201, 201, 201, 255) is True

    def test_dark_pixel_is_not_marked(self):
        assert is_ink(0, 0, 0, 255) is False

    def test_threshold_is_strict(self):
        assert is_ink(200, 255, 255, 255) is False

    def test_transparent_pixel_is_not_marked(self):
        assert is_ink(255, 255, 255, 0) is False

    def test_rgb_grid_is_opaque(self):
        img = PrintImage(PixelGrid(2, 1, 3, bytes([255, 255, 255, 10, 10, 10])))
        assert img.mask == (True, False)

    def test_grey_alpha_grid(self):
        img = PrintImage(PixelGrid(2, 1, 2, bytes([255, 255, 255, 0])))
        assert img.mask == (True, False)

    def test_mask_is_row_major(self):
        img = image_from_rows(["#.", ".."])
        assert img.is_set(0, 0)
        assert not img.is_set(1, 0)
        assert not img.is_set(0, 1)

    def test_wrong_data_length_rejected(self):
        with pytest.raises(ValueError):
            PixelGrid(2, 2, 4, bytes(15))


class TestToBitmap:
    """Tests for PrintImage.to_bitmap."""

    @pytest.mark.parametrize("density", [8, 16, 24])
    def test_block_count_and_length(self, density):
        img = image_from_rows(PATTERN)
        bitmap = img.to_bitmap(density)
        assert bitmap.density == density
        assert len(bitmap.lines) == -(-img.height // density)
        for line in bitmap.lines:
            assert len(line) == img.width * density // 8

    def test_single_dot_density_8(self):
        assert image_from_rows(["#"]).to_bitmap(8).lines == [b"\x80"]

    def test_single_dot_density_24_zero_pads(self):
        assert image_from_rows(["#"]).to_bitmap(24).lines == [b"\x80\x00\x00"]

    def test_row_in_second_block(self):
        rows = ["."] * 9 + ["#"]
        assert image_from_rows(rows).to_bitmap(8).lines == [b"\x00", b"\x40"]

    def test_invalid_density(self):
        with pytest.raises(ValueError):
            image_from_rows(["#"]).to_bitmap(12)

    @pytest.mark.parametrize("density", [8, 16, 24])
    def test_unpacking_reproduces_mask(self, density):
        img = image_from_rows(PATTERN)
        lines = img.to_bitmap(density).lines
        assert mask_from_bitmap(lines, density, img.width, img.height) == img.mask


class TestToRaster:
    """Tests for PrintImage.to_raster."""

    def test_shape(self):
        img = image_from_rows(PATTERN)
        raster = img.to_raster()
        assert raster.width == 2  # ceil(11 / 8)
        assert raster.height == 10
        assert len(raster.data) == 20

    def test_bits_are_msb_first(self):
        raster = image_from_rows(["#........#"]).to_raster()
        assert raster.data == b"\x80\x40"

    def test_unpacking_reproduces_mask(self):
        img = image_from_rows(PATTERN)
        assert mask_from_raster(img.to_raster(), img.width) == img.mask


class TestLoadImage:
    """Tests for Pillow based loading."""

    def test_load_from_pil_image(self):
        img = load_image(Image.new("RGBA", (3, 2), (255, 255, 255, 255)))
        assert (img.width, img.height) == (3, 2)
        assert all(img.mask)

    def test_load_converts_mode(self):
        img = load_image(Image.new("L", (2, 2), 0))
        assert img.pixels.channels == 4
        assert not any(img.mask)

    def test_load_resizes(self):
        img = load_image(Image.new("RGB", (4, 4), (255, 255, 255)), size=(8, 2))
        assert (img.width, img.height) == (8, 2)

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "dot.png"
        Image.new("RGB", (5, 1), (255, 255, 255)).save(path)
        assert load_image(str(path)).width == 5

    def test_get_image_is_awaitable(self):
        img = asyncio.run(get_image(Image.new("RGB", (2, 2), (255, 255, 255))))
        assert isinstance(img, PrintImage)
