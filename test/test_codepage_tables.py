"""Tests for the code page test sheet CLI."""

from codepage_tables import build_sheet, main


class TestBuildSheet:
    """Tests for build_sheet."""

    def test_selects_each_table(self):
        data = build_sheet([17, 6]).buffer
        assert data.startswith(b"\x1b@")
        assert b"\x1bt\x11" in data
        assert b"\x1bt\x06" in data

    def test_control_bytes_are_blanked(self):
        data = build_sheet([0]).buffer
        # row 1 (0x10..0x1f) holds ESC and GS, both replaced by spaces
        row = bytes(range(0x10, 0x1B)) + b" " + bytes((0x1C,)) + b" " + bytes((0x1E, 0x1F))
        assert row + b"\n" in data

    def test_ends_with_partial_cut(self):
        assert build_sheet([0]).buffer.endswith(b"\x1dV\x01")


class TestMain:
    """Tests for the command line entry point."""

    def test_writes_output_file(self, tmp_path):
        out = tmp_path / "sheet.bin"
        main(["17", "-o", str(out)])
        data = out.read_bytes()
        assert b"\x1bt\x11" in data
        assert data.endswith(b"\x1dV\x01")
