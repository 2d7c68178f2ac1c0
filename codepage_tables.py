#!/usr/bin/env python3
"""Build an ESC/POS code page test sheet.

Usage examples (from project root, with venv activated):

  python codepage_tables.py
      → writes the sheet for code table 0 (PC437) to stdout.

  python codepage_tables.py 17 6 -o sheet.bin
      → tables 17 and 6, saved to sheet.bin.

  python codepage_tables.py 17 --device /dev/usb/lp0
      → sends the sheet through python-escpos' File printer.

Encoder defaults (width, model, log level) are taken from config.py / .env.
"""

from __future__ import annotations

import argparse
import logging
import sys

import config
from commands import CTL_BYTES
from printer import Printer

logger = logging.getLogger(__name__)


def print_codepage(p: Printer, code_table: int) -> None:
    """Append a 16x16 grid of every byte of one code table."""
    p.set_character_code_table(code_table)

    # Table header (top row)
    p.font("b")
    p.println("  " + "".join(hex(s)[2:] for s in range(0, 16)))
    p.font("a")

    # Table body
    for x in range(0, 16):
        p.font("b")
        p.print(f"{hex(x)[2:]} ".encode("ascii"))
        p.font("a")

        row = bytearray()
        for y in range(0, 16):
            byte = x * 16 + y
            # Avoid sending control characters directly
            row += b" " if byte in CTL_BYTES else bytes((byte,))
        p.println(bytes(row))


def build_sheet(code_tables: list[int], model: str | None = None) -> Printer:
    """Return a session holding the whole test sheet."""
    p = Printer(encoding="ascii", model=model)
    p.hardware("init")

    # Small header
    p.align("ct").size(2, 2).text("Code page tables").feed(1).size(1, 1).align("lt")

    for code_table in code_tables:
        p.size(2, 2).text(f"Table {code_table}").size(1, 1)
        print_codepage(p, code_table)
        p.feed(2)

    p.set_character_code_table(0)
    return p.cut(partial=True)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build an ESC/POS code page test sheet.")
    parser.add_argument(
        "tables",
        nargs="*",
        type=int,
        default=[0],
        help="Numeric code table IDs for ESC t (default: 0).",
    )
    parser.add_argument("-o", "--output", help="Write the bytes to this file instead of stdout.")
    parser.add_argument("--device", help="Send the bytes to this device file (e.g. /dev/usb/lp0).")
    parser.add_argument("--model", default=config.MODEL, help="Printer model: generic or qsprinter.")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL)

    p = build_sheet(args.tables, args.model)

    if args.device:
        from escpos.printer import File

        device = File(args.device)
        device.open()
        try:
            p.flush(device)
        finally:
            device.close()
    elif args.output:
        data = p.flush()
        with open(args.output, "wb") as fh:
            fh.write(data)
        logger.info("Wrote %d bytes to %s", len(data), args.output)
    else:
        sys.stdout.buffer.write(p.flush())


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
