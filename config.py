"""Configuration module - loads encoder defaults from .env file."""

import logging
import os

from dotenv import load_dotenv

# Optional for a library: without a .env file every default below applies
load_dotenv()

logger = logging.getLogger(__name__)


def _parse_int(key: str, default: int) -> int:
    """Parse integer env var; log warning and fall back on garbage."""
    value = os.getenv(key)
    if not value or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Invalid integer for %s in .env: %r", key, value)
        return default


def _parse_float(key: str, default: float) -> float:
    """Parse float env var; log warning and fall back on garbage."""
    value = os.getenv(key)
    if not value or not value.strip():
        return default
    try:
        return float(value.strip())
    except ValueError:
        logger.warning("Invalid number for %s in .env: %r", key, value)
        return default


# Text codec used by Printer.text() and table rendering (any Python codec name)
ENCODING: str = os.getenv("ESCPOS_ENCODING", "GB18030").strip()
# Printable columns of the paper roll
WIDTH: int = _parse_int("ESCPOS_WIDTH", 48)
# Columns restored by Printer.font() when no explicit width was given
FONT_A_WIDTH: int = _parse_int("ESCPOS_FONT_A_WIDTH", 42)
FONT_B_WIDTH: int = _parse_int("ESCPOS_FONT_B_WIDTH", 56)
# Printer model: empty / "generic" or "qsprinter"
MODEL: str = os.getenv("ESCPOS_MODEL", "").strip()

# Seconds to wait after bitmap data so slow links (serial) can drain
IMAGE_DRAIN_DELAY: float = _parse_float("ESCPOS_IMAGE_DRAIN_DELAY", 0.2)
# Default ESC * density name: s8, d8, s24, d24
IMAGE_DENSITY: str = os.getenv("ESCPOS_IMAGE_DENSITY", "d24").strip()

LOG_LEVEL: str = os.getenv("ESCPOS_LOG_LEVEL", "INFO").strip().upper()
