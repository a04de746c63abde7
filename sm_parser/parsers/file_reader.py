"""Utility to read .sm files from disk with automatic gzip detection."""

import gzip
import io
from pathlib import Path

from sm_parser.parsers.simfile_parser import parse
from sm_parser.schemas.simfile import Simfile

GZIP_MAGIC = b'\x1f\x8b'


def decode_simfile(raw: bytes, encoding: str = "utf-8") -> Simfile:
    """Parse raw file contents, gunzipping them first if compressed."""
    if raw[:2] == GZIP_MAGIC:
        raw = gzip.decompress(raw)
    return parse(io.BytesIO(raw), encoding=encoding)


def read_simfile(filepath: Path, encoding: str = "utf-8") -> Simfile:
    """Read a .sm file, auto-detecting gzip compression. Returns the parsed Simfile."""
    return decode_simfile(Path(filepath).read_bytes(), encoding=encoding)
