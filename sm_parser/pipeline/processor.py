"""Process simfiles on disk into parsed results."""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path

from sm_parser.config import ParserConfig
from sm_parser.errors import ParseError
from sm_parser.parsers.file_reader import decode_simfile
from sm_parser.pipeline.cache import ProcessingCache
from sm_parser.schemas.simfile import Simfile

logger = logging.getLogger(__name__)


@dataclass
class ParsedSimfile:
    """A decoded simfile together with where it came from."""

    path: Path
    hash: str  # SHA-256 of the file contents
    simfile: Simfile


def compute_simfile_hash(path: Path) -> str:
    """Compute a SHA-256 hash of a simfile's raw bytes."""
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()


def _read_simfile_bytes(path: Path) -> tuple[bytes, str] | None:
    """Read a simfile and hash it, returning None (and logging why) on failure."""
    try:
        raw = Path(path).read_bytes()
    except OSError:
        logger.exception("Failed to read %s", path)
        return None
    return raw, hashlib.sha256(raw).hexdigest()


def _decode(path: Path, raw: bytes, content_hash: str, encoding: str) -> ParsedSimfile | None:
    try:
        simfile = decode_simfile(raw, encoding=encoding)
    except (OSError, EOFError, ParseError):
        logger.exception("Failed to process %s", path)
        return None
    return ParsedSimfile(path=Path(path), hash=content_hash, simfile=simfile)


def process_simfile(path: Path, encoding: str = "utf-8") -> ParsedSimfile | None:
    """Parse one simfile, returning None (and logging why) on failure."""
    loaded = _read_simfile_bytes(path)
    if loaded is None:
        return None
    raw, content_hash = loaded
    return _decode(path, raw, content_hash, encoding)


def find_simfiles(root: Path, patterns: list[str]) -> list[Path]:
    """Find simfiles under *root* matching any of *patterns*, sorted."""
    found: set[Path] = set()
    for pattern in patterns:
        found.update(p for p in Path(root).rglob(pattern) if p.is_file())
    return sorted(found)


def process_directory(
    root: Path,
    config: ParserConfig | None = None,
    cache: ProcessingCache | None = None,
) -> list[ParsedSimfile]:
    """Parse every simfile under *root*.

    Files that cannot be read or parsed are logged and skipped. When a
    *cache* is given, files whose content hash was already processed are
    skipped and newly processed hashes are recorded (the caller saves the
    cache).
    """
    config = config or ParserConfig()
    results: list[ParsedSimfile] = []
    skipped = 0

    for path in find_simfiles(root, config.patterns):
        loaded = _read_simfile_bytes(path)
        if loaded is None:
            continue
        raw, content_hash = loaded
        if cache is not None and cache.is_processed(content_hash):
            skipped += 1
            continue

        parsed = _decode(path, raw, content_hash, config.encoding)
        if parsed is None:
            continue
        results.append(parsed)
        if cache is not None:
            cache.mark_processed(parsed.hash)

    logger.info(
        "Parsed %d simfiles under %s (%d unchanged, skipped)",
        len(results), root, skipped,
    )
    return results
