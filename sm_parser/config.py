"""Parser and pipeline configuration in one dataclass."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

# Maximum Parquet file size in bytes before starting a new file.
DEFAULT_MAX_FILE_BYTES: int = 1_000_000_000  # 1 GB


@dataclass
class ParserConfig:
    """Settings shared by the CLI and the batch pipeline."""

    # Decoding
    encoding: str = "utf-8"  # used when the source yields bytes

    # Discovery
    patterns: list[str] = field(default_factory=lambda: ["*.sm"])

    # Export
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES

    def save(self, path: Path) -> None:
        """Save config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> ParserConfig:
        """Load config from JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        # Only pass known fields to handle forward/backward compat
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
