"""Track processed simfiles to avoid re-work."""

import json
from pathlib import Path


class ProcessingCache:
    """Tracks which simfile contents have already been processed."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._processed_path = self.cache_dir / "processed_hashes.json"
        self.processed: set[str] = set(self._load(self._processed_path).keys())

    @staticmethod
    def _load(path: Path) -> dict:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
        return {}

    def is_processed(self, content_hash: str) -> bool:
        return content_hash in self.processed

    def mark_processed(self, content_hash: str) -> None:
        self.processed.add(content_hash)

    def save(self) -> None:
        processed_dict = {h: True for h in sorted(self.processed)}
        self._processed_path.write_text(json.dumps(processed_dict, indent=2), encoding="utf-8")
