import json
from typing import Any
from pathlib import Path

from ..utils.logger import get_logger

log = get_logger("storage")


class StorageManager:
    """JSON file storage rooted in a data directory."""

    def __init__(self, data_dir: str = "data"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.data_dir / filename

    def load(self, filename: str, default: Any = None) -> Any:
        """Load data from a JSON file, returning ``default`` if missing or unreadable."""
        filepath = self.path_for(filename)

        if not filepath.exists():
            return default

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            log.warning(f"Error loading {filename}: {e}")
            return default

    def save(self, filename: str, data: Any) -> bool:
        """Write data to a JSON file. Returns False instead of raising on failure."""
        filepath = self.path_for(filename)
        tmp_path = filepath.with_suffix(filepath.suffix + ".tmp")

        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(filepath)
            return True
        except (OSError, TypeError, ValueError) as e:
            log.error(f"Error saving {filename}: {e}")
            if tmp_path.exists():
                tmp_path.unlink()
            return False
