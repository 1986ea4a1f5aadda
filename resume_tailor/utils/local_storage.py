"""
Persistent string key-value storage backed by a JSON document.

Every mutation rewrites the whole document through a temp file and an atomic
replace, so readers never see a partial write.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional

from loguru import logger


class LocalStorage:
    """
    String key-value store persisted as a JSON object.

    Mirrors the browser localStorage contract: get_item / set_item / remove_item,
    with every mutation written through immediately.
    """

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(f"Ignoring unreadable local storage file: {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file first (atomic write pattern)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=self.path.parent, text=True)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            shutil.move(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
