"""
Per-profile folder preferences.

Persistent SQLite key-value table mapping "directory-<profile id>" to a
serialized DirectoryHandle. Each operation opens its own connection, so
callers never share cursors; concurrent writers to the same key resolve as
last-write-wins.
"""

import json
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Dict, Iterable, Optional

from resume_tailor.contexts.output.handles import DirectoryHandle
from resume_tailor.contexts.output.logger import _log_debug, _log_warning
from resume_tailor.exceptions import PreferenceStoreError

DEFAULT_TABLE = "settings"
DEFAULT_KEY_PREFIX = "directory-"


class FolderPreferenceStore:
    """
    Remembered output folder per profile.

    Example:
        store = FolderPreferenceStore(config.database_path)
        store.set("42", DirectoryHandle(Path("~/Resumes/Acme").expanduser()))
        store.get("42")      # DirectoryHandle(...)
        store.clear("42")
        store.get("42")      # None
    """

    def __init__(
        self,
        db_path: Path,
        table: str = DEFAULT_TABLE,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        if not table.isidentifier():
            raise ValueError(f"Invalid table name: {table!r}")
        self.db_path = Path(db_path)
        self.table = table
        self.key_prefix = key_prefix
        self._opened = False

    def key_for(self, profile_id: str) -> str:
        return f"{self.key_prefix}{profile_id}"

    def open(self) -> None:
        """Create the database and table if missing. Safe to call repeatedly."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(sqlite3.connect(str(self.db_path))) as conn:
            conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self.table} (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )
            conn.commit()
        self._opened = True

    def _connect(self) -> sqlite3.Connection:
        if not self._opened:
            self.open()
        return sqlite3.connect(str(self.db_path))

    def get(self, profile_id: str) -> Optional[DirectoryHandle]:
        """
        Remembered folder for a profile, or None.

        Raises:
            PreferenceStoreError: If the database or the stored record cannot be read
        """
        key = self.key_for(profile_id)
        try:
            with closing(self._connect()) as conn:
                row = conn.execute(f"SELECT value FROM {self.table} WHERE key = ?", (key,)).fetchone()
        except (sqlite3.Error, OSError) as e:
            raise PreferenceStoreError("Failed to read folder preference", key=key, original_error=e) from e

        if row is None:
            return None

        try:
            return DirectoryHandle.from_record(json.loads(row[0]))
        except (ValueError, TypeError) as e:
            raise PreferenceStoreError("Stored folder preference is unreadable", key=key, original_error=e) from e

    def set(self, profile_id: str, handle: DirectoryHandle) -> None:
        """Remember a folder for a profile, replacing any previous one."""
        key = self.key_for(profile_id)
        value = json.dumps(handle.to_record())
        try:
            with closing(self._connect()) as conn:
                conn.execute(
                    f"INSERT OR REPLACE INTO {self.table} (key, value) VALUES (?, ?)", (key, value)
                )
                conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise PreferenceStoreError("Failed to save folder preference", key=key, original_error=e) from e
        _log_debug(f"Stored {key} -> {handle.path}")

    def clear(self, profile_id: str) -> None:
        """Forget a profile's folder. No-op when none is set."""
        key = self.key_for(profile_id)
        try:
            with closing(self._connect()) as conn:
                conn.execute(f"DELETE FROM {self.table} WHERE key = ?", (key,))
                conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise PreferenceStoreError("Failed to clear folder preference", key=key, original_error=e) from e
        _log_debug(f"Cleared {key}")

    def load_all(self, profile_ids: Iterable[str]) -> Dict[str, Optional[DirectoryHandle]]:
        """
        Remembered folders for many profiles at once.

        Individual lookup failures are logged and reported as None; this
        never raises for a bad entry.
        """
        handles: Dict[str, Optional[DirectoryHandle]] = {}
        for profile_id in profile_ids:
            try:
                handles[profile_id] = self.get(profile_id)
            except PreferenceStoreError as e:
                _log_warning(f"Ignoring folder preference for profile {profile_id}: {e.original_error}")
                handles[profile_id] = None
        return handles
