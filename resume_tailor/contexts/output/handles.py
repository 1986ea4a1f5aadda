"""
Permission-scoped handles to local directories and files.

A DirectoryHandle is what gets remembered per profile. Callers treat it as
opaque: they ask it for permission, ask it for a file handle, and write
through a WritableFileStream. Writes go to a swap file next to the target and
are moved into place on close, so an aborted write never leaves a truncated
PDF behind.
"""

import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from resume_tailor.exceptions import HandleInvalidError

GRANTED = "granted"
DENIED = "denied"
PROMPT = "prompt"

PERMISSION_MODES = ("read", "readwrite")


def _check_mode(mode: str) -> None:
    if mode not in PERMISSION_MODES:
        raise ValueError(f"Permission mode must be one of {PERMISSION_MODES}, got: {mode}")


class WritableFileStream:
    """
    Buffered writer committed on close().

    Use as a context manager: a clean exit commits, an exception aborts. Either
    way the swap file is gone afterwards.
    """

    def __init__(self, target: Path):
        self.target = target
        fd, swap_path = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".swap", dir=target.parent)
        self._file = os.fdopen(fd, "wb")
        self.swap_path = Path(swap_path)
        self.closed = False

    def __enter__(self) -> "WritableFileStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()

    def write(self, data: bytes) -> None:
        if self.closed:
            raise ValueError("Stream is closed")
        self._file.write(data)

    def _target_mode(self) -> int:
        # Keep an existing file's mode; new files get the umask default
        try:
            return stat.S_IMODE(os.stat(self.target).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def close(self) -> None:
        """Flush and move the swap file over the target (overwrites)."""
        if self.closed:
            return
        self.closed = True
        try:
            self._file.close()
            os.chmod(self.swap_path, self._target_mode())
            shutil.move(str(self.swap_path), str(self.target))
        except Exception:
            if self.swap_path.exists():
                self.swap_path.unlink()
            raise

    def abort(self) -> None:
        """Discard everything written so far."""
        if self.closed:
            return
        self.closed = True
        self._file.close()
        if self.swap_path.exists():
            self.swap_path.unlink()


class FileHandle:
    """Handle to a single file."""

    kind = "file"

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return self.path.name

    def create_writable(self) -> WritableFileStream:
        """
        Open a writable stream for this file.

        Raises:
            HandleInvalidError: If the parent directory no longer exists
        """
        if not self.path.parent.is_dir():
            raise HandleInvalidError(f"Directory no longer exists: {self.path.parent}")
        return WritableFileStream(self.path)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FileHandle) and other.path == self.path

    def __hash__(self) -> int:
        return hash((self.kind, self.path))

    def __repr__(self) -> str:
        return f"FileHandle({str(self.path)!r})"


class DirectoryHandle:
    """
    Handle to a directory the user granted access to.

    Permission is re-evaluated on every query, so a handle persisted long ago
    reflects the directory's current state rather than what it was when granted.
    """

    kind = "directory"

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return self.path.name

    def _ensure_exists(self) -> None:
        if not self.path.is_dir():
            raise HandleInvalidError(f"Directory no longer exists: {self.path}")

    def query_permission(self, mode: str = "read") -> str:
        """
        Current permission state for mode ("read" or "readwrite").

        Raises:
            HandleInvalidError: If the directory no longer exists
        """
        _check_mode(mode)
        self._ensure_exists()
        flags = os.R_OK | os.X_OK
        if mode == "readwrite":
            flags |= os.W_OK
        return GRANTED if os.access(self.path, flags) else DENIED

    def request_permission(self, mode: str = "read") -> str:
        """
        Request permission for mode. Local directories cannot be escalated at
        runtime, so the answer is the current state.

        Raises:
            HandleInvalidError: If the directory no longer exists
        """
        return self.query_permission(mode)

    def get_file_handle(self, name: str, create: bool = False) -> FileHandle:
        """
        Handle for a file directly inside this directory.

        Args:
            name: Plain file name (no separators)
            create: Allow a handle to a file that does not exist yet

        Raises:
            ValueError: If name is not a plain file name
            HandleInvalidError: If the directory no longer exists
            FileNotFoundError: If the file is missing and create is False
        """
        if not name or Path(name).name != name or name in (".", ".."):
            raise ValueError(f"Not a plain file name: {name!r}")
        self._ensure_exists()
        target = self.path / name
        if not create and not target.exists():
            raise FileNotFoundError(f"File not found: {target}")
        return FileHandle(target)

    def to_record(self) -> Dict[str, Any]:
        """Serializable form for the preference store."""
        return {"kind": self.kind, "path": str(self.path)}

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "DirectoryHandle":
        """
        Rebuild a handle from to_record() output.

        Raises:
            ValueError: If the record is not a directory handle record
        """
        if not isinstance(record, dict) or record.get("kind") != cls.kind:
            raise ValueError(f"Not a directory handle record: {record!r}")
        path = record.get("path")
        if not isinstance(path, str) or not path:
            raise ValueError(f"Not a directory handle record: {record!r}")
        return cls(Path(path))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DirectoryHandle) and other.path == self.path

    def __hash__(self) -> int:
        return hash((self.kind, self.path))

    def __repr__(self) -> str:
        return f"DirectoryHandle({str(self.path)!r})"


def resolve_directory(path: Optional[Path]) -> DirectoryHandle:
    """
    Build a handle for a user-chosen directory path.

    Raises:
        HandleInvalidError: If path is not an existing directory
    """
    if path is None:
        raise HandleInvalidError("No directory given")
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_dir():
        raise HandleInvalidError(f"Not a directory: {resolved}")
    return DirectoryHandle(resolved)
