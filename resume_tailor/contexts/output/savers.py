"""
Save strategies for generated PDFs.

Three ways to put bytes on disk, tried by the submission workflow in order:

1. save_to_folder     - write into the profile's remembered folder
2. save_with_dialog   - ask the user where to save
3. classic_download   - drop the file into the downloads directory

Each strategy raises on failure; deciding whether to fall through to the next
one is the workflow's job.
"""

import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from resume_tailor.contexts.output.handles import GRANTED, DirectoryHandle, FileHandle
from resume_tailor.contexts.output.logger import _log_debug, _log_info
from resume_tailor.exceptions import CancellationError, FolderPermissionError


@dataclass(frozen=True)
class FileType:
    """Accepted file type offered by a save dialog."""

    description: str
    accept: Dict[str, List[str]]

    @property
    def extensions(self) -> List[str]:
        return [ext for exts in self.accept.values() for ext in exts]


PDF_FILE_TYPE = FileType(description="PDF file", accept={"application/pdf": [".pdf"]})


@dataclass(frozen=True)
class SaveDialogOptions:
    suggested_name: str
    types: List[FileType] = field(default_factory=lambda: [PDF_FILE_TYPE])


# Shows a save dialog and returns the chosen file. Raises CancellationError on dismissal.
SaveDialog = Callable[[SaveDialogOptions], FileHandle]


def write_file(file_handle: FileHandle, data: bytes) -> None:
    """Write data through a writable stream; the stream is closed or aborted on every path."""
    with file_handle.create_writable() as writable:
        writable.write(data)


def save_to_folder(handle: DirectoryHandle, filename: str, data: bytes) -> Path:
    """
    Write data to filename inside a remembered folder, overwriting any existing file.

    Returns:
        Path of the written file

    Raises:
        FolderPermissionError: If readwrite permission is not granted
        HandleInvalidError: If the folder no longer exists
        OSError: Any other write failure
    """
    if handle.request_permission(mode="readwrite") != GRANTED:
        raise FolderPermissionError("No write permission for this profile's folder.")

    file_handle = handle.get_file_handle(filename, create=True)
    write_file(file_handle, data)
    _log_info(f"Saved {filename} to {handle.path}")
    return file_handle.path


def save_with_dialog(dialog: SaveDialog, filename: str, data: bytes) -> FileHandle:
    """
    Ask the user for a location and write data there.

    Returns:
        Handle of the chosen file

    Raises:
        CancellationError: If the user dismissed the dialog
        OSError / HandleInvalidError: If writing to the chosen location failed
    """
    file_handle = dialog(SaveDialogOptions(suggested_name=filename))
    if file_handle is None:
        raise CancellationError("Save dialog cancelled.")
    write_file(file_handle, data)
    _log_info(f"Saved {file_handle.name} via save dialog")
    return file_handle


def unique_download_path(downloads_dir: Path, filename: str) -> Path:
    """
    First free path for filename in downloads_dir, adding " (n)" before the
    extension on collision (e.g., "resume (1).pdf").
    """
    candidate = downloads_dir / filename
    stem, suffix = os.path.splitext(filename)
    n = 1
    while candidate.exists():
        candidate = downloads_dir / f"{stem} ({n}){suffix}"
        n += 1
    return candidate


class DownloadLink:
    """
    Temporary download link.

    Holds the payload in a temporary file until triggered. The temporary file
    is removed by revoke(), which runs on context exit whether or not the
    trigger succeeded.

    Example:
        with DownloadLink(pdf_bytes) as link:
            saved_path = link.trigger(downloads_dir, "Jane_Doe_Acme_Engineer.pdf")
        assert link.revoked
    """

    def __init__(self, data: bytes, temp_dir: Optional[Path] = None):
        if temp_dir is not None:
            temp_dir.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix="download-", suffix=".blob", dir=temp_dir)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        self.url = Path(path)
        self.revoked = False

    def __enter__(self) -> "DownloadLink":
        return self

    def __exit__(self, *exc_info) -> None:
        self.revoke()

    def trigger(self, downloads_dir: Path, filename: str) -> Path:
        """Copy the payload into downloads_dir under filename (deduplicated)."""
        if self.revoked:
            raise ValueError("Download link has been revoked")
        downloads_dir.mkdir(parents=True, exist_ok=True)
        destination = unique_download_path(downloads_dir, filename)
        shutil.copyfile(self.url, destination)
        return destination

    def revoke(self) -> None:
        if self.revoked:
            return
        self.revoked = True
        if self.url.exists():
            self.url.unlink()
        _log_debug(f"Revoked download link {self.url.name}")


def classic_download(
    downloads_dir: Path,
    filename: str,
    data: bytes,
    temp_dir: Optional[Path] = None,
) -> Path:
    """
    Save data to the downloads directory through a temporary download link.

    Returns:
        Path the file was downloaded to (may carry a " (n)" suffix)
    """
    with DownloadLink(data, temp_dir=temp_dir) as link:
        destination = link.trigger(downloads_dir, filename)
    _log_info(f"Downloaded {destination.name} to {downloads_dir}")
    return destination
