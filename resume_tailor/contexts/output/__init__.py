"""
Output Context

Responsibilities:
- Probes which save mechanisms the environment supports
- Remembers an output folder per profile
- Names generated files
- Writes generated PDFs to a folder, a chosen location, or the downloads directory

Owns: Folder preferences, file/directory handles, save strategies
Never: Talks to the backend
"""

from resume_tailor.contexts.output.capabilities import (
    Capability,
    ClientCapabilities,
    probe_capabilities,
)
from resume_tailor.contexts.output.filenames import build_filename, sanitize
from resume_tailor.contexts.output.handles import DirectoryHandle, FileHandle, resolve_directory
from resume_tailor.contexts.output.preferences import FolderPreferenceStore
from resume_tailor.contexts.output.savers import (
    PDF_FILE_TYPE,
    DownloadLink,
    SaveDialog,
    SaveDialogOptions,
    classic_download,
    save_to_folder,
    save_with_dialog,
)

__all__ = [
    # Capabilities
    "Capability",
    "ClientCapabilities",
    "probe_capabilities",
    # Naming
    "build_filename",
    "sanitize",
    # Handles and preferences
    "DirectoryHandle",
    "FileHandle",
    "FolderPreferenceStore",
    "resolve_directory",
    # Save strategies
    "PDF_FILE_TYPE",
    "DownloadLink",
    "SaveDialog",
    "SaveDialogOptions",
    "classic_download",
    "save_to_folder",
    "save_with_dialog",
]
