"""Unit tests for the save strategies."""

import pytest

from resume_tailor.contexts.output import (
    PDF_FILE_TYPE,
    DirectoryHandle,
    DownloadLink,
    FileHandle,
    classic_download,
    save_to_folder,
    save_with_dialog,
)
from resume_tailor.contexts.output.savers import unique_download_path
from resume_tailor.exceptions import CancellationError, FolderPermissionError, HandleInvalidError
from tests.conftest import PDF_BYTES, DeniedDirectoryHandle, RecordingSaveDialog


@pytest.mark.unit
def test_save_to_folder_writes_file(tmp_path):
    """Saving to a granted folder writes the file there."""
    path = save_to_folder(DirectoryHandle(tmp_path), "Jane_Doe_Acme_Engineer.pdf", PDF_BYTES)

    assert path == tmp_path / "Jane_Doe_Acme_Engineer.pdf"
    assert path.read_bytes() == PDF_BYTES


@pytest.mark.unit
def test_save_to_folder_denied(tmp_path):
    """A denied folder raises FolderPermissionError."""
    with pytest.raises(FolderPermissionError):
        save_to_folder(DeniedDirectoryHandle(tmp_path), "a.pdf", PDF_BYTES)

    assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
def test_save_to_folder_stale_handle(tmp_path):
    """A removed folder raises HandleInvalidError."""
    with pytest.raises(HandleInvalidError):
        save_to_folder(DirectoryHandle(tmp_path / "deleted"), "a.pdf", PDF_BYTES)


@pytest.mark.unit
def test_save_with_dialog_writes_chosen_file(tmp_path):
    """The dialog's chosen file receives the bytes."""
    dialog = RecordingSaveDialog(answer=FileHandle(tmp_path / "chosen.pdf"))

    file_handle = save_with_dialog(dialog, "suggested.pdf", PDF_BYTES)

    assert file_handle.name == "chosen.pdf"
    assert (tmp_path / "chosen.pdf").read_bytes() == PDF_BYTES
    assert dialog.calls[0].suggested_name == "suggested.pdf"
    assert dialog.calls[0].types == [PDF_FILE_TYPE]


@pytest.mark.unit
def test_save_with_dialog_cancelled(tmp_path):
    """A dismissed dialog raises CancellationError."""
    dialog = RecordingSaveDialog(error=CancellationError("dismissed"))

    with pytest.raises(CancellationError):
        save_with_dialog(dialog, "suggested.pdf", PDF_BYTES)


@pytest.mark.unit
def test_pdf_file_type_accepts_pdf_extension():
    """The PDF file type offers the .pdf extension."""
    assert PDF_FILE_TYPE.extensions == [".pdf"]
    assert "application/pdf" in PDF_FILE_TYPE.accept


@pytest.mark.unit
def test_download_link_revoked_after_trigger(tmp_path):
    """The temporary link is removed after a download."""
    downloads = tmp_path / "downloads"

    with DownloadLink(PDF_BYTES, temp_dir=tmp_path / "links") as link:
        destination = link.trigger(downloads, "resume.pdf")
        assert link.url.exists()

    assert link.revoked
    assert not link.url.exists()
    assert destination.read_bytes() == PDF_BYTES


@pytest.mark.unit
def test_download_link_revoked_when_trigger_fails(tmp_path):
    """The temporary link is removed even when the download fails."""
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")

    with pytest.raises(OSError):
        with DownloadLink(PDF_BYTES, temp_dir=tmp_path / "links") as link:
            link.trigger(blocker, "resume.pdf")

    assert link.revoked
    assert list((tmp_path / "links").iterdir()) == []


@pytest.mark.unit
def test_revoked_link_cannot_be_triggered(tmp_path):
    """A revoked link cannot be downloaded again."""
    link = DownloadLink(PDF_BYTES, temp_dir=tmp_path)
    link.revoke()

    with pytest.raises(ValueError):
        link.trigger(tmp_path / "downloads", "resume.pdf")


@pytest.mark.unit
def test_unique_download_path_adds_counter(tmp_path):
    """Colliding download names get a (n) suffix."""
    assert unique_download_path(tmp_path, "resume.pdf") == tmp_path / "resume.pdf"

    (tmp_path / "resume.pdf").write_bytes(b"1")
    (tmp_path / "resume (1).pdf").write_bytes(b"2")

    assert unique_download_path(tmp_path, "resume.pdf") == tmp_path / "resume (2).pdf"


@pytest.mark.unit
def test_classic_download_cleans_up_link(tmp_path):
    """A classic download leaves no temporary files."""
    links = tmp_path / "links"

    path = classic_download(tmp_path / "downloads", "resume.pdf", PDF_BYTES, temp_dir=links)

    assert path == tmp_path / "downloads" / "resume.pdf"
    assert path.read_bytes() == PDF_BYTES
    assert list(links.iterdir()) == []
