"""
Job submission workflow.

One submission moves through

    IDLE -> VALIDATING -> SUBMITTING -> RESOLVING_OUTPUT -> {SAVED, DOWNLOADED, FAILED}

and ends with exactly one user-visible message: a success response or an
error. Output is resolved in strict order:

1. Remembered folder of the selected profile (permission denial is final)
2. Interactive save dialog (cancellation falls through)
3. Classic download (always available)

The workflow also owns the per-profile folder actions (choose / clear) and the
in-memory map of remembered folders, hydrated from the preference store.
"""

import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from loguru import logger

from resume_tailor.contexts.backend import BackendClient, JobSubmission, Profile
from resume_tailor.contexts.output import (
    ClientCapabilities,
    DirectoryHandle,
    FolderPreferenceStore,
    SaveDialog,
    build_filename,
    classic_download,
    save_to_folder,
    save_with_dialog,
)
from resume_tailor.contexts.output.handles import GRANTED
from resume_tailor.contexts.submission.logger import (
    _log_debug,
    _log_info,
    _log_warning,
    log_submission_result,
    log_submission_start,
)
from resume_tailor.exceptions import (
    CancellationError,
    FolderPermissionError,
    ResumeTailorError,
    ValidationError,
)
from resume_tailor.utils.event_logging import log_client_event

NO_PROFILE_MESSAGE = "You must select a profile."
IN_PROGRESS_MESSAGE = "A submission is already in progress."
UNKNOWN_ERROR_MESSAGE = "Unknown error"

FOLDER_SET_MESSAGE = "Save folder set for this profile."
FOLDER_CLEARED_MESSAGE = "Save folder preference cleared for this profile."
FOLDER_NO_PERMISSION_MESSAGE = "No permission. Try again."
FOLDER_CANCELLED_MESSAGE = "Folder selection cancelled."

# Shows a directory picker. Raises CancellationError on dismissal.
FolderPicker = Callable[[], DirectoryHandle]


class SubmissionState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    RESOLVING_OUTPUT = "resolving-output"
    SAVED = "saved"
    DOWNLOADED = "downloaded"
    FAILED = "failed"


TERMINAL_STATES = (SubmissionState.SAVED, SubmissionState.DOWNLOADED, SubmissionState.FAILED)


@dataclass
class FormFeedback:
    """User-visible success response and error message."""

    response: Optional[str] = None
    error: Optional[str] = None

    def clear(self) -> None:
        self.response = None
        self.error = None


@dataclass
class SubmissionOutcome:
    """
    Terminal result of one submission.

    Attributes:
        state: SAVED, DOWNLOADED or FAILED
        message: Message shown to the user
        path: Written file (None on failure)
        filename: Generated file name (None if the PDF was never generated)
    """

    state: SubmissionState
    message: str
    path: Optional[Path] = None
    filename: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.state in (SubmissionState.SAVED, SubmissionState.DOWNLOADED)


class JobSubmissionWorkflow:
    """
    Orchestrates profile selection, folder preferences and submissions.

    Example:
        workflow = JobSubmissionWorkflow(
            client=client,
            store=FolderPreferenceStore(config.database_path),
            capabilities=probe_capabilities(config.state_dir),
            downloads_dir=config.downloads_dir,
        )
        workflow.load_profiles()
        workflow.select_profile("42")
        outcome = workflow.submit(company="Acme", role="Engineer", job_description=text)
    """

    def __init__(
        self,
        client: BackendClient,
        store: FolderPreferenceStore,
        capabilities: ClientCapabilities,
        downloads_dir: Path,
        save_dialog: Optional[SaveDialog] = None,
        temp_dir: Optional[Path] = None,
        events_file: Optional[Path] = None,
    ):
        self.client = client
        self.store = store
        self.capabilities = capabilities
        self.downloads_dir = downloads_dir
        self.save_dialog = save_dialog
        self.temp_dir = temp_dir
        self.events_file = events_file

        self.profiles: List[Profile] = []
        self.dir_handles: Dict[str, Optional[DirectoryHandle]] = {}
        self.selected_profile_id: str = ""
        self.feedback = FormFeedback()
        self.last_error: Optional[ResumeTailorError] = None

        self.state = SubmissionState.IDLE
        self.transitions: List[SubmissionState] = []
        self.is_submitting = False

    # --- Profiles and folder preferences ---

    @property
    def profile_name(self) -> str:
        """Display name of the selected profile ("" when none or unknown)."""
        for profile in self.profiles:
            if profile.id == self.selected_profile_id:
                return profile.name
        return ""

    def select_profile(self, profile_id: str) -> None:
        self.selected_profile_id = profile_id or ""

    def find_profile(self, key: str) -> Optional[Profile]:
        """Profile matching an id, or failing that a display name."""
        for profile in self.profiles:
            if profile.id == key:
                return profile
        for profile in self.profiles:
            if profile.name == key:
                return profile
        return None

    def load_profiles(self) -> List[Profile]:
        """
        Fetch profiles from the backend and hydrate their remembered folders.

        On failure sets the error message, records last_error and returns [].
        """
        self.last_error = None
        try:
            self.profiles = self.client.fetch_profiles()
        except ResumeTailorError as e:
            self.last_error = e
            self.feedback.error = f"Could not load profiles. {e.message}"
            _log_warning(self.feedback.error)
            return []

        _log_debug(f"Loaded {len(self.profiles)} profile(s)")
        self.hydrate()
        return self.profiles

    def hydrate(self, profiles: Optional[List[Profile]] = None) -> None:
        """Load remembered folders for all known profiles (when directory access is available)."""
        if profiles is not None:
            self.profiles = profiles
        if not self.capabilities.directory_access.available or not self.profiles:
            return
        self.dir_handles = self.store.load_all([p.id for p in self.profiles])

    def choose_folder(self, profile_id: str, picker: FolderPicker) -> bool:
        """
        Let the user pick a folder for a profile and remember it.

        Returns:
            True if a folder was stored
        """
        self.feedback.clear()
        try:
            handle = picker()
            permission = handle.request_permission(mode="readwrite")
            if permission != GRANTED:
                self.feedback.error = FOLDER_NO_PERMISSION_MESSAGE
                return False
            self.store.set(profile_id, handle)
        except (ResumeTailorError, OSError) as e:
            _log_debug(f"Folder selection for profile {profile_id} failed: {e}")
            self.feedback.error = FOLDER_CANCELLED_MESSAGE
            return False

        self.dir_handles[profile_id] = handle
        self.feedback.response = FOLDER_SET_MESSAGE
        _log_info(f"Save folder for profile {profile_id}: {handle.path}")
        return True

    def clear_folder(self, profile_id: str) -> None:
        self.store.clear(profile_id)
        self.dir_handles[profile_id] = None
        self.feedback.clear()
        self.feedback.response = FOLDER_CLEARED_MESSAGE
        _log_info(f"Save folder cleared for profile {profile_id}")

    # --- Submission ---

    def _transition(self, state: SubmissionState) -> None:
        self.state = state
        self.transitions.append(state)

    def submit(self, company: str, role: str, job_description: str) -> SubmissionOutcome:
        """
        Generate a tailored PDF for the selected profile and save it.

        Never raises: every failure becomes a FAILED outcome with its message.
        """
        if self.is_submitting:
            return SubmissionOutcome(SubmissionState.FAILED, IN_PROGRESS_MESSAGE)

        self.is_submitting = True
        self.transitions = []
        self.feedback.clear()
        start_time = time.time()
        try:
            outcome = self._run(company, role, job_description)
        except ResumeTailorError as e:
            outcome = SubmissionOutcome(SubmissionState.FAILED, e.message or UNKNOWN_ERROR_MESSAGE)
        except Exception as e:
            logger.opt(exception=e).debug("Unexpected submission failure")
            outcome = SubmissionOutcome(SubmissionState.FAILED, str(e) or UNKNOWN_ERROR_MESSAGE)
        finally:
            self.is_submitting = False

        self._finish(outcome, time.time() - start_time)
        return outcome

    def _run(self, company: str, role: str, job_description: str) -> SubmissionOutcome:
        self._transition(SubmissionState.VALIDATING)
        profile_name = self.profile_name
        if not profile_name:
            raise ValidationError(NO_PROFILE_MESSAGE)

        submission = JobSubmission(
            profile_name=profile_name,
            company=company,
            role=role,
            job_description=job_description,
        )

        self._transition(SubmissionState.SUBMITTING)
        log_submission_start(profile_name, company, role)
        pdf = self.client.generate_resume_pdf(submission)

        self._transition(SubmissionState.RESOLVING_OUTPUT)
        filename = build_filename(profile_name, company, role)
        return self._resolve_output(filename, pdf)

    def _resolve_output(self, filename: str, pdf: bytes) -> SubmissionOutcome:
        # 1. Remembered folder for the selected profile
        handle = self.dir_handles.get(self.selected_profile_id)
        if self.capabilities.directory_access.available and handle is not None:
            try:
                path = save_to_folder(handle, filename, pdf)
                return SubmissionOutcome(
                    SubmissionState.SAVED,
                    f"PDF saved automatically to folder for this profile: {filename}",
                    path=path,
                    filename=filename,
                )
            except FolderPermissionError as e:
                return SubmissionOutcome(SubmissionState.FAILED, e.message, filename=filename)
            except (ResumeTailorError, OSError, ValueError) as e:
                _log_warning(f"Failed to save to folder ({e}). Falling back to Save As/Download.")

        # 2. Interactive save dialog
        if self.save_dialog is not None and self.capabilities.save_dialog.available:
            try:
                file_handle = save_with_dialog(self.save_dialog, filename, pdf)
                return SubmissionOutcome(
                    SubmissionState.SAVED,
                    f"PDF saved: {file_handle.name}",
                    path=file_handle.path,
                    filename=filename,
                )
            except CancellationError:
                _log_info("Save dialog dismissed, downloading instead")
            except (ResumeTailorError, OSError) as e:
                _log_warning(f"Save dialog failed ({e}), downloading instead")

        # 3. Classic download
        path = classic_download(self.downloads_dir, filename, pdf, temp_dir=self.temp_dir)
        return SubmissionOutcome(
            SubmissionState.DOWNLOADED,
            f"PDF downloaded: {filename}",
            path=path,
            filename=filename,
        )

    def _finish(self, outcome: SubmissionOutcome, elapsed_time: float) -> None:
        self._transition(outcome.state)
        if outcome.success:
            self.feedback.response = outcome.message
        else:
            self.feedback.error = outcome.message
        log_submission_result(outcome, elapsed_time)

        if self.events_file is None:
            return
        try:
            log_client_event(
                self.events_file,
                event_type="submission_completed",
                source="submit",
                state=outcome.state.value,
                profile_name=self.profile_name,
                filename=outcome.filename,
                message=outcome.message,
            )
        except OSError as e:
            _log_warning(f"Could not record submission event: {e}")
