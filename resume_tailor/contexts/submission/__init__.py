"""
Submission Context

Responsibilities:
- Validates a job submission and sends it to the backend
- Resolves where the generated PDF is saved (folder, save dialog, download)
- Manages per-profile save folders (choose, clear, hydrate)
- Reports exactly one user-visible message per action

Owns: Submission state machine, user-facing feedback
Never: Knows how handles or HTTP are implemented
"""

from resume_tailor.contexts.submission.workflow import (
    FolderPicker,
    FormFeedback,
    JobSubmissionWorkflow,
    SubmissionOutcome,
    SubmissionState,
)

__all__ = [
    "FolderPicker",
    "FormFeedback",
    "JobSubmissionWorkflow",
    "SubmissionOutcome",
    "SubmissionState",
]
