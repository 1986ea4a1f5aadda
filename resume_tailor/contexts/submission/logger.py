"""
Submission context logger.

Provides logging interface for the submission context with automatic [submit] prefix.
All submission modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from resume_tailor.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[submit]"


def setup_submission_logger(log_dir: Path, backend_url: str, console_level: Optional[str] = "INFO") -> Path:
    """
    Setup logger for the submission context.

    Args:
        log_dir: Directory for log files
        backend_url: Backend the session talks to (recorded in the provenance header)
        console_level: Minimum console level (None for file-only logging)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="submit",
        log_dir=log_dir,
        extra_provenance={"Backend": backend_url or "(same origin)"},
        console_level=console_level,
    )


def _log_info(message: str) -> None:
    """Log info message with [submit] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [submit] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [submit] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [submit] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [submit] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_submission_start(profile_name: str, company: str, role: str) -> None:
    """Log start of a submission with context."""
    _log_info(f"Generating PDF: {profile_name} for {role} at {company}")


def log_submission_result(outcome, elapsed_time: float) -> None:
    """
    Log the terminal outcome of a submission.

    Args:
        outcome: SubmissionOutcome from JobSubmissionWorkflow.submit()
        elapsed_time: Seconds from validation to terminal state
    """
    if outcome.success:
        _log_success(f"{outcome.message} ({elapsed_time:.2f}s)")
        if outcome.path:
            _log_debug(f"  Path: {outcome.path}")
    else:
        _log_error(f"{outcome.message} ({elapsed_time:.2f}s)")
