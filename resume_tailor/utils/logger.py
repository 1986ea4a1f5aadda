"""
Generic logger setup utilities.

Provides reusable loguru configuration with provenance tracking.
Context-specific wrappers are defined in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

# Default level colors for console output
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
    console: Optional[TextIO] = None,
    console_level: Optional[str] = "INFO",
) -> Path:
    """
    Configure loguru for a context with provenance tracking.

    Sets up dual output (file + console) and logs execution provenance
    (command, working directory, Python version, etc.).

    Args:
        context_name: Context identifier (e.g., "submit", "session")
        log_dir: Directory for log files
        extra_provenance: Additional key-value pairs for provenance header
        console: Console stream (defaults to stderr so command output stays clean)
        console_level: Minimum level shown on the console (None logs to the file only)

    Returns:
        Path to log file

    Example:
        from resume_tailor.utils.logger import setup_logger

        log_file = setup_logger(
            context_name="submit",
            log_dir=Path("~/.resume_tailor/logs").expanduser(),
            extra_provenance={"Backend": "http://localhost:8000"},
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    # Remove default logger
    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    # File handler captures everything
    logger.add(
        log_file, format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}", level="DEBUG"
    )

    if console_level is not None:
        logger.add(
            console or sys.stderr,
            format="<level>{level: <7}</level> | <level>{message}</level>",
            level=console_level,
            colorize=None,
        )

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """
    Log execution provenance to current logger.

    Provenance goes to DEBUG so it lands in the log file without cluttering the console.
    """
    logger.debug("=" * 80)
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    if extra_context:
        for key, value in extra_context.items():
            logger.debug(f"{key}: {value}")

    logger.debug("=" * 80)
