"""
Output context logger.

Provides logging helpers for the output context with automatic [folder] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[folder]"


def _log_info(message: str) -> None:
    """Log info message with [folder] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [folder] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [folder] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
