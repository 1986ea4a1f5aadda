"""
Session context logger.

Provides logging helpers for the session context with automatic [session] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[session]"


def _log_info(message: str) -> None:
    """Log info message with [session] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [session] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
