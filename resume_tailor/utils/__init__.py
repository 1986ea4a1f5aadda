"""
Shared utilities for the resume tailor client.

Common functionality used across contexts:
- Logger setup
- Event history
- Local key-value storage
- Timestamps
"""

from resume_tailor.utils.local_storage import LocalStorage
from resume_tailor.utils.timestamp import format_timestamp, now_exact

__all__ = ["LocalStorage", "format_timestamp", "now_exact"]
