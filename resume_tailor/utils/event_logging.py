"""
Client event history.

Appends session and submission events to a JSON Lines file so past
submissions can be reviewed with `resume-tailor history`. This is separate
from the detailed loguru logs written through resume_tailor.utils.logger.

Usage:
    from resume_tailor.utils.event_logging import log_client_event, get_recent_events

    log_client_event(
        events_file,
        event_type="submission_completed",
        source="submit",
        state="saved",
        profile_name="Jane Doe",
        filename="Jane_Doe_Acme_Engineer.pdf",
    )

    events = get_recent_events(events_file, n=5, event_type="submission_completed")
"""

import json
from pathlib import Path
from typing import List, Optional

from resume_tailor.utils.timestamp import now_exact

EVENT_TYPES = {"login", "logout", "submission_completed"}


def log_client_event(events_file: Path, event_type: str, source: str, **extra_fields) -> None:
    """
    Append one event to the history file.

    Args:
        events_file: JSON Lines history file (parent directory is created)
        event_type: One of EVENT_TYPES
        source: Event source (e.g., "cli", "submit")
        **extra_fields: Additional event-specific fields

    Raises:
        ValueError: If event_type is unknown
    """
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {event_type}")

    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def get_recent_events(
    events_file: Path,
    n: int = 10,
    event_type: Optional[str] = None,
    profile_name: Optional[str] = None,
) -> List[dict]:
    """
    Get the last n events, optionally filtered.

    Args:
        events_file: JSON Lines history file
        n: Number of recent events to return
        event_type: Only events of this type
        profile_name: Only events for this profile

    Returns:
        List of event dicts (most recent last)
    """
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    if profile_name:
        events = [e for e in events if e.get("profile_name") == profile_name]

    return events[-n:] if len(events) > n else events
