"""Unit tests for the client event history."""

import pytest

from resume_tailor.utils.event_logging import get_recent_events, log_client_event


@pytest.mark.unit
def test_events_appended_and_filtered(tmp_path):
    """Events are appended and can be filtered by type and profile."""
    events_file = tmp_path / "logs" / "events.log"
    log_client_event(events_file, event_type="login", source="cli", username="jane")
    log_client_event(
        events_file, event_type="submission_completed", source="submit",
        state="saved", profile_name="Jane Doe",
    )
    log_client_event(
        events_file, event_type="submission_completed", source="submit",
        state="failed", profile_name="John Smith",
    )

    assert len(get_recent_events(events_file)) == 3
    submissions = get_recent_events(events_file, event_type="submission_completed")
    assert [e["state"] for e in submissions] == ["saved", "failed"]
    jane = get_recent_events(events_file, profile_name="Jane Doe")
    assert len(jane) == 1 and jane[0]["source"] == "submit"
    assert "timestamp" in jane[0]


@pytest.mark.unit
def test_recent_events_limit_keeps_latest(tmp_path):
    """The limit keeps the most recent events."""
    events_file = tmp_path / "events.log"
    for i in range(5):
        log_client_event(events_file, event_type="login", source="cli", attempt=i)

    assert [e["attempt"] for e in get_recent_events(events_file, n=2)] == [3, 4]


@pytest.mark.unit
def test_malformed_lines_skipped(tmp_path):
    """Malformed lines in the event log are skipped."""
    events_file = tmp_path / "events.log"
    log_client_event(events_file, event_type="logout", source="cli")
    with open(events_file, "a", encoding="utf-8") as f:
        f.write("{truncated\n")

    assert [e["event_type"] for e in get_recent_events(events_file)] == ["logout"]


@pytest.mark.unit
def test_missing_file_returns_empty(tmp_path):
    """A missing event log reads as no events."""
    assert get_recent_events(tmp_path / "nope.log") == []


@pytest.mark.unit
def test_unknown_event_type_rejected(tmp_path):
    """Unknown event types are rejected."""
    with pytest.raises(ValueError):
        log_client_event(tmp_path / "events.log", event_type="mystery", source="cli")
