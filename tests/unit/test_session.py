"""Unit tests for SessionContext and LocalStorage."""

import json

import pytest

from resume_tailor.contexts.session import SessionContext
from resume_tailor.utils.local_storage import LocalStorage


@pytest.mark.unit
def test_no_token_initially(session):
    """A fresh session is logged out."""
    assert session.get_token() is None
    assert not session.is_authenticated


@pytest.mark.unit
def test_set_token_writes_through(session, config):
    """Setting a token persists it immediately."""
    session.set_token("abc")

    assert session.get_token() == "abc"
    stored = json.loads(config.local_storage_path.read_text())
    assert stored["jwt_token"] == "abc"


@pytest.mark.unit
def test_init_reads_persisted_token(session, config):
    """init() loads the token saved by an earlier session."""
    session.set_token("abc")

    restarted = SessionContext(LocalStorage(config.local_storage_path))
    assert restarted.get_token() is None  # nothing read before init
    assert restarted.init() == "abc"
    assert restarted.get_token() == "abc"


@pytest.mark.unit
def test_logout_clears_memory_and_storage(session, config):
    """Logging out removes the token everywhere."""
    session.set_token("abc")
    session.teardown()

    assert session.get_token() is None
    restarted = SessionContext(LocalStorage(config.local_storage_path))
    assert restarted.init() is None


@pytest.mark.unit
def test_clear_token_keeps_other_keys(config):
    """Clearing the token leaves other stored keys alone."""
    storage = LocalStorage(config.local_storage_path)
    storage.set_item("theme", "dark")
    session = SessionContext(storage)
    session.set_token("abc")

    session.clear_token()

    assert storage.get_item("theme") == "dark"
    assert storage.get_item("jwt_token") is None


@pytest.mark.unit
def test_empty_token_rejected(session):
    """Empty tokens are rejected."""
    with pytest.raises(ValueError):
        session.set_token("")


@pytest.mark.unit
@pytest.mark.parametrize("contents", [b"{not json", b"{\"jwt_token\": \"\xff\xfe\"}"])
def test_unreadable_storage_file_is_treated_as_empty(config, contents):
    """Malformed JSON or invalid UTF-8 reads as an empty store that can be rewritten."""
    config.local_storage_path.parent.mkdir(parents=True, exist_ok=True)
    config.local_storage_path.write_bytes(contents)

    storage = LocalStorage(config.local_storage_path)
    assert storage.get_item("jwt_token") is None

    storage.set_item("jwt_token", "fresh")
    assert json.loads(config.local_storage_path.read_text()) == {"jwt_token": "fresh"}


@pytest.mark.unit
def test_storage_write_leaves_no_temp_files(config):
    """Storage writes leave no temporary files behind."""
    storage = LocalStorage(config.local_storage_path)
    storage.set_item("a", "1")
    storage.set_item("b", "2")
    storage.remove_item("a")

    assert [p.name for p in config.local_storage_path.parent.iterdir()] == ["local_storage.json"]


@pytest.mark.unit
def test_session_init_survives_undecodable_storage(config):
    """A token file with invalid UTF-8 leaves the session logged out."""
    config.local_storage_path.parent.mkdir(parents=True, exist_ok=True)
    config.local_storage_path.write_bytes(b'{"jwt_token": "\xff\xfe"}')

    session = SessionContext(LocalStorage(config.local_storage_path))

    assert session.init() is None
    assert not session.is_authenticated
