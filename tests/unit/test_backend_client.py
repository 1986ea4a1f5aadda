"""Unit tests for BackendClient against a fake backend."""

import pytest

from resume_tailor.contexts.backend import JobSubmission, Profile
from resume_tailor.exceptions import AuthError, NetworkError
from tests.conftest import PDF_BYTES


def _submission():
    return JobSubmission(
        profile_name="Jane Doe",
        company="Acme",
        role="Data Engineer",
        job_description="Build pipelines.",
    )


@pytest.mark.unit
def test_login_stores_token(client, session, backend):
    """Successful login posts JSON credentials and stores the returned token."""
    token = client.login("jane", "secret")

    assert token == "token-123"
    assert session.get_token() == "token-123"
    request = backend.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://backend.test/login"
    assert request.headers["content-type"] == "application/json"
    assert b'"username"' in request.content and b'"jane"' in request.content


@pytest.mark.unit
def test_login_failure_uses_detail(client, session, backend):
    """A rejected login surfaces the backend's detail message."""
    backend.login_status = 401
    backend.login_body = {"detail": "Invalid credentials"}

    with pytest.raises(AuthError, match="Invalid credentials"):
        client.login("jane", "wrong")
    assert session.get_token() is None


@pytest.mark.unit
def test_login_failure_without_json_body(client, backend):
    """A rejected login with no JSON body falls back to a generic message."""
    backend.login_status = 500

    with pytest.raises(AuthError) as exc_info:
        client.login("jane", "secret")
    assert exc_info.value.message == "Login failed."


@pytest.mark.unit
def test_login_without_token_in_response(client, session, backend):
    """A 200 response without a token is an authentication error."""
    backend.login_body = {"token_type": "bearer"}

    with pytest.raises(AuthError) as exc_info:
        client.login("jane", "secret")
    assert exc_info.value.message == "Token missing in response"
    assert session.get_token() is None


@pytest.mark.unit
def test_fetch_profiles_sends_bearer(client, logged_in, backend):
    """Profile requests carry the bearer token."""
    profiles = client.fetch_profiles()

    assert profiles == [Profile("p1", "Jane Doe"), Profile("p2", "John Smith")]
    assert backend.requests[0].headers["authorization"] == "Bearer token-123"


@pytest.mark.unit
def test_fetch_profiles_unauthorized(client, logged_in, backend):
    """A 401 on profiles raises NetworkError with the status code."""
    backend.profiles_status = 401

    with pytest.raises(NetworkError) as exc_info:
        client.fetch_profiles()
    assert exc_info.value.message == "Failed to fetch profiles."
    assert exc_info.value.is_unauthorized


@pytest.mark.unit
def test_authenticated_call_without_token_sends_nothing(client, backend):
    """Authenticated calls fail locally when no token is stored."""
    with pytest.raises(AuthError):
        client.fetch_profiles()
    with pytest.raises(AuthError):
        client.generate_resume_pdf(_submission())
    assert backend.requests == []


@pytest.mark.unit
def test_generate_sends_multipart_fields(client, logged_in, backend):
    """PDF generation sends the four form fields as multipart."""
    pdf = client.generate_resume_pdf(_submission())

    assert pdf == PDF_BYTES
    request = backend.requests[0]
    assert request.url.path == "/generate_dynamic_resume_pdf"
    assert request.headers["authorization"] == "Bearer token-123"
    assert request.headers["content-type"].startswith("multipart/form-data")
    body = request.content
    for field, value in [
        ("profile_name", b"Jane Doe"),
        ("job_description", b"Build pipelines."),
        ("company", b"Acme"),
        ("role", b"Data Engineer"),
    ]:
        assert f'name="{field}"'.encode() in body
        assert value in body
    assert b"filename=" not in body


@pytest.mark.unit
def test_generate_failure_uses_error_field(client, logged_in, backend):
    """A failed generation surfaces the backend's error field."""
    backend.pdf_status = 422
    backend.pdf_error_body = {"error": "Profile not found"}

    with pytest.raises(NetworkError) as exc_info:
        client.generate_resume_pdf(_submission())
    assert exc_info.value.message == "Profile not found"
    assert exc_info.value.status_code == 422


@pytest.mark.unit
def test_generate_failure_falls_back_to_generic_message(client, logged_in, backend):
    """A failed generation without an error field uses the generic message."""
    backend.pdf_status = 502

    with pytest.raises(NetworkError) as exc_info:
        client.generate_resume_pdf(_submission())
    assert exc_info.value.message == "Failed to generate PDF."


@pytest.mark.unit
def test_transport_failure_becomes_network_error(client, logged_in, backend):
    """Connection failures are wrapped in NetworkError."""
    backend.raise_on.add("/generate_dynamic_resume_pdf")

    with pytest.raises(NetworkError) as exc_info:
        client.generate_resume_pdf(_submission())
    assert "Connection refused" in exc_info.value.message
    assert exc_info.value.status_code is None
