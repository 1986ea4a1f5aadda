"""
HTTP client for the resume tailoring backend.

Endpoints:
    POST /login                         JSON {username, password} -> {access_token}
    GET  /profiles                      bearer -> {profiles: [{id, name}, ...]}
    POST /generate_dynamic_resume_pdf   bearer, multipart fields -> PDF bytes
"""

from typing import List, Optional

import httpx

from resume_tailor.config import ClientConfig
from resume_tailor.contexts.backend.models import JobSubmission, Profile
from resume_tailor.contexts.session import SessionContext
from resume_tailor.contexts.session.logger import _log_debug, _log_info
from resume_tailor.exceptions import AuthError, NetworkError

LOGIN_ENDPOINT = "/login"
PROFILES_ENDPOINT = "/profiles"
GENERATE_PDF_ENDPOINT = "/generate_dynamic_resume_pdf"

DEFAULT_LOGIN_ERROR = "Login failed."
DEFAULT_PROFILES_ERROR = "Failed to fetch profiles."
DEFAULT_GENERATE_ERROR = "Failed to generate PDF."


def _error_message(response: httpx.Response, field: str, default: str) -> str:
    """Read a human-readable message from a JSON error body, falling back to default."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get(field):
        return str(body[field])
    return default


class BackendClient:
    """
    Thin client over the backend API.

    Authenticated calls read the bearer token from the session on every
    request, so a login or logout takes effect immediately.

    Example:
        with BackendClient(config, session) as client:
            client.login("jane", "secret")
            profiles = client.fetch_profiles()
    """

    def __init__(
        self,
        config: ClientConfig,
        session: SessionContext,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config
        self.session = session
        self._http = httpx.Client(timeout=config.timeout, transport=transport)

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _auth_headers(self) -> dict:
        token = self.session.get_token()
        if not token:
            raise AuthError("Not logged in.")
        return {"Authorization": f"Bearer {token}"}

    def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        url = self.config.resolve_url(endpoint)
        _log_debug(f"{method} {url}")
        try:
            return self._http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise NetworkError(str(e) or type(e).__name__, endpoint=endpoint) from e

    def login(self, username: str, password: str) -> str:
        """
        Exchange credentials for a bearer token and store it in the session.

        Raises:
            AuthError: Non-success response (backend "detail" when present) or no token returned
            NetworkError: Transport failure
        """
        response = self._send("POST", LOGIN_ENDPOINT, json={"username": username, "password": password})

        if not response.is_success:
            raise AuthError(_error_message(response, "detail", DEFAULT_LOGIN_ERROR))

        try:
            token = response.json().get("access_token")
        except (ValueError, AttributeError):
            token = None
        if not token:
            raise AuthError("Token missing in response")

        self.session.set_token(token)
        _log_info(f"Logged in as {username}")
        return token

    def fetch_profiles(self) -> List[Profile]:
        """
        List the profiles available to the logged-in user.

        Raises:
            AuthError: No token in the session
            NetworkError: Transport failure or non-success response
        """
        response = self._send("GET", PROFILES_ENDPOINT, headers=self._auth_headers())

        if not response.is_success:
            raise NetworkError(
                DEFAULT_PROFILES_ERROR, status_code=response.status_code, endpoint=PROFILES_ENDPOINT
            )

        try:
            return [Profile.from_dict(p) for p in response.json()["profiles"]]
        except (ValueError, KeyError, TypeError) as e:
            raise NetworkError(
                f"Malformed profiles response: {e}", status_code=response.status_code,
                endpoint=PROFILES_ENDPOINT,
            ) from e

    def generate_resume_pdf(self, submission: JobSubmission) -> bytes:
        """
        Ask the backend to generate a tailored PDF for a submission.

        Fields are sent as multipart/form-data, matching what the backend's
        form parser expects.

        Returns:
            PDF bytes

        Raises:
            AuthError: No token in the session
            NetworkError: Transport failure or non-success response (backend "error" when present)
        """
        fields = submission.to_form_fields()
        # httpx only switches to multipart/form-data when files are present,
        # so every field is sent as a filename-less part.
        parts = {name: (None, value.encode("utf-8")) for name, value in fields.items()}

        response = self._send(
            "POST", GENERATE_PDF_ENDPOINT, files=parts, headers=self._auth_headers()
        )

        if not response.is_success:
            raise NetworkError(
                _error_message(response, "error", DEFAULT_GENERATE_ERROR),
                status_code=response.status_code,
                endpoint=GENERATE_PDF_ENDPOINT,
            )

        _log_debug(f"Received {len(response.content)} bytes")
        return response.content
