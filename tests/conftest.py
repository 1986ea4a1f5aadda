"""Shared fixtures: isolated client state, a fake backend and workflow factory."""

from pathlib import Path

import httpx
import pytest
from loguru import logger

from resume_tailor.config import load_config
from resume_tailor.contexts.backend import BackendClient
from resume_tailor.contexts.output import (
    Capability,
    ClientCapabilities,
    DirectoryHandle,
    FolderPreferenceStore,
)
from resume_tailor.contexts.output.handles import DENIED
from resume_tailor.contexts.session import SessionContext
from resume_tailor.contexts.submission import JobSubmissionWorkflow
from resume_tailor.utils.local_storage import LocalStorage

PDF_BYTES = b"%PDF-1.4\n% tailored resume\n%%EOF\n"

PROFILES = [
    {"id": "p1", "name": "Jane Doe"},
    {"id": "p2", "name": "John Smith"},
]


class FakeBackend:
    """In-process stand-in for the tailoring backend, served through httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.token = "token-123"
        self.login_status = 200
        self.login_body = None
        self.profiles = list(PROFILES)
        self.profiles_status = 200
        self.pdf = PDF_BYTES
        self.pdf_status = 200
        self.pdf_error_body = None
        self.raise_on = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        path = request.url.path

        if path in self.raise_on:
            raise httpx.ConnectError("Connection refused", request=request)

        if path == "/login":
            if self.login_status != 200:
                if self.login_body is None:
                    return httpx.Response(self.login_status, text="Internal Server Error")
                return httpx.Response(self.login_status, json=self.login_body)
            body = self.login_body if self.login_body is not None else {"access_token": self.token}
            return httpx.Response(200, json=body)

        if path == "/profiles":
            if self.profiles_status != 200:
                return httpx.Response(self.profiles_status, json={"detail": "nope"})
            return httpx.Response(200, json={"profiles": self.profiles})

        if path == "/generate_dynamic_resume_pdf":
            if self.pdf_status != 200:
                if self.pdf_error_body is None:
                    return httpx.Response(self.pdf_status, text="<html>oops</html>")
                return httpx.Response(self.pdf_status, json=self.pdf_error_body)
            return httpx.Response(
                200, content=self.pdf, headers={"Content-Type": "application/pdf"}
            )

        return httpx.Response(404, json={"detail": "Not Found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self):
        return [r.url.path for r in self.requests]


class DeniedDirectoryHandle(DirectoryHandle):
    """Directory handle whose permission requests are always refused."""

    def request_permission(self, mode: str = "read") -> str:
        return DENIED


class RecordingSaveDialog:
    """Save dialog that answers with a fixed file handle (or cancels) and records calls."""

    def __init__(self, answer=None, error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    def __call__(self, options):
        self.calls.append(options)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop loguru sinks added during a test (CliRunner streams close afterwards)."""
    yield
    logger.remove()


@pytest.fixture
def config(tmp_path: Path):
    return load_config(
        backend_url="http://backend.test",
        paths_state_dir=str(tmp_path / "state"),
        paths_logs_dir=str(tmp_path / "logs"),
        paths_downloads_dir=str(tmp_path / "downloads"),
    )


@pytest.fixture
def session(config):
    session = SessionContext(LocalStorage(config.local_storage_path), token_key=config.token_key)
    session.init()
    return session


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(config, session, backend):
    client = BackendClient(config, session, transport=backend.transport)
    yield client
    client.close()


@pytest.fixture
def logged_in(session, backend):
    session.set_token(backend.token)
    return session


@pytest.fixture
def store(config):
    return FolderPreferenceStore(config.database_path)


@pytest.fixture
def make_workflow(config, client, store, tmp_path):
    """Factory for workflows with profiles loaded and injectable capabilities."""

    def _make(
        save_dialog=None,
        directory_access=Capability.SUPPORTED,
        dialog_capability=Capability.SUPPORTED,
        load_profiles=True,
    ) -> JobSubmissionWorkflow:
        workflow = JobSubmissionWorkflow(
            client=client,
            store=store,
            capabilities=ClientCapabilities(
                directory_access=directory_access, save_dialog=dialog_capability
            ),
            downloads_dir=config.downloads_dir,
            save_dialog=save_dialog,
            temp_dir=tmp_path / "links",
            events_file=config.events_path,
        )
        if load_profiles:
            workflow.load_profiles()
        return workflow

    return _make
