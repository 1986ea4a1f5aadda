"""
Bearer token session state.

The session is an explicit object handed to whatever issues authenticated
calls. It reads the persisted token once in init() and every mutation writes
through to local storage before returning.
"""

from typing import Optional

from resume_tailor.contexts.session.logger import _log_debug, _log_info
from resume_tailor.utils.local_storage import LocalStorage

DEFAULT_TOKEN_KEY = "jwt_token"


class SessionContext:
    """
    Holds the opaque bearer token.

    Example:
        session = SessionContext(LocalStorage(config.local_storage_path))
        session.init()
        if session.get_token() is None:
            session.set_token(client.login(username, password))
    """

    def __init__(self, storage: LocalStorage, token_key: str = DEFAULT_TOKEN_KEY):
        self.storage = storage
        self.token_key = token_key
        self._token: Optional[str] = None

    def init(self) -> Optional[str]:
        """Read the persisted token into memory. Returns the token (or None)."""
        self._token = self.storage.get_item(self.token_key) or None
        _log_debug(f"Session initialized ({'token present' if self._token else 'no token'})")
        return self._token

    def teardown(self) -> None:
        """End the session: clears the persisted and in-memory token."""
        self.clear_token()

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def get_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: str) -> None:
        if not token:
            raise ValueError("Token must be a non-empty string")
        self.storage.set_item(self.token_key, token)
        self._token = token
        _log_info("Token stored")

    def clear_token(self) -> None:
        self.storage.remove_item(self.token_key)
        self._token = None
        _log_info("Token cleared")
