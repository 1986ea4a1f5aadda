"""
Session Context

Responsibilities:
- Holds the bearer token for authenticated backend calls
- Persists the token to local storage on every change
- Reads the persisted token once at startup and clears it on logout

Owns: Token lifecycle
Never: Talks to the backend directly
"""

from resume_tailor.contexts.session.session import SessionContext

__all__ = ["SessionContext"]
