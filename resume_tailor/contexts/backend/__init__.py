"""
Backend Context

Responsibilities:
- Authenticates users and obtains bearer tokens
- Lists the profiles saved on the backend
- Requests generation of tailored PDF resumes

Owns: HTTP calls and translation of HTTP failures into client errors
Never: Decides where generated files are saved
"""

from resume_tailor.contexts.backend.client import BackendClient
from resume_tailor.contexts.backend.models import JobSubmission, Profile

__all__ = ["BackendClient", "JobSubmission", "Profile"]
