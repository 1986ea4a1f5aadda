"""
Resume Tailor - command-line client for the resume tailoring backend

Authenticates against the backend, lists saved profiles, submits job
descriptions and saves the generated PDF resume locally.

Architecture:
- Session Context: Bearer token persistence and lifecycle
- Backend Context: HTTP calls to the tailoring API
- Output Context: Folder preferences, file handles and save strategies
- Submission Context: Job submission workflow and folder actions
"""

__version__ = "0.1.0"
