"""Data exchanged with the tailoring backend."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Profile:
    """A resume profile saved on the backend. Read-only on the client."""

    id: str
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        return cls(id=str(data["id"]), name=str(data["name"]))


@dataclass
class JobSubmission:
    """
    One job submission. Transient: built from user input, sent once, discarded.

    Attributes:
        profile_name: Display name of the selected profile
        company: Company name
        role: Role / position
        job_description: Full job description text
    """

    profile_name: str
    company: str
    role: str
    job_description: str

    def to_form_fields(self) -> Dict[str, str]:
        """Multipart form fields expected by /generate_dynamic_resume_pdf."""
        return {
            "profile_name": self.profile_name,
            "job_description": self.job_description,
            "company": self.company,
            "role": self.role,
        }
