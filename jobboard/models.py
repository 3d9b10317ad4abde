"""
Core data model shared by the validation, upload and reward engines.

Profiles are handed to the core as snapshots; every component that needs one
takes a copy via ``Profile.snapshot()`` instead of holding the caller's object.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


class UploadKind(str, Enum):
    """Documents a profile can carry."""

    RESUME = "Resume"
    CERTIFICATE = "Certificate"


class UploadStatus(str, Enum):
    """Lifecycle of one upload kind."""

    NOT_STARTED = "not_started"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class DocumentRef:
    """Opaque reference to a picked file."""

    location: str

    @property
    def name(self) -> str:
        return self.location.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Notification:
    """User-facing title/message pair."""

    title: str
    message: str


@dataclass
class Profile:
    name: str = ""
    email: str = ""
    phone_number: str = ""
    school: str = ""
    resume_ref: Optional[DocumentRef] = None
    certificate_ref: Optional[DocumentRef] = None

    @property
    def resume_uploaded(self) -> bool:
        return self.resume_ref is not None

    @property
    def certificate_uploaded(self) -> bool:
        return self.certificate_ref is not None

    def document_ref(self, kind: UploadKind) -> Optional[DocumentRef]:
        if kind is UploadKind.RESUME:
            return self.resume_ref
        return self.certificate_ref

    def with_document(self, kind: UploadKind, doc: DocumentRef) -> "Profile":
        """Return a copy with the reference for ``kind`` replaced."""
        if kind is UploadKind.RESUME:
            return replace(self, resume_ref=doc)
        return replace(self, certificate_ref=doc)

    def snapshot(self) -> "Profile":
        # Fields are strings and frozen refs, so a shallow copy is a full copy
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone_number": self.phone_number,
            "school": self.school,
            "resume": self.resume_ref.location if self.resume_ref else None,
            "certificate": self.certificate_ref.location if self.certificate_ref else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        resume = data.get("resume")
        certificate = data.get("certificate")
        return cls(
            name=data.get("name") or "",
            email=data.get("email") or "",
            phone_number=data.get("phone_number") or "",
            school=data.get("school") or "",
            resume_ref=DocumentRef(resume) if resume else None,
            certificate_ref=DocumentRef(certificate) if certificate else None,
        )
