"""Session data models — wizard mode, requirements, staged documents and source files."""

import mimetypes
import uuid
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WizardMode(BaseModel):
    """Create a new business, or Edit an existing one keyed by its registry id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["create", "edit"] = "create"
    business_id: Optional[str] = None

    @model_validator(mode="after")
    def _edit_needs_id(self):
        if self.kind == "edit" and not self.business_id:
            raise ValueError("Edit mode requires a business_id")
        return self

    @classmethod
    def create(cls) -> "WizardMode":
        return cls(kind="create")

    @classmethod
    def edit(cls, business_id: str) -> "WizardMode":
        return cls(kind="edit", business_id=business_id)

    @property
    def is_edit(self) -> bool:
        return self.kind == "edit"


class RequirementStatus(str, Enum):
    PENDING_UPLOAD = "Pending Upload"
    UPLOADED = "Uploaded"
    FAILED = "Failed"


class DocumentStatus(IntEnum):
    PENDING = 0
    COMMITTED = 1
    FAILED = 2


class SourceFile(BaseModel):
    """A raw file handed to the wizard: in-memory bytes or a local path."""

    name: str
    content: Optional[bytes] = None
    path: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def mime_type(self) -> str:
        if self.content_type:
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or "application/octet-stream"


class Requirement(BaseModel):
    """User-facing regulatory document obligation."""

    id: str = Field(frozen=True)
    type: str
    description: str
    status: RequirementStatus = RequirementStatus.PENDING_UPLOAD
    file_name: Optional[str] = None
    file_ref: Optional[str] = None     # id of the StagedDocument expected for this file
    path: Optional[str] = None         # previously persisted location (edit mode)
    source: Optional[SourceFile] = Field(default=None, exclude=True)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "status": self.status.value,
            "fileName": self.file_name,
        }


class StagedDocument(BaseModel):
    """Encoded, not-yet-uploaded file. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    requirement_id: Optional[str] = None
    type: str
    description: str
    business_ref: str
    user_id: str
    filename: str
    encoded_payload: Optional[str] = None
    file_type: Optional[str] = None
    path: str = ""
    status: DocumentStatus = DocumentStatus.PENDING
    timestamp: str = Field(default_factory=lambda: now_iso())

    def to_payload(self, business_id: Optional[str] = None) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "businessId": business_id or self.business_ref,
            "userId": self.user_id,
            "path": self.path,
            "filename": self.filename,
            "status": int(self.status),
            "timestamp": self.timestamp,
            "fileData": self.encoded_payload,
            "fileType": self.file_type,
        }


# ── Defaults ────────────────────────────────────────────────────────────

DEFAULT_REQUIREMENTS = [
    ("1", "Business Terms", "Business Terms"),
    ("2", "Community Tax Certification", "Community Tax Certification"),
    ("3", "DTI", "DTI"),
]


def initial_requirements() -> List[Requirement]:
    """Factory — the requirement checklist every new session starts with."""
    return [Requirement(id=rid, type=rtype, description=desc) for rid, rtype, desc in DEFAULT_REQUIREMENTS]


def new_id(prefix: str = "") -> str:
    """Short unique id for requirements and staged documents."""
    return f"{prefix}{uuid.uuid4().hex[:8]}"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
