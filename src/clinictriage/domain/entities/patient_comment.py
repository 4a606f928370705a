"""Clinical comment attached to a patient."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from ...core.utils.datetime_utils import (
    ensure_utc,
    get_current_timestamp,
    parse_iso_timestamp,
    to_iso,
)
from ...core.utils.ids import generate_id
from ..enums.triage import CommentType, UserRole
from ..errors import CommentValidationError

MIN_CONTENT_LENGTH = 5


def _validate_content(content: Optional[str]) -> str:
    if not content or len(content.strip()) < MIN_CONTENT_LENGTH:
        raise CommentValidationError(
            f"Comment content must be at least {MIN_CONTENT_LENGTH} characters long",
            "content",
            content,
        )
    return content.strip()


@dataclass
class PatientComment:
    """Comment entity. Belongs to exactly one patient."""

    id: str
    patient_id: str
    author_id: str
    author_name: str
    author_role: UserRole
    content: str
    type: CommentType
    created_at: datetime = field(default_factory=get_current_timestamp)
    is_edited: bool = False
    edited_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise CommentValidationError("Comment ID is required", "id", self.id)
        if not self.patient_id:
            raise CommentValidationError("Patient ID is required", "patient_id", self.patient_id)
        if not self.author_id:
            raise CommentValidationError("Author ID is required", "author_id", self.author_id)
        try:
            self.type = CommentType(self.type)
        except ValueError:
            raise CommentValidationError(
                f"Invalid comment type: {self.type}", "type", self.type
            ) from None
        try:
            self.author_role = UserRole(self.author_role)
        except ValueError:
            raise CommentValidationError(
                f"Invalid author role: {self.author_role}", "author_role", self.author_role
            ) from None
        self.content = _validate_content(self.content)

    @classmethod
    def create(
        cls,
        patient_id: str,
        author_id: str,
        author_name: str,
        author_role: UserRole,
        content: str,
        type: CommentType = CommentType.OBSERVATION,
    ) -> "PatientComment":
        return cls(
            id=generate_id("comment"),
            patient_id=patient_id,
            author_id=author_id,
            author_name=author_name,
            author_role=author_role,
            content=content,
            type=type,
        )

    def edit(self, new_content: str) -> None:
        self.content = _validate_content(new_content)
        self.is_edited = True
        self.edited_at = get_current_timestamp()

    def is_recent(
        self, window: timedelta = timedelta(hours=1), now: Optional[datetime] = None
    ) -> bool:
        now = now or get_current_timestamp()
        return ensure_utc(now) - ensure_utc(self.created_at) < window

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "patientId": self.patient_id,
            "authorId": self.author_id,
            "authorName": self.author_name,
            "authorRole": self.author_role.value,
            "content": self.content,
            "type": self.type.value,
            "createdAt": to_iso(self.created_at),
            "isEdited": self.is_edited,
            "editedAt": to_iso(self.edited_at),
        }

    @classmethod
    def from_persistence(cls, data: Dict[str, Any]) -> "PatientComment":
        return cls(
            id=data["id"],
            patient_id=data["patientId"],
            author_id=data["authorId"],
            author_name=data.get("authorName", ""),
            author_role=data["authorRole"],
            content=data["content"],
            type=data["type"],
            created_at=parse_iso_timestamp(data.get("createdAt")) or get_current_timestamp(),
            is_edited=data.get("isEdited", False),
            edited_at=parse_iso_timestamp(data.get("editedAt")),
        )
