"""
In-memory implementation of PatientCommentRepository.
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional

from clinictriage.application.ports.repositories.comment_repo import PatientCommentRepository
from clinictriage.domain.entities.patient_comment import PatientComment
from clinictriage.domain.enums.triage import CommentType


class InMemoryPatientCommentRepository(PatientCommentRepository):
    def __init__(self) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def save(self, comment: PatientComment) -> PatientComment:
        self._documents[comment.id] = comment.to_dict()
        return PatientComment.from_persistence(self._documents[comment.id])

    async def find_by_id(self, comment_id: str) -> Optional[PatientComment]:
        document = self._documents.get(comment_id)
        return PatientComment.from_persistence(document) if document else None

    async def find_by_patient_id(self, patient_id: str) -> List[PatientComment]:
        comments = [
            PatientComment.from_persistence(document)
            for document in self._documents.values()
            if document["patientId"] == patient_id
        ]
        comments.sort(key=lambda c: c.created_at)
        return comments

    async def find_by_author_id(self, author_id: str) -> List[PatientComment]:
        return [
            PatientComment.from_persistence(document)
            for document in self._documents.values()
            if document["authorId"] == author_id
        ]

    async def find_by_type(self, patient_id: str, comment_type: CommentType) -> List[PatientComment]:
        wanted = CommentType(comment_type)
        return [c for c in await self.find_by_patient_id(patient_id) if c.type == wanted]

    async def find_recent(self, patient_id: str, minutes: int = 60) -> List[PatientComment]:
        window = timedelta(minutes=minutes)
        return [c for c in await self.find_by_patient_id(patient_id) if c.is_recent(window)]

    async def count_by_patient_id(self, patient_id: str) -> int:
        return sum(1 for d in self._documents.values() if d["patientId"] == patient_id)

    def clear(self) -> None:
        self._documents.clear()
