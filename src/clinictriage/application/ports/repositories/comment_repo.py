"""
Patient comment repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.patient_comment import PatientComment
from ....domain.enums.triage import CommentType


class PatientCommentRepository(ABC):
    """Abstract repository for patient comments."""

    @abstractmethod
    async def save(self, comment: PatientComment) -> PatientComment:
        pass

    @abstractmethod
    async def find_by_id(self, comment_id: str) -> Optional[PatientComment]:
        pass

    @abstractmethod
    async def find_by_patient_id(self, patient_id: str) -> List[PatientComment]:
        """Comments for a patient, oldest first."""

    @abstractmethod
    async def find_by_author_id(self, author_id: str) -> List[PatientComment]:
        pass

    @abstractmethod
    async def find_by_type(self, patient_id: str, comment_type: CommentType) -> List[PatientComment]:
        pass

    @abstractmethod
    async def find_recent(self, patient_id: str, minutes: int = 60) -> List[PatientComment]:
        """Comments for a patient created within the last ``minutes``."""

    @abstractmethod
    async def count_by_patient_id(self, patient_id: str) -> int:
        pass
