"""
Doctor repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.doctor import Doctor
from ....domain.enums.triage import MedicalSpecialty


class DoctorRepository(ABC):
    """Abstract repository for doctor aggregates."""

    @abstractmethod
    async def save(self, doctor: Doctor) -> Doctor:
        """Insert or replace a doctor."""

    @abstractmethod
    async def find_by_id(self, doctor_id: str) -> Optional[Doctor]:
        """Find a doctor by its own ID."""

    async def find_by_user_id(self, user_id: str) -> Optional[Doctor]:
        """Find a doctor by the ID of the underlying user.

        Optional capability; repositories that do not key doctors by user
        return None.
        """
        return None

    @abstractmethod
    async def find_all(
        self,
        specialty: Optional[MedicalSpecialty] = None,
        is_available: Optional[bool] = None,
    ) -> List[Doctor]:
        """List doctors, optionally filtered."""

    @abstractmethod
    async def find_available(self) -> List[Doctor]:
        """Doctors that can take a patient right now."""
