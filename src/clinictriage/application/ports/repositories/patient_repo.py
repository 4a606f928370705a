"""
Patient repository interface for data access abstraction.

Two paths coexist: the ``PatientRecord`` path (registration data, returns
``Result``) and the entity path used by the triage use cases.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ....core.result import Result
from ....core.utils.datetime_utils import get_current_timestamp
from ....domain.entities.patient import Patient


@dataclass
class PatientRecord:
    """Registration data captured at the front desk."""

    id: str
    first_name: str
    last_name: str
    age: int
    gender: str
    document_id: Optional[str] = None
    contact_phone: Optional[str] = None
    registered_by: Optional[str] = None
    created_at: datetime = field(default_factory=get_current_timestamp)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class PatientRepository(ABC):
    """Abstract repository for patient data access."""

    @abstractmethod
    async def save(self, record: PatientRecord) -> Result[PatientRecord, Exception]:
        """Save registration data."""

    @abstractmethod
    async def find_by_id(self, patient_id: str) -> Result[Optional[PatientRecord], Exception]:
        """Find registration data by patient ID."""

    @abstractmethod
    async def find_all(self) -> Result[List[PatientRecord], Exception]:
        """List all registration records."""

    @abstractmethod
    async def find_by_document_id(self, document_id: str) -> Optional[PatientRecord]:
        """Find registration data by identity document."""

    @abstractmethod
    async def save_entity(self, patient: Patient) -> Patient:
        """Insert or replace a patient aggregate."""

    @abstractmethod
    async def find_entity_by_id(self, patient_id: str) -> Optional[Patient]:
        """Find a patient aggregate by ID."""

    @abstractmethod
    async def find_all_entities(self) -> List[Patient]:
        """List every patient aggregate."""

    @abstractmethod
    async def find_by_doctor_id(self, doctor_id: str) -> List[Patient]:
        """Patients currently assigned to a doctor."""
