"""
In-memory implementation of DoctorRepository.
"""

from typing import Any, Dict, List, Optional

from clinictriage.application.ports.repositories.doctor_repo import DoctorRepository
from clinictriage.domain.entities.doctor import Doctor
from clinictriage.domain.enums.triage import MedicalSpecialty


class InMemoryDoctorRepository(DoctorRepository):
    """Doctors keyed by doctor ID, with a secondary index on user ID."""

    def __init__(self) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._by_user_id: Dict[str, str] = {}

    async def save(self, doctor: Doctor) -> Doctor:
        self._documents[doctor.id] = doctor.to_dict()
        self._by_user_id[doctor.user_id] = doctor.id
        return Doctor.from_persistence(self._documents[doctor.id])

    async def find_by_id(self, doctor_id: str) -> Optional[Doctor]:
        document = self._documents.get(doctor_id)
        return Doctor.from_persistence(document) if document else None

    async def find_by_user_id(self, user_id: str) -> Optional[Doctor]:
        doctor_id = self._by_user_id.get(user_id)
        if doctor_id is None:
            return None
        return await self.find_by_id(doctor_id)

    async def find_all(
        self,
        specialty: Optional[MedicalSpecialty] = None,
        is_available: Optional[bool] = None,
    ) -> List[Doctor]:
        doctors = [Doctor.from_persistence(document) for document in self._documents.values()]
        if specialty is not None:
            doctors = [d for d in doctors if d.specialty == MedicalSpecialty(specialty)]
        if is_available is not None:
            doctors = [d for d in doctors if d.is_available == is_available]
        return doctors

    async def find_available(self) -> List[Doctor]:
        doctors = await self.find_all()
        available = [d for d in doctors if d.can_take_patient()]
        # Least loaded first
        available.sort(key=lambda d: (d.current_patient_load, -d.available_slots))
        return available

    def clear(self) -> None:
        self._documents.clear()
        self._by_user_id.clear()
