"""
In-memory implementation of PatientRepository.

Aggregates are stored as documents and rebuilt on every read, so callers
never share mutable state with the store.
"""

from dataclasses import replace
from typing import Any, Dict, List, Optional

from clinictriage.application.ports.repositories.patient_repo import (
    PatientRecord,
    PatientRepository,
)
from clinictriage.core.exceptions import RepositoryError
from clinictriage.core.result import Result
from clinictriage.domain.entities.patient import Patient


class InMemoryPatientRepository(PatientRepository):
    """In-memory implementation of PatientRepository."""

    def __init__(self) -> None:
        self._records: Dict[str, PatientRecord] = {}
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def save(self, record: PatientRecord) -> Result[PatientRecord, Exception]:
        if not record.id:
            return Result.fail(RepositoryError("Patient record must have an ID"))
        self._records[record.id] = replace(record)
        return Result.ok(replace(record))

    async def find_by_id(self, patient_id: str) -> Result[Optional[PatientRecord], Exception]:
        record = self._records.get(patient_id)
        return Result.ok(replace(record) if record else None)

    async def find_all(self) -> Result[List[PatientRecord], Exception]:
        return Result.ok([replace(record) for record in self._records.values()])

    async def find_by_document_id(self, document_id: str) -> Optional[PatientRecord]:
        for record in self._records.values():
            if record.document_id and record.document_id == document_id:
                return replace(record)
        return None

    async def save_entity(self, patient: Patient) -> Patient:
        self._documents[patient.id] = patient.to_dict()
        return self._to_entity(self._documents[patient.id])

    async def find_entity_by_id(self, patient_id: str) -> Optional[Patient]:
        document = self._documents.get(patient_id)
        if document is None:
            return None
        return self._to_entity(document)

    async def find_all_entities(self) -> List[Patient]:
        return [self._to_entity(document) for document in self._documents.values()]

    async def find_by_doctor_id(self, doctor_id: str) -> List[Patient]:
        return [
            self._to_entity(document)
            for document in self._documents.values()
            if document.get("assignedDoctorId") == doctor_id
        ]

    def clear(self) -> None:
        self._records.clear()
        self._documents.clear()

    def size(self) -> int:
        return len(self._documents)

    @staticmethod
    def _to_entity(document: Dict[str, Any]) -> Patient:
        return Patient.from_persistence(document)
