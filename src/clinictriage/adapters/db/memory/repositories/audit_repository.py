"""
In-memory implementation of AuditRepository (append-only).
"""

from typing import List

from clinictriage.application.ports.repositories.audit_repo import (
    AuditLogRecord,
    AuditRepository,
    AuditSearchCriteria,
)
from clinictriage.core.exceptions import RepositoryError
from clinictriage.core.result import Result
from clinictriage.core.utils.datetime_utils import ensure_utc


class InMemoryAuditRepository(AuditRepository):
    def __init__(self) -> None:
        self._records: List[AuditLogRecord] = []

    async def save(self, record: AuditLogRecord) -> Result[AuditLogRecord, Exception]:
        if any(existing.id == record.id for existing in self._records):
            return Result.fail(RepositoryError(f"Audit record '{record.id}' already exists"))
        self._records.append(record)
        return Result.ok(record)

    async def find_by_user_id(self, user_id: str) -> Result[List[AuditLogRecord], Exception]:
        return await self.search(AuditSearchCriteria(user_id=user_id, limit=len(self._records) or 1))

    async def find_by_patient_id(self, patient_id: str) -> Result[List[AuditLogRecord], Exception]:
        return await self.search(
            AuditSearchCriteria(patient_id=patient_id, limit=len(self._records) or 1)
        )

    async def find_by_action(self, action: str) -> Result[List[AuditLogRecord], Exception]:
        return await self.search(AuditSearchCriteria(action=action, limit=len(self._records) or 1))

    async def search(self, criteria: AuditSearchCriteria) -> Result[List[AuditLogRecord], Exception]:
        if criteria.limit < 1 or criteria.offset < 0:
            return Result.fail(RepositoryError("Invalid pagination", {"limit": criteria.limit, "offset": criteria.offset}))
        matches = [r for r in self._records if self._matches(r, criteria)]
        matches.sort(key=lambda r: ensure_utc(r.timestamp), reverse=True)
        return Result.ok(matches[criteria.offset : criteria.offset + criteria.limit])

    @staticmethod
    def _matches(record: AuditLogRecord, criteria: AuditSearchCriteria) -> bool:
        if criteria.user_id is not None and record.user_id != criteria.user_id:
            return False
        if criteria.patient_id is not None and record.patient_id != criteria.patient_id:
            return False
        if criteria.action is not None and record.action != criteria.action:
            return False
        timestamp = ensure_utc(record.timestamp)
        if criteria.start_date is not None and timestamp < ensure_utc(criteria.start_date):
            return False
        if criteria.end_date is not None and timestamp > ensure_utc(criteria.end_date):
            return False
        return True

    @property
    def records(self) -> List[AuditLogRecord]:
        return list(self._records)
