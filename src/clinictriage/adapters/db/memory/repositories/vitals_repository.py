"""
In-memory implementation of VitalsRepository.
"""

from datetime import datetime
from typing import Dict, List, Optional

from clinictriage.application.ports.repositories.vitals_repo import VitalsRecord, VitalsRepository
from clinictriage.core.result import Result
from clinictriage.core.utils.datetime_utils import ensure_utc


class InMemoryVitalsRepository(VitalsRepository):
    def __init__(self) -> None:
        self._by_patient: Dict[str, List[VitalsRecord]] = {}

    async def save(self, record: VitalsRecord) -> Result[VitalsRecord, Exception]:
        self._by_patient.setdefault(record.patient_id, []).append(record)
        return Result.ok(record)

    async def find_by_patient_id(self, patient_id: str) -> Result[List[VitalsRecord], Exception]:
        records = sorted(self._by_patient.get(patient_id, []), key=lambda r: ensure_utc(r.recorded_at))
        return Result.ok(records)

    async def find_latest(self, patient_id: str) -> Result[Optional[VitalsRecord], Exception]:
        records = (await self.find_by_patient_id(patient_id)).value
        return Result.ok(records[-1] if records else None)

    async def find_by_date_range(
        self, patient_id: str, start: datetime, end: datetime
    ) -> Result[List[VitalsRecord], Exception]:
        lower, upper = ensure_utc(start), ensure_utc(end)
        records = (await self.find_by_patient_id(patient_id)).value
        return Result.ok([r for r in records if lower <= ensure_utc(r.recorded_at) <= upper])
