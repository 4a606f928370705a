"""
Vital signs history repository interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ....core.result import Result
from ....core.utils.datetime_utils import get_current_timestamp
from ....core.utils.ids import generate_id
from ....domain.services.vitals_assessment import VitalsAssessment
from ....domain.value_objects.vital_signs import VitalSigns


@dataclass(frozen=True)
class VitalsRecord:
    """One timestamped vitals reading for a patient."""

    id: str
    patient_id: str
    heart_rate: float
    temperature: float
    oxygen_saturation: float
    respiratory_rate: float
    blood_pressure: str
    is_abnormal: bool
    is_critical: bool
    recorded_by: Optional[str] = None
    recorded_at: datetime = field(default_factory=get_current_timestamp)

    @classmethod
    def from_vitals(
        cls,
        patient_id: str,
        vitals: VitalSigns,
        assessment: VitalsAssessment,
        recorded_by: Optional[str] = None,
    ) -> "VitalsRecord":
        return cls(
            id=generate_id("vitals"),
            patient_id=patient_id,
            heart_rate=vitals.heart_rate,
            temperature=vitals.temperature,
            oxygen_saturation=vitals.oxygen_saturation,
            respiratory_rate=vitals.respiratory_rate,
            blood_pressure=vitals.blood_pressure,
            is_abnormal=assessment.is_abnormal,
            is_critical=assessment.is_critical,
            recorded_by=recorded_by,
        )


class VitalsRepository(ABC):
    """Abstract repository for vitals history."""

    @abstractmethod
    async def save(self, record: VitalsRecord) -> Result[VitalsRecord, Exception]:
        pass

    @abstractmethod
    async def find_by_patient_id(self, patient_id: str) -> Result[List[VitalsRecord], Exception]:
        """Readings for a patient, oldest first."""

    @abstractmethod
    async def find_latest(self, patient_id: str) -> Result[Optional[VitalsRecord], Exception]:
        pass

    @abstractmethod
    async def find_by_date_range(
        self, patient_id: str, start: datetime, end: datetime
    ) -> Result[List[VitalsRecord], Exception]:
        pass
