"""
Record Vitals use case.

New readings are merged into the patient's vitals, the automatic priority
is recomputed, and the reading is kept in the vitals history. Critical
readings and priority changes are announced on the event bus.
"""

from typing import Optional

from ...core.structured_logger import StructuredLogger, get_logger
from ...domain.errors import DomainError, PatientNotFoundError
from ...domain.events.event_bus import TriageEventBus
from ...domain.events.triage_events import (
    create_critical_vitals_event,
    create_priority_changed_event,
)
from ...domain.services.vitals_assessment import VitalsAssessor
from ...domain.value_objects.vital_signs import normalize_vital_keys
from ..dto.triage_dto import RecordVitalsRequest, RecordVitalsResponse
from ..ports.repositories.patient_repo import PatientRepository
from ..ports.repositories.vitals_repo import VitalsRecord, VitalsRepository


class RecordVitalsUseCase:
    def __init__(
        self,
        patient_repository: PatientRepository,
        vitals_repository: VitalsRepository,
        event_bus: Optional[TriageEventBus] = None,
        vitals_assessor: Optional[VitalsAssessor] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self._patient_repository = patient_repository
        self._vitals_repository = vitals_repository
        self._event_bus = event_bus
        self._vitals_assessor = vitals_assessor or VitalsAssessor()
        self._logger = logger or get_logger(__name__)

    async def execute(self, request: RecordVitalsRequest) -> RecordVitalsResponse:
        try:
            patient = await self._patient_repository.find_entity_by_id(request.patient_id)
            if patient is None:
                raise PatientNotFoundError(request.patient_id)

            old_priority = patient.priority
            patient.update_vitals(**normalize_vital_keys(request.vitals or {}))
            patient.recalculate_priority()
            patient = await self._patient_repository.save_entity(patient)
        except DomainError as exc:
            self._logger.warning(
                "Recording vitals failed", patient_id=request.patient_id, error=exc.message
            )
            return RecordVitalsResponse.failure(exc)
        except Exception as exc:
            self._logger.exception(
                "Unexpected error recording vitals", patient_id=request.patient_id
            )
            return RecordVitalsResponse.failure(exc)

        assessment = self._vitals_assessor.assess(patient.vitals)
        record: Optional[VitalsRecord] = VitalsRecord.from_vitals(
            patient.id, patient.vitals, assessment, request.recorded_by
        )
        saved = await self._vitals_repository.save(record)
        if saved.is_failure:
            self._logger.warning(
                "Failed to save vitals record", patient_id=patient.id, error=str(saved.error)
            )
            record = None

        if self._event_bus is not None:
            if assessment.is_critical:
                await self._event_bus.notify(
                    create_critical_vitals_event(
                        patient_id=patient.id,
                        patient_name=patient.name,
                        heart_rate=patient.vitals.heart_rate,
                        oxygen_saturation=patient.vitals.oxygen_saturation,
                        temperature=patient.vitals.temperature,
                        assigned_doctor_id=patient.assigned_doctor_id,
                    )
                )
            if patient.priority != old_priority:
                await self._event_bus.notify(
                    create_priority_changed_event(
                        patient_id=patient.id,
                        patient_name=patient.name,
                        old_priority=old_priority,
                        new_priority=patient.priority,
                        reason="Vital signs updated",
                        changed_by=request.recorded_by,
                    )
                )

        return RecordVitalsResponse(
            success=True,
            patient=patient,
            vitals_record=record,
            is_critical=assessment.is_critical,
            findings=list(assessment.findings),
            message="Vitals recorded",
        )
