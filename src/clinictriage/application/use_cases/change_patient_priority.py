"""Change Patient Priority use case: manual override set or cleared."""

from typing import Optional

from ...core.structured_logger import StructuredLogger, get_logger
from ...domain.entities.patient import to_priority
from ...domain.errors import DomainError, PatientNotFoundError
from ...domain.events.event_bus import TriageEventBus
from ...domain.events.triage_events import create_priority_changed_event
from ..dto.triage_dto import ChangePatientPriorityRequest, ChangePatientPriorityResponse
from ..ports.repositories.patient_repo import PatientRepository


class ChangePatientPriorityUseCase:
    def __init__(
        self,
        patient_repository: PatientRepository,
        event_bus: Optional[TriageEventBus] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self._patient_repository = patient_repository
        self._event_bus = event_bus
        self._logger = logger or get_logger(__name__)

    async def execute(self, request: ChangePatientPriorityRequest) -> ChangePatientPriorityResponse:
        try:
            patient = await self._patient_repository.find_entity_by_id(request.patient_id)
            if patient is None:
                raise PatientNotFoundError(request.patient_id)

            old_priority = patient.priority
            if request.priority is None:
                patient.clear_manual_priority()
            else:
                patient.set_manual_priority(to_priority(request.priority))
            patient = await self._patient_repository.save_entity(patient)
        except DomainError as exc:
            self._logger.warning(
                "Priority change failed", patient_id=request.patient_id, error=exc.message
            )
            return ChangePatientPriorityResponse.failure(exc)
        except Exception as exc:
            self._logger.exception(
                "Unexpected error changing priority", patient_id=request.patient_id
            )
            return ChangePatientPriorityResponse.failure(exc)

        new_priority = patient.priority
        if new_priority != old_priority:
            self._logger.info(
                "Patient priority changed",
                patient_id=patient.id,
                old_priority=int(old_priority),
                new_priority=int(new_priority),
                changed_by=request.changed_by,
            )
            if self._event_bus is not None:
                await self._event_bus.notify(
                    create_priority_changed_event(
                        patient_id=patient.id,
                        patient_name=patient.name,
                        old_priority=old_priority,
                        new_priority=new_priority,
                        reason=request.reason,
                        changed_by=request.changed_by,
                    )
                )

        return ChangePatientPriorityResponse(
            success=True,
            patient=patient,
            old_priority=old_priority,
            new_priority=new_priority,
        )
