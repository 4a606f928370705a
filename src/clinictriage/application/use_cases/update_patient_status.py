"""Update Patient Status use case."""

from typing import Optional

from ...core.structured_logger import StructuredLogger, get_logger
from ...domain.entities.patient import to_status
from ...domain.enums.triage import PatientStatus
from ...domain.errors import DomainError, PatientNotFoundError
from ...domain.events.event_bus import TriageEventBus
from ...domain.events.triage_events import create_patient_discharged_event
from ..dto.triage_dto import UpdatePatientStatusRequest, UpdatePatientStatusResponse
from ..observers.audit_observer import SYSTEM_USER
from ..ports.repositories.doctor_repo import DoctorRepository
from ..ports.repositories.patient_repo import PatientRepository
from .doctor_lookup import release_doctor_slot


class UpdatePatientStatusUseCase:
    """Use case for moving a patient through the status lifecycle.

    When a patient reaches DISCHARGED or TRANSFERRED the assigned doctor's
    slot is given back once, if a doctor repository was provided. The patient
    records the release so a later terminal move does not give it back again.
    """

    def __init__(
        self,
        patient_repository: PatientRepository,
        doctor_repository: Optional[DoctorRepository] = None,
        event_bus: Optional[TriageEventBus] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self._patient_repository = patient_repository
        self._doctor_repository = doctor_repository
        self._event_bus = event_bus
        self._logger = logger or get_logger(__name__)

    async def execute(self, request: UpdatePatientStatusRequest) -> UpdatePatientStatusResponse:
        try:
            status = to_status(request.status)
            patient = await self._patient_repository.find_entity_by_id(request.patient_id)
            if patient is None:
                raise PatientNotFoundError(request.patient_id)

            already_discharged = patient.discharge_time is not None
            previous = patient.update_status(status)
            if (
                status.is_terminal
                and patient.has_doctor_slot()
                and self._doctor_repository is not None
            ):
                await release_doctor_slot(
                    self._doctor_repository, patient.assigned_doctor_id, self._logger
                )
                patient.mark_doctor_slot_released()

            patient = await self._patient_repository.save_entity(patient)
        except DomainError as exc:
            self._logger.warning(
                "Patient status update failed",
                patient_id=request.patient_id,
                status=str(request.status),
                error=exc.message,
            )
            return UpdatePatientStatusResponse.failure(exc)
        except Exception as exc:
            self._logger.exception(
                "Unexpected error updating patient status", patient_id=request.patient_id
            )
            return UpdatePatientStatusResponse.failure(exc)

        self._logger.info(
            "Patient status updated",
            patient_id=patient.id,
            previous_status=previous.value,
            new_status=patient.status.value,
        )

        if (
            self._event_bus is not None
            and status == PatientStatus.DISCHARGED
            and not already_discharged
        ):
            event = create_patient_discharged_event(
                patient_id=patient.id,
                patient_name=patient.name,
                discharged_by=request.changed_by or patient.assigned_doctor_id or SYSTEM_USER,
                treatment_duration=patient.treatment_duration_minutes(),
                final_status=patient.status,
            )
            await self._event_bus.notify(event)

        return UpdatePatientStatusResponse(
            success=True,
            patient=patient,
            previous_status=previous,
            message=f"Patient status updated to {patient.status.value}",
        )
