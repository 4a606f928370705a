"""Register Patient use case: triage a new arrival and announce it."""

from typing import Optional

from ...core.result import Result
from ...core.structured_logger import StructuredLogger, get_logger
from ...domain.entities.patient import Patient, to_priority
from ...domain.enums.triage import PatientPriority
from ...domain.errors import DomainError, DuplicatePatientError, PatientValidationError
from ...domain.events.event_bus import TriageEventBus
from ...domain.events.triage_events import create_patient_registered_event
from ...domain.services.triage_engine import TriageEngine
from ...domain.services.vitals_assessment import VitalsAssessor
from ...domain.value_objects.vital_signs import VitalSigns
from ..dto.triage_dto import RegisterPatientRequest, RegisterPatientResponse
from ..ports.repositories.patient_repo import PatientRecord, PatientRepository
from ..ports.repositories.vitals_repo import VitalsRecord, VitalsRepository


class RegisterPatientUseCase:
    """Use case for registering a patient at triage."""

    def __init__(
        self,
        patient_repository: PatientRepository,
        vitals_repository: VitalsRepository,
        event_bus: Optional[TriageEventBus] = None,
        triage_engine: Optional[TriageEngine] = None,
        vitals_assessor: Optional[VitalsAssessor] = None,
        logger: Optional[StructuredLogger] = None,
        critical_threshold: PatientPriority = PatientPriority.P2,
    ):
        self._patient_repository = patient_repository
        self._vitals_repository = vitals_repository
        self._event_bus = event_bus
        self._triage_engine = triage_engine or TriageEngine()
        self._critical_threshold = to_priority(critical_threshold)
        self._vitals_assessor = vitals_assessor or VitalsAssessor()
        self._logger = logger or get_logger(__name__)

    async def execute(
        self, request: RegisterPatientRequest
    ) -> Result[RegisterPatientResponse, Exception]:
        try:
            return await self._register(request)
        except DomainError as exc:
            self._logger.warning(
                "Patient registration rejected", error=exc.message, error_code=exc.error_code
            )
            return Result.fail(exc)
        except Exception as exc:
            self._logger.exception("Unexpected error registering patient")
            return Result.fail(exc)

    async def _register(
        self, request: RegisterPatientRequest
    ) -> Result[RegisterPatientResponse, Exception]:
        patient = await self._build_patient(request)
        record = PatientRecord(
            id=patient.id,
            first_name=request.first_name.strip(),
            last_name=request.last_name.strip(),
            age=patient.age,
            gender=patient.gender,
            document_id=request.document_id,
            contact_phone=request.contact_phone,
            registered_by=request.registered_by,
        )
        saved = await self._patient_repository.save(record)
        if saved.is_failure:
            self._logger.error(
                "Failed to save patient record", patient_id=patient.id, error=str(saved.error)
            )
            return Result.fail(saved.error)

        patient = await self._patient_repository.save_entity(patient)
        await self._store_vitals(patient, request.registered_by)

        self._logger.info(
            "Patient registered",
            patient_id=patient.id,
            priority=int(patient.priority),
            registered_by=request.registered_by,
        )

        if self._event_bus is not None:
            event = create_patient_registered_event(
                patient_id=patient.id,
                patient_name=patient.name,
                priority=patient.priority,
                symptoms=patient.symptoms,
                registered_by=request.registered_by,
            )
            await self._event_bus.notify(event)

        return Result.ok(
            RegisterPatientResponse(
                patient_id=patient.id,
                patient_name=patient.name,
                priority=patient.priority,
                priority_label=patient.priority.label,
                status=patient.status,
                is_critical=patient.is_critical(self._critical_threshold),
                triggered_rules=self._triage_engine.get_triggered_rules(patient.vitals),
            )
        )

    async def _build_patient(self, request: RegisterPatientRequest) -> Patient:
        if not request.first_name or not request.first_name.strip():
            raise PatientValidationError("First name is required", "first_name", request.first_name)
        if not request.last_name or not request.last_name.strip():
            raise PatientValidationError("Last name is required", "last_name", request.last_name)
        if not request.registered_by:
            raise PatientValidationError(
                "Registering user is required", "registered_by", request.registered_by
            )
        if request.document_id:
            existing = await self._patient_repository.find_by_document_id(request.document_id)
            if existing is not None:
                raise DuplicatePatientError(request.document_id)

        vitals = VitalSigns.from_dict(request.vitals or {})
        manual = (
            to_priority(request.manual_priority) if request.manual_priority is not None else None
        )
        return Patient.create(
            name=f"{request.first_name.strip()} {request.last_name.strip()}",
            age=request.age,
            gender=request.gender,
            symptoms=request.symptoms,
            vitals=vitals,
            priority=self._triage_engine.calculate_priority(vitals),
            manual_priority=manual,
            assigned_nurse_id=request.assigned_nurse_id,
        )

    async def _store_vitals(self, patient: Patient, recorded_by: str) -> None:
        assessment = self._vitals_assessor.assess(patient.vitals)
        record = VitalsRecord.from_vitals(patient.id, patient.vitals, assessment, recorded_by)
        result = await self._vitals_repository.save(record)
        if result.is_failure:
            # Vitals history is secondary to the registration itself.
            self._logger.warning(
                "Failed to save vitals record", patient_id=patient.id, error=str(result.error)
            )
