"""Get Doctor Patients use case."""

from typing import Optional

from ...core.structured_logger import StructuredLogger, get_logger
from ...domain.errors import DoctorNotFoundError, DomainError
from ..dto.triage_dto import GetDoctorPatientsRequest, GetDoctorPatientsResponse
from ..ports.repositories.doctor_repo import DoctorRepository
from ..ports.repositories.patient_repo import PatientRepository
from .doctor_lookup import resolve_doctor


class GetDoctorPatientsUseCase:
    """Patients assigned to a doctor, most urgent first."""

    def __init__(
        self,
        patient_repository: PatientRepository,
        doctor_repository: DoctorRepository,
        logger: Optional[StructuredLogger] = None,
    ):
        self._patient_repository = patient_repository
        self._doctor_repository = doctor_repository
        self._logger = logger or get_logger(__name__)

    async def execute(self, request: GetDoctorPatientsRequest) -> GetDoctorPatientsResponse:
        try:
            doctor = await resolve_doctor(self._doctor_repository, request.doctor_id)
            if doctor is None:
                raise DoctorNotFoundError(request.doctor_id)
            patients = await self._patient_repository.find_by_doctor_id(doctor.id)
        except DomainError as exc:
            self._logger.warning("Doctor lookup failed", doctor_id=request.doctor_id, error=exc.message)
            return GetDoctorPatientsResponse.failure(exc)
        except Exception as exc:
            self._logger.exception("Unexpected error listing patients", doctor_id=request.doctor_id)
            return GetDoctorPatientsResponse.failure(exc)

        patients.sort(key=lambda p: (int(p.priority), p.arrival_time))
        return GetDoctorPatientsResponse(success=True, doctor=doctor, patients=patients)
