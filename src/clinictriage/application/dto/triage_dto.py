"""Request/response DTOs for the triage use cases."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar

from ...core.exceptions import ClinicTriageException
from ...domain.entities.doctor import Doctor
from ...domain.entities.patient import Patient
from ...domain.entities.patient_comment import PatientComment
from ...domain.enums.triage import PatientPriority, PatientStatus
from ...domain.errors import DomainError
from ..ports.repositories.vitals_repo import VitalsRecord

R = TypeVar("R", bound="UseCaseResponse")

INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class UseCaseResponse:
    """Uniform outcome of a use case: exceptions never cross this boundary."""

    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def failure(cls: Type[R], exc: Exception) -> R:
        if isinstance(exc, (DomainError, ClinicTriageException)):
            return cls(
                success=False, error=exc.message, error_code=exc.error_code or INTERNAL_ERROR
            )
        return cls(success=False, error=str(exc) or type(exc).__name__, error_code=INTERNAL_ERROR)


@dataclass
class RegisterPatientRequest:
    """Request DTO for patient registration."""

    first_name: str
    last_name: str
    age: int
    gender: str
    symptoms: List[str]
    vitals: Dict[str, Any]
    registered_by: str
    document_id: Optional[str] = None
    contact_phone: Optional[str] = None
    manual_priority: Optional[int] = None
    assigned_nurse_id: Optional[str] = None


@dataclass
class RegisterPatientResponse:
    patient_id: str
    patient_name: str
    priority: PatientPriority
    priority_label: str
    status: PatientStatus
    is_critical: bool = False
    triggered_rules: List[str] = field(default_factory=list)
    message: str = "Patient registered successfully"


@dataclass
class AssignDoctorRequest:
    patient_id: str
    doctor_id: str
    reason: Optional[str] = None


@dataclass
class AssignDoctorResponse(UseCaseResponse):
    patient: Optional[Patient] = None
    doctor: Optional[Doctor] = None
    is_reassignment: bool = False


@dataclass
class UpdatePatientStatusRequest:
    patient_id: str
    status: str
    changed_by: Optional[str] = None


@dataclass
class UpdatePatientStatusResponse(UseCaseResponse):
    patient: Optional[Patient] = None
    previous_status: Optional[PatientStatus] = None


@dataclass
class AddCommentRequest:
    patient_id: str
    author_id: str
    content: str
    type: str = "observation"


@dataclass
class AddCommentResponse(UseCaseResponse):
    comment: Optional[PatientComment] = None


@dataclass
class GetDoctorPatientsRequest:
    doctor_id: str


@dataclass
class GetDoctorPatientsResponse(UseCaseResponse):
    doctor: Optional[Doctor] = None
    patients: List[Patient] = field(default_factory=list)


@dataclass
class ChangePatientPriorityRequest:
    """Set a manual priority, or clear it when ``priority`` is None."""

    patient_id: str
    priority: Optional[int]
    changed_by: str
    reason: str = "Manual priority override"


@dataclass
class ChangePatientPriorityResponse(UseCaseResponse):
    patient: Optional[Patient] = None
    old_priority: Optional[PatientPriority] = None
    new_priority: Optional[PatientPriority] = None


@dataclass
class RecordVitalsRequest:
    """Partial readings; omitted vitals keep their previous value."""

    patient_id: str
    vitals: Dict[str, Any]
    recorded_by: str


@dataclass
class RecordVitalsResponse(UseCaseResponse):
    patient: Optional[Patient] = None
    vitals_record: Optional[VitalsRecord] = None
    is_critical: bool = False
    findings: List[str] = field(default_factory=list)
