"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationFailedError(DomainError):
    """Base for invariant violations raised on construction or mutation."""

    def __init__(self, message: str, error_code: str, field: Optional[str] = None, value: Any = None) -> None:
        details: Dict[str, Any] = {}
        if field is not None:
            details = {"field": field, "value": value}
        super().__init__(message, error_code, details)
        self.field = field


class PatientValidationError(ValidationFailedError):
    """Invalid patient data."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message, "INVALID_PATIENT_DATA", field, value)


class InvalidVitalSignsError(ValidationFailedError):
    """A vital sign is missing or outside its accepted range."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message, "INVALID_VITAL_SIGNS", field, value)


class UserValidationError(ValidationFailedError):
    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message, "INVALID_USER_DATA", field, value)


class DoctorValidationError(ValidationFailedError):
    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message, "INVALID_DOCTOR_DATA", field, value)


class NurseValidationError(ValidationFailedError):
    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message, "INVALID_NURSE_DATA", field, value)


class CommentValidationError(ValidationFailedError):
    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message, "INVALID_COMMENT_DATA", field, value)


class InvalidStatusError(ValidationFailedError):
    """Status value is not a member of the status enumeration."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Invalid status: {value}", "INVALID_STATUS", "status", value)


class InvalidPriorityError(ValidationFailedError):
    """Priority is not one of P1..P5."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Invalid priority: {value}. Must be between 1 and 5",
            "INVALID_PRIORITY",
            "priority",
            value,
        )


class PatientNotFoundError(DomainError):
    """Patient not found."""

    def __init__(self, patient_id: str) -> None:
        message = f"Patient with ID '{patient_id}' not found"
        super().__init__(message, "PATIENT_NOT_FOUND", {"patient_id": patient_id})


class DoctorNotFoundError(DomainError):
    """Doctor not found."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor with ID '{doctor_id}' not found"
        super().__init__(message, "DOCTOR_NOT_FOUND", {"doctor_id": doctor_id})


class UserNotFoundError(DomainError):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        message = f"User with ID '{user_id}' not found"
        super().__init__(message, "USER_NOT_FOUND", {"user_id": user_id})


class PatientAlreadyAssignedError(DomainError):
    """Patient already has a doctor (or already has this doctor)."""

    def __init__(self, patient_id: str, doctor_id: Optional[str] = None, same_doctor: bool = False) -> None:
        if same_doctor:
            message = "Patient is already assigned to this doctor"
        else:
            message = "Patient is already assigned to a doctor"
        super().__init__(
            message,
            "PATIENT_ALREADY_ASSIGNED",
            {"patient_id": patient_id, "doctor_id": doctor_id},
        )


class DoctorAtCapacityError(DomainError):
    """Doctor has reached the maximum patient load."""

    def __init__(self, doctor_id: str, max_patient_load: int) -> None:
        message = f"Doctor has reached maximum patient load ({max_patient_load})"
        super().__init__(
            message,
            "DOCTOR_AT_CAPACITY",
            {"doctor_id": doctor_id, "max_patient_load": max_patient_load},
        )


class DoctorUnavailableError(DomainError):
    """Doctor is switched off or not active."""

    def __init__(self, doctor_id: str, reason: str) -> None:
        message = f"Doctor is not available: {reason}"
        super().__init__(message, "DOCTOR_UNAVAILABLE", {"doctor_id": doctor_id, "reason": reason})


class NoPatientsToReleaseError(DomainError):
    """Release called on a doctor with zero load."""

    def __init__(self, doctor_id: str) -> None:
        super().__init__(
            "Doctor has no patients to release",
            "NO_PATIENTS_TO_RELEASE",
            {"doctor_id": doctor_id},
        )


class CommentPatientMismatchError(DomainError):
    """Comment belongs to a different patient."""

    def __init__(self, comment_patient_id: str, patient_id: str) -> None:
        super().__init__(
            "Comment patient ID does not match",
            "COMMENT_PATIENT_MISMATCH",
            {"comment_patient_id": comment_patient_id, "patient_id": patient_id},
        )


class DuplicatePatientError(DomainError):
    """A patient with the same identity document is already registered."""

    def __init__(self, document_id: str) -> None:
        message = f"Patient with document '{document_id}' already exists"
        super().__init__(message, "DUPLICATE_PATIENT", {"document_id": document_id})


class PatientNotActiveError(DomainError):
    """Patient has left care (discharged or transferred)."""

    def __init__(self, patient_id: str, status: str) -> None:
        message = f"Cannot assign a doctor to a {status} patient"
        super().__init__(message, "PATIENT_NOT_ACTIVE", {"patient_id": patient_id, "status": status})
