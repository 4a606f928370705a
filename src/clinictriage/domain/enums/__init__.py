from .triage import (
    CommentType,
    MedicalSpecialty,
    NurseArea,
    NurseShift,
    PatientPriority,
    PatientProcess,
    PatientStatus,
    UserRole,
    UserStatus,
)

__all__ = [
    "CommentType",
    "MedicalSpecialty",
    "NurseArea",
    "NurseShift",
    "PatientPriority",
    "PatientProcess",
    "PatientStatus",
    "UserRole",
    "UserStatus",
]
