from .audit_repo import AuditLogRecord, AuditRepository, AuditSearchCriteria
from .comment_repo import PatientCommentRepository
from .doctor_repo import DoctorRepository
from .patient_repo import PatientRecord, PatientRepository
from .user_repo import UserRepository
from .vitals_repo import VitalsRecord, VitalsRepository

__all__ = [
    "AuditLogRecord",
    "AuditRepository",
    "AuditSearchCriteria",
    "DoctorRepository",
    "PatientCommentRepository",
    "PatientRecord",
    "PatientRepository",
    "UserRepository",
    "VitalsRecord",
    "VitalsRepository",
]
