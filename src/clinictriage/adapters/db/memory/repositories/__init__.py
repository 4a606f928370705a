from .audit_repository import InMemoryAuditRepository
from .comment_repository import InMemoryPatientCommentRepository
from .doctor_repository import InMemoryDoctorRepository
from .patient_repository import InMemoryPatientRepository
from .user_repository import InMemoryUserRepository
from .vitals_repository import InMemoryVitalsRepository

__all__ = [
    "InMemoryAuditRepository",
    "InMemoryDoctorRepository",
    "InMemoryPatientCommentRepository",
    "InMemoryPatientRepository",
    "InMemoryUserRepository",
    "InMemoryVitalsRepository",
]
