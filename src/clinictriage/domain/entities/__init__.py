from .doctor import Doctor, DoctorProfile
from .nurse import Nurse, NurseProfile
from .patient import Patient
from .patient_comment import PatientComment
from .user import StaffMember, User

__all__ = [
    "Doctor",
    "DoctorProfile",
    "Nurse",
    "NurseProfile",
    "Patient",
    "PatientComment",
    "StaffMember",
    "User",
]
