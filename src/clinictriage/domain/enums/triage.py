"""Enumerations for the triage domain."""

from enum import Enum, IntEnum


class PatientPriority(IntEnum):
    """Clinical urgency, P1 most critical. Lower value means more severe."""

    P1 = 1
    P2 = 2
    P3 = 3
    P4 = 4
    P5 = 5

    @property
    def label(self) -> str:
        return PRIORITY_LABELS[self]

    def is_more_severe_than(self, other: "PatientPriority") -> bool:
        return self.value < int(other)


PRIORITY_LABELS = {
    PatientPriority.P1: "P1 - CRITICAL (Resuscitation)",
    PatientPriority.P2: "P2 - EMERGENCY",
    PatientPriority.P3: "P3 - URGENT",
    PatientPriority.P4: "P4 - LESS URGENT",
    PatientPriority.P5: "P5 - NON URGENT",
}


class PatientStatus(str, Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    UNDER_TREATMENT = "under_treatment"
    STABILIZED = "stabilized"
    DISCHARGED = "discharged"
    TRANSFERRED = "transferred"

    @property
    def is_terminal(self) -> bool:
        return self in (PatientStatus.DISCHARGED, PatientStatus.TRANSFERRED)


class PatientProcess(str, Enum):
    """Disposition recorded for a patient."""

    NONE = "none"
    DISCHARGE = "discharge"
    HOSPITALIZATION = "hospitalization"
    HOSPITALIZATION_DAYS = "hospitalization_days"
    ICU = "icu"
    REFERRAL = "referral"


class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    NURSE = "nurse"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class MedicalSpecialty(str, Enum):
    GENERAL_MEDICINE = "general_medicine"
    EMERGENCY_MEDICINE = "emergency_medicine"
    CARDIOLOGY = "cardiology"
    NEUROLOGY = "neurology"
    PEDIATRICS = "pediatrics"
    SURGERY = "surgery"
    INTERNAL_MEDICINE = "internal_medicine"
    TRAUMATOLOGY = "traumatology"
    INTENSIVE_CARE = "intensive_care"
    OTHER = "other"


class NurseArea(str, Enum):
    TRIAGE = "triage"
    EMERGENCY = "emergency"
    ICU = "icu"
    GENERAL_WARD = "general_ward"
    PEDIATRICS = "pediatrics"
    SURGERY = "surgery"
    OTHER = "other"


class NurseShift(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    NIGHT = "night"


class CommentType(str, Enum):
    OBSERVATION = "observation"
    DIAGNOSIS = "diagnosis"
    TREATMENT = "treatment"
    STATUS_CHANGE = "status_change"
    TRANSFER = "transfer"
    DISCHARGE = "discharge"
