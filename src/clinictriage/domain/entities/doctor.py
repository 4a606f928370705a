"""Doctor profile and the doctor aggregate with its capacity model."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict

from ...core.utils.datetime_utils import get_current_timestamp, parse_iso_timestamp, to_iso
from ...core.utils.ids import generate_id
from ..enums.triage import MedicalSpecialty, UserRole, UserStatus
from ..errors import (
    DoctorAtCapacityError,
    DoctorUnavailableError,
    DoctorValidationError,
    NoPatientsToReleaseError,
)
from .user import StaffMember, User

MIN_PATIENT_LOAD = 1
MAX_PATIENT_LOAD = 50
DEFAULT_MAX_PATIENT_LOAD = 10


@dataclass
class DoctorProfile:
    """Doctor-specific data attached to a user."""

    id: str
    user_id: str
    specialty: MedicalSpecialty
    license_number: str
    is_available: bool = True
    current_patient_load: int = 0
    max_patient_load: int = DEFAULT_MAX_PATIENT_LOAD
    created_at: datetime = field(default_factory=get_current_timestamp)
    updated_at: datetime = field(default_factory=get_current_timestamp)

    def __post_init__(self) -> None:
        try:
            self.specialty = MedicalSpecialty(self.specialty)
        except ValueError:
            raise DoctorValidationError(
                f"Invalid specialty: {self.specialty}", "specialty", self.specialty
            ) from None
        if not self.id:
            raise DoctorValidationError("Doctor ID is required", "id", self.id)
        if not self.user_id:
            raise DoctorValidationError("User ID is required", "user_id", self.user_id)
        if not self.license_number or len(self.license_number.strip()) < 5:
            raise DoctorValidationError(
                "License number must be at least 5 characters long",
                "license_number",
                self.license_number,
            )
        self.license_number = self.license_number.strip()
        if not MIN_PATIENT_LOAD <= self.max_patient_load <= MAX_PATIENT_LOAD:
            raise DoctorValidationError(
                f"Max patient load must be between {MIN_PATIENT_LOAD} and {MAX_PATIENT_LOAD}",
                "max_patient_load",
                self.max_patient_load,
            )
        # Only negative loads are rejected; load above max is caught at assignment.
        if self.current_patient_load < 0:
            raise DoctorValidationError(
                "Current patient load cannot be negative",
                "current_patient_load",
                self.current_patient_load,
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "specialty": self.specialty.value,
            "licenseNumber": self.license_number,
            "isAvailable": self.is_available,
            "currentPatientLoad": self.current_patient_load,
            "maxPatientLoad": self.max_patient_load,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DoctorProfile":
        return cls(
            id=data["id"],
            user_id=data["userId"],
            specialty=data["specialty"],
            license_number=data["licenseNumber"],
            is_available=data.get("isAvailable", True),
            current_patient_load=data.get("currentPatientLoad", 0),
            max_patient_load=data.get("maxPatientLoad", DEFAULT_MAX_PATIENT_LOAD),
            created_at=parse_iso_timestamp(data.get("createdAt")) or get_current_timestamp(),
            updated_at=parse_iso_timestamp(data.get("updatedAt")) or get_current_timestamp(),
        )


class Doctor(StaffMember):
    """A doctor: a ``User`` with a ``DoctorProfile``."""

    def __init__(self, user: User, profile: DoctorProfile) -> None:
        super().__init__(user, UserRole.DOCTOR)
        if profile.user_id != user.id:
            raise DoctorValidationError(
                "Doctor profile does not belong to this user", "user_id", profile.user_id
            )
        self._profile = replace(profile)

    @classmethod
    def create(
        cls,
        email: str,
        name: str,
        specialty: MedicalSpecialty,
        license_number: str,
        max_patient_load: int = DEFAULT_MAX_PATIENT_LOAD,
        is_available: bool = True,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> "Doctor":
        user = User.create(email=email, name=name, role=UserRole.DOCTOR, status=status)
        profile = DoctorProfile(
            id=generate_id("doctor"),
            user_id=user.id,
            specialty=specialty,
            license_number=license_number,
            is_available=is_available,
            current_patient_load=0,
            max_patient_load=max_patient_load,
        )
        return cls(user, profile)

    @classmethod
    def from_persistence(cls, data: Dict[str, Any]) -> "Doctor":
        return cls(User.from_persistence(data["user"]), DoctorProfile.from_dict(data["profile"]))

    @property
    def id(self) -> str:
        return self._profile.id

    @property
    def specialty(self) -> MedicalSpecialty:
        return self._profile.specialty

    @property
    def license_number(self) -> str:
        return self._profile.license_number

    @property
    def is_available(self) -> bool:
        return self._profile.is_available

    @property
    def current_patient_load(self) -> int:
        return self._profile.current_patient_load

    @property
    def max_patient_load(self) -> int:
        return self._profile.max_patient_load

    @property
    def available_slots(self) -> int:
        return max(0, self.max_patient_load - self.current_patient_load)

    def is_on_duty(self) -> bool:
        return self.is_active() and self.is_available

    def can_take_patient(self) -> bool:
        return (
            self.is_available
            and self.status == UserStatus.ACTIVE
            and self.current_patient_load < self.max_patient_load
        )

    def ensure_can_take_patient(self) -> None:
        """Raise the specific reason this doctor cannot take a patient."""
        if not self.is_available:
            raise DoctorUnavailableError(self.id, "doctor is marked unavailable")
        if self.status != UserStatus.ACTIVE:
            raise DoctorUnavailableError(self.id, f"doctor status is {self.status.value}")
        if self.current_patient_load >= self.max_patient_load:
            raise DoctorAtCapacityError(self.id, self.max_patient_load)

    def assign_patient(self) -> None:
        self.ensure_can_take_patient()
        self._profile.current_patient_load += 1
        self._touch()

    def release_patient(self) -> None:
        if self._profile.current_patient_load <= 0:
            raise NoPatientsToReleaseError(self.id)
        self._profile.current_patient_load -= 1
        self._touch()

    def toggle_availability(self) -> None:
        self._profile.is_available = not self._profile.is_available
        self._touch()

    def set_availability(self, is_available: bool) -> None:
        self._profile.is_available = bool(is_available)
        self._touch()

    def update_specialty(self, specialty: MedicalSpecialty) -> None:
        try:
            self._profile.specialty = MedicalSpecialty(specialty)
        except ValueError:
            raise DoctorValidationError(
                f"Invalid specialty: {specialty}", "specialty", specialty
            ) from None
        self._touch()

    def _touch(self) -> None:
        self._profile.updated_at = get_current_timestamp()

    def to_dict(self) -> Dict[str, Any]:
        return {"user": self.user.to_dict(), "profile": self._profile.to_dict()}
