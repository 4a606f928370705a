"""Nurse profile and the nurse aggregate."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict

from ...core.utils.datetime_utils import get_current_timestamp, parse_iso_timestamp, to_iso
from ...core.utils.ids import generate_id
from ..enums.triage import NurseArea, NurseShift, UserRole, UserStatus
from ..errors import NurseValidationError
from .user import StaffMember, User


def _area(value: Any) -> NurseArea:
    try:
        return NurseArea(value)
    except ValueError:
        raise NurseValidationError(f"Invalid area: {value}", "area", value) from None


def _shift(value: Any) -> NurseShift:
    try:
        return NurseShift(value)
    except ValueError:
        raise NurseValidationError(f"Invalid shift: {value}", "shift", value) from None


@dataclass
class NurseProfile:
    id: str
    user_id: str
    area: NurseArea
    shift: NurseShift
    license_number: str
    created_at: datetime = field(default_factory=get_current_timestamp)
    updated_at: datetime = field(default_factory=get_current_timestamp)

    def __post_init__(self) -> None:
        self.area = _area(self.area)
        self.shift = _shift(self.shift)
        if not self.id:
            raise NurseValidationError("Nurse ID is required", "id", self.id)
        if not self.user_id:
            raise NurseValidationError("User ID is required", "user_id", self.user_id)
        if not self.license_number or len(self.license_number.strip()) < 5:
            raise NurseValidationError(
                "License number must be at least 5 characters long",
                "license_number",
                self.license_number,
            )
        self.license_number = self.license_number.strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "area": self.area.value,
            "shift": self.shift.value,
            "licenseNumber": self.license_number,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NurseProfile":
        return cls(
            id=data["id"],
            user_id=data["userId"],
            area=data["area"],
            shift=data["shift"],
            license_number=data["licenseNumber"],
            created_at=parse_iso_timestamp(data.get("createdAt")) or get_current_timestamp(),
            updated_at=parse_iso_timestamp(data.get("updatedAt")) or get_current_timestamp(),
        )


class Nurse(StaffMember):
    """A nurse: a ``User`` with a ``NurseProfile``."""

    def __init__(self, user: User, profile: NurseProfile) -> None:
        super().__init__(user, UserRole.NURSE)
        if profile.user_id != user.id:
            raise NurseValidationError(
                "Nurse profile does not belong to this user", "user_id", profile.user_id
            )
        self._profile = replace(profile)

    @classmethod
    def create(
        cls,
        email: str,
        name: str,
        area: NurseArea,
        shift: NurseShift,
        license_number: str,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> "Nurse":
        user = User.create(email=email, name=name, role=UserRole.NURSE, status=status)
        profile = NurseProfile(
            id=generate_id("nurse"),
            user_id=user.id,
            area=area,
            shift=shift,
            license_number=license_number,
        )
        return cls(user, profile)

    @classmethod
    def from_persistence(cls, data: Dict[str, Any]) -> "Nurse":
        return cls(User.from_persistence(data["user"]), NurseProfile.from_dict(data["profile"]))

    @property
    def id(self) -> str:
        return self._profile.id

    @property
    def area(self) -> NurseArea:
        return self._profile.area

    @property
    def shift(self) -> NurseShift:
        return self._profile.shift

    @property
    def license_number(self) -> str:
        return self._profile.license_number

    def is_on_duty(self) -> bool:
        return self.is_active()

    def is_in_triage(self) -> bool:
        return self.area == NurseArea.TRIAGE

    def update_area(self, area: NurseArea) -> None:
        self._profile.area = _area(area)
        self._profile.updated_at = get_current_timestamp()

    def update_shift(self, shift: NurseShift) -> None:
        self._profile.shift = _shift(shift)
        self._profile.updated_at = get_current_timestamp()

    def to_dict(self) -> Dict[str, Any]:
        return {"user": self.user.to_dict(), "profile": self._profile.to_dict()}
