"""
User identity and the staff-member interface.

Doctors and nurses are not subclasses of ``User``: each is a ``User`` plus a
role profile linked by ``user_id``, exposed through ``StaffMember``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from ...core.utils.datetime_utils import get_current_timestamp, parse_iso_timestamp, to_iso
from ...core.utils.ids import generate_id
from ..enums.triage import UserRole, UserStatus
from ..errors import UserValidationError


def _coerce_enum(enum_cls, value: Any, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise UserValidationError(f"Invalid {label}: {value}", label, value) from None


@dataclass
class User:
    """Identity shared by every staff member."""

    id: str
    email: str
    name: str
    role: UserRole
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime = field(default_factory=get_current_timestamp)
    updated_at: datetime = field(default_factory=get_current_timestamp)

    def __post_init__(self) -> None:
        self.role = _coerce_enum(UserRole, self.role, "role")
        self.status = _coerce_enum(UserStatus, self.status, "status")
        self._validate()

    def _validate(self) -> None:
        if not self.id or not str(self.id).strip():
            raise UserValidationError("User ID is required", "id", self.id)
        if not self.email or "@" not in self.email:
            raise UserValidationError("Valid email is required", "email", self.email)
        if not self.name or len(self.name.strip()) < 2:
            raise UserValidationError(
                "Name must be at least 2 characters long", "name", self.name
            )
        self.email = self.email.strip().lower()
        self.name = self.name.strip()

    @classmethod
    def create(
        cls,
        email: str,
        name: str,
        role: UserRole,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> "User":
        return cls(id=generate_id("user"), email=email, name=name, role=role, status=status)

    @classmethod
    def from_persistence(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            email=data["email"],
            name=data["name"],
            role=data["role"],
            status=data.get("status", UserStatus.ACTIVE),
            created_at=parse_iso_timestamp(data.get("createdAt")) or get_current_timestamp(),
            updated_at=parse_iso_timestamp(data.get("updatedAt")) or get_current_timestamp(),
        )

    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def is_doctor(self) -> bool:
        return self.role == UserRole.DOCTOR

    def is_nurse(self) -> bool:
        return self.role == UserRole.NURSE

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def change_status(self, new_status: UserStatus) -> None:
        self.status = _coerce_enum(UserStatus, new_status, "status")
        self.touch()

    def update_name(self, name: str) -> None:
        if not name or len(name.strip()) < 2:
            raise UserValidationError("Name must be at least 2 characters long", "name", name)
        self.name = name.strip()
        self.touch()

    def touch(self) -> None:
        self.updated_at = get_current_timestamp()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }


class StaffMember(ABC):
    """A user acting in a clinical role.

    Identity questions are answered by the wrapped ``User``; role behaviour
    comes from the concrete profile.
    """

    def __init__(self, user: User, expected_role: UserRole) -> None:
        if user.role != expected_role:
            raise UserValidationError(
                f"User role must be {expected_role.value}, got {user.role.value}",
                "role",
                user.role.value,
            )
        self.user = user

    @property
    @abstractmethod
    def id(self) -> str:
        """Identifier of the role profile."""

    @abstractmethod
    def is_on_duty(self) -> bool:
        """Whether this staff member can currently be given work."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Serialize user and profile together."""

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def name(self) -> str:
        return self.user.name

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def role(self) -> UserRole:
        return self.user.role

    @property
    def status(self) -> UserStatus:
        return self.user.status

    def is_active(self) -> bool:
        return self.user.is_active()

    def change_status(self, new_status: UserStatus) -> None:
        self.user.change_status(new_status)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, StaffMember):
            return NotImplemented
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r})"
