"""
Patient aggregate: registration data, vitals, priority and status lifecycle.

State is only changed through the methods below. Accessors for mutable
collections return copies.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from ...core.utils.datetime_utils import (
    get_current_timestamp,
    minutes_between,
    parse_iso_timestamp,
    to_iso,
)
from ...core.utils.ids import generate_id
from ..enums.triage import PatientPriority, PatientProcess, PatientStatus
from ..errors import (
    CommentPatientMismatchError,
    InvalidPriorityError,
    InvalidStatusError,
    PatientAlreadyAssignedError,
    PatientValidationError,
)
from ..services.triage_engine import calculate_priority
from ..value_objects.vital_signs import VitalSigns
from .patient_comment import PatientComment

VALID_GENDERS = ("male", "female", "other")
MIN_AGE = 0
MAX_AGE = 150

# disposition -> status it drives
PROCESS_STATUS = {
    PatientProcess.DISCHARGE: PatientStatus.DISCHARGED,
    PatientProcess.HOSPITALIZATION: PatientStatus.UNDER_TREATMENT,
    PatientProcess.HOSPITALIZATION_DAYS: PatientStatus.UNDER_TREATMENT,
    PatientProcess.ICU: PatientStatus.UNDER_TREATMENT,
    PatientProcess.REFERRAL: PatientStatus.TRANSFERRED,
}


def to_priority(value: Union[int, PatientPriority]) -> PatientPriority:
    if isinstance(value, bool):
        raise InvalidPriorityError(value)
    try:
        return PatientPriority(value)
    except ValueError:
        raise InvalidPriorityError(value) from None


def to_status(value: Union[str, PatientStatus]) -> PatientStatus:
    try:
        return PatientStatus(value)
    except ValueError:
        raise InvalidStatusError(value) from None


def to_process(value: Union[str, PatientProcess]) -> PatientProcess:
    try:
        return PatientProcess(value)
    except ValueError:
        raise PatientValidationError(f"Invalid process: {value}", "process", value) from None


class Patient:
    """Patient domain entity."""

    def __init__(
        self,
        *,
        id: str,
        name: str,
        age: int,
        gender: str,
        symptoms: Iterable[str],
        vitals: VitalSigns,
        priority: PatientPriority,
        status: PatientStatus = PatientStatus.WAITING,
        manual_priority: Optional[PatientPriority] = None,
        process: PatientProcess = PatientProcess.NONE,
        process_details: Optional[str] = None,
        assigned_doctor_id: Optional[str] = None,
        assigned_doctor_name: Optional[str] = None,
        assigned_nurse_id: Optional[str] = None,
        doctor_slot_released: bool = False,
        comments: Optional[Iterable[PatientComment]] = None,
        arrival_time: Optional[datetime] = None,
        treatment_start_time: Optional[datetime] = None,
        discharge_time: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        now = get_current_timestamp()
        self._id = id
        self._name = name
        self._age = age
        self._gender = gender
        self._symptoms = list(symptoms) if symptoms is not None else []
        self._vitals = vitals
        self._priority = to_priority(priority)
        self._manual_priority = (
            to_priority(manual_priority) if manual_priority is not None else None
        )
        self._status = to_status(status)
        self._process = to_process(process)
        self._process_details = process_details
        self._assigned_doctor_id = assigned_doctor_id
        self._assigned_doctor_name = assigned_doctor_name
        self._assigned_nurse_id = assigned_nurse_id
        self._doctor_slot_released = bool(doctor_slot_released)
        self._comments: List[PatientComment] = [replace(c) for c in comments or []]
        self._arrival_time = arrival_time or now
        self._treatment_start_time = treatment_start_time
        self._discharge_time = discharge_time
        self._created_at = created_at or now
        self._updated_at = updated_at or now
        self._validate()

    def _validate(self) -> None:
        if not self._id or not str(self._id).strip():
            raise PatientValidationError("Patient ID is required", "id", self._id)
        if not isinstance(self._name, str) or len(self._name.strip()) < 2:
            raise PatientValidationError(
                "Patient name must be at least 2 characters long", "name", self._name
            )
        self._name = self._name.strip()
        if (
            not isinstance(self._age, int)
            or isinstance(self._age, bool)
            or not MIN_AGE <= self._age <= MAX_AGE
        ):
            raise PatientValidationError(
                f"Age must be between {MIN_AGE} and {MAX_AGE}", "age", self._age
            )
        gender = self._gender.strip().lower() if isinstance(self._gender, str) else self._gender
        if gender not in VALID_GENDERS:
            raise PatientValidationError(
                f"Gender must be one of: {', '.join(VALID_GENDERS)}", "gender", self._gender
            )
        self._gender = gender
        cleaned = [s.strip() for s in self._symptoms if isinstance(s, str) and s.strip()]
        if not cleaned or len(cleaned) != len(self._symptoms):
            raise PatientValidationError(
                "At least one symptom is required and symptoms cannot be blank",
                "symptoms",
                self._symptoms,
            )
        self._symptoms = cleaned
        if isinstance(self._vitals, dict):
            self._vitals = VitalSigns.from_dict(self._vitals)
        if not isinstance(self._vitals, VitalSigns):
            raise PatientValidationError("Vital signs are required", "vitals", self._vitals)

    # --- factories -------------------------------------------------------

    @classmethod
    def create(
        cls,
        name: str,
        age: int,
        gender: str,
        symptoms: Iterable[str],
        vitals: Union[VitalSigns, Dict[str, Any]],
        priority: Optional[PatientPriority] = None,
        manual_priority: Optional[PatientPriority] = None,
        assigned_nurse_id: Optional[str] = None,
    ) -> "Patient":
        """Register a new patient: WAITING, no comments, fresh id.

        The automatic priority is computed from the vitals when not given.
        """
        if isinstance(vitals, dict):
            vitals = VitalSigns.from_dict(vitals)
        if priority is None and isinstance(vitals, VitalSigns):
            priority = calculate_priority(vitals)
        return cls(
            id=generate_id("patient"),
            name=name,
            age=age,
            gender=gender,
            symptoms=symptoms,
            vitals=vitals,
            priority=priority if priority is not None else PatientPriority.P5,
            manual_priority=manual_priority,
            status=PatientStatus.WAITING,
            assigned_nurse_id=assigned_nurse_id,
            comments=[],
        )

    @classmethod
    def from_persistence(cls, data: Dict[str, Any]) -> "Patient":
        """Rebuild from stored data; the id is kept as-is."""
        manual = data.get("manualPriority")
        return cls(
            id=data["id"],
            name=data["name"],
            age=data["age"],
            gender=data["gender"],
            symptoms=data["symptoms"],
            vitals=VitalSigns.from_dict(data["vitals"]),
            priority=data["priority"],
            manual_priority=manual,
            status=data.get("status", PatientStatus.WAITING),
            process=data.get("process", PatientProcess.NONE),
            process_details=data.get("processDetails"),
            assigned_doctor_id=data.get("assignedDoctorId"),
            assigned_doctor_name=data.get("assignedDoctorName"),
            assigned_nurse_id=data.get("assignedNurseId"),
            doctor_slot_released=data.get("doctorSlotReleased", False),
            comments=[PatientComment.from_persistence(c) for c in data.get("comments", [])],
            arrival_time=parse_iso_timestamp(data.get("arrivalTime")),
            treatment_start_time=parse_iso_timestamp(data.get("treatmentStartTime")),
            discharge_time=parse_iso_timestamp(data.get("dischargeTime")),
            created_at=parse_iso_timestamp(data.get("createdAt")),
            updated_at=parse_iso_timestamp(data.get("updatedAt")),
        )

    # --- accessors -------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def age(self) -> int:
        return self._age

    @property
    def gender(self) -> str:
        return self._gender

    @property
    def symptoms(self) -> List[str]:
        return list(self._symptoms)

    @property
    def vitals(self) -> VitalSigns:
        # frozen value object, safe to hand out
        return self._vitals

    @property
    def priority(self) -> PatientPriority:
        """Effective priority: the manual override when set."""
        if self._manual_priority is not None:
            return self._manual_priority
        return self._priority

    @property
    def automatic_priority(self) -> PatientPriority:
        return self._priority

    @property
    def manual_priority(self) -> Optional[PatientPriority]:
        return self._manual_priority

    @property
    def status(self) -> PatientStatus:
        return self._status

    @property
    def process(self) -> PatientProcess:
        return self._process

    @property
    def process_details(self) -> Optional[str]:
        return self._process_details

    @property
    def assigned_doctor_id(self) -> Optional[str]:
        return self._assigned_doctor_id

    @property
    def assigned_doctor_name(self) -> Optional[str]:
        return self._assigned_doctor_name

    @property
    def assigned_nurse_id(self) -> Optional[str]:
        return self._assigned_nurse_id

    @property
    def comments(self) -> List[PatientComment]:
        return [replace(comment) for comment in self._comments]

    @property
    def arrival_time(self) -> datetime:
        return self._arrival_time

    @property
    def treatment_start_time(self) -> Optional[datetime]:
        return self._treatment_start_time

    @property
    def discharge_time(self) -> Optional[datetime]:
        return self._discharge_time

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    # --- queries ---------------------------------------------------------

    def is_critical(self, threshold: PatientPriority = PatientPriority.P2) -> bool:
        return self.priority <= threshold

    def is_assigned(self) -> bool:
        return self._assigned_doctor_id is not None

    def has_doctor_slot(self) -> bool:
        """True while the assigned doctor still counts this patient in its load."""
        return self.is_assigned() and not self._doctor_slot_released

    def waiting_time_minutes(self, now: Optional[datetime] = None) -> int:
        """Minutes from arrival until treatment started (or until now)."""
        end = self._treatment_start_time or now or get_current_timestamp()
        return minutes_between(self._arrival_time, end)

    def treatment_duration_minutes(self, now: Optional[datetime] = None) -> int:
        start = self._treatment_start_time or self._arrival_time
        end = self._discharge_time or now or get_current_timestamp()
        return minutes_between(start, end)

    # --- commands --------------------------------------------------------

    def assign_doctor(self, doctor_id: str, doctor_name: str) -> None:
        if self.is_assigned():
            raise PatientAlreadyAssignedError(self._id, self._assigned_doctor_id)
        if not doctor_id:
            raise PatientValidationError("Doctor ID is required", "doctor_id", doctor_id)
        now = get_current_timestamp()
        self._assigned_doctor_id = doctor_id
        self._assigned_doctor_name = doctor_name
        self._status = PatientStatus.IN_PROGRESS
        self._doctor_slot_released = False
        self._treatment_start_time = now
        self._updated_at = now

    def reassign_doctor(self, doctor_id: str, doctor_name: str) -> None:
        """Swap the doctor pointer. Status is left alone."""
        if not doctor_id:
            raise PatientValidationError("Doctor ID is required", "doctor_id", doctor_id)
        self._assigned_doctor_id = doctor_id
        self._assigned_doctor_name = doctor_name
        self._doctor_slot_released = False
        self._touch()

    def mark_doctor_slot_released(self) -> None:
        self._doctor_slot_released = True
        self._touch()

    def assign_nurse(self, nurse_id: str) -> None:
        if not nurse_id:
            raise PatientValidationError("Nurse ID is required", "nurse_id", nurse_id)
        self._assigned_nurse_id = nurse_id
        self._touch()

    def update_status(self, new_status: Union[str, PatientStatus]) -> PatientStatus:
        """Set the status and return the previous one.

        Any status may follow any other. Discharge time is stamped once.
        """
        status = to_status(new_status)
        previous = self._status
        self._status = status
        if status == PatientStatus.DISCHARGED:
            self._stamp_discharge()
        self._touch()
        return previous

    def set_manual_priority(self, priority: Union[int, PatientPriority]) -> None:
        self._manual_priority = to_priority(priority)
        self._touch()

    def clear_manual_priority(self) -> None:
        self._manual_priority = None
        self._touch()

    def recalculate_priority(self) -> PatientPriority:
        """Recompute the automatic priority from the current vitals."""
        self._priority = calculate_priority(self._vitals)
        self._touch()
        return self._priority

    def add_comment(self, comment: PatientComment) -> None:
        if comment.patient_id != self._id:
            raise CommentPatientMismatchError(comment.patient_id, self._id)
        self._comments.append(replace(comment))
        self._touch()

    def update_vitals(self, **changes: Any) -> VitalSigns:
        """Merge partial readings into the vitals; the result is revalidated."""
        self._vitals = self._vitals.merge(**changes)
        self._touch()
        return self._vitals

    def set_process(
        self, process: Union[str, PatientProcess], details: Optional[str] = None
    ) -> None:
        process = to_process(process)
        self._process = process
        self._process_details = details
        target = PROCESS_STATUS.get(process)
        if target is not None:
            self._status = target
            if target == PatientStatus.DISCHARGED:
                self._stamp_discharge()
        self._touch()

    def clear_process(self) -> None:
        self._process = PatientProcess.NONE
        self._process_details = None
        self._touch()

    def _stamp_discharge(self) -> None:
        if self._discharge_time is None:
            self._discharge_time = get_current_timestamp()

    def _touch(self) -> None:
        self._updated_at = get_current_timestamp()

    # --- serialization ---------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self._id,
            "name": self._name,
            "age": self._age,
            "gender": self._gender,
            "symptoms": list(self._symptoms),
            "vitals": self._vitals.to_dict(),
            "priority": int(self._priority),
            "manualPriority": int(self._manual_priority) if self._manual_priority is not None else None,
            "status": self._status.value,
            "process": self._process.value,
            "processDetails": self._process_details,
            "assignedDoctorId": self._assigned_doctor_id,
            "assignedDoctorName": self._assigned_doctor_name,
            "assignedNurseId": self._assigned_nurse_id,
            "doctorSlotReleased": self._doctor_slot_released,
            "comments": [comment.to_dict() for comment in self._comments],
            "arrivalTime": to_iso(self._arrival_time),
            "treatmentStartTime": to_iso(self._treatment_start_time),
            "dischargeTime": to_iso(self._discharge_time),
            "createdAt": to_iso(self._created_at),
            "updatedAt": to_iso(self._updated_at),
        }

    def __repr__(self) -> str:
        return (
            f"Patient(id={self._id!r}, name={self._name!r}, "
            f"priority={self.priority.name}, status={self._status.value})"
        )
