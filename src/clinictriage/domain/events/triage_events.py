"""
Triage domain events.

Events are immutable pydantic models. On the wire (``to_payload`` /
``to_json``) field names are camelCase and ``eventType`` discriminates the
variant, so consumers outside the process can rely on a stable shape.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from ...core.utils.datetime_utils import get_current_timestamp
from ...core.utils.ids import generate_id
from ..enums.triage import PatientPriority, PatientStatus


class TriageEventType:
    PATIENT_REGISTERED = "PATIENT_REGISTERED"
    PATIENT_PRIORITY_CHANGED = "PATIENT_PRIORITY_CHANGED"
    CASE_ASSIGNED = "CASE_ASSIGNED"
    PATIENT_DISCHARGED = "PATIENT_DISCHARGED"
    CASE_REASSIGNED = "CASE_REASSIGNED"
    CRITICAL_VITALS_DETECTED = "CRITICAL_VITALS_DETECTED"


class BaseTriageEvent(BaseModel):
    """Fields shared by every triage event."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    event_id: str = Field(default_factory=lambda: generate_id("evt"))
    occurred_at: datetime = Field(default_factory=get_current_timestamp)
    patient_id: str
    patient_name: str

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class PatientRegisteredEvent(BaseTriageEvent):
    event_type: Literal["PATIENT_REGISTERED"] = TriageEventType.PATIENT_REGISTERED
    priority: PatientPriority
    symptoms: Tuple[str, ...]
    registered_by: str


class PatientPriorityChangedEvent(BaseTriageEvent):
    event_type: Literal["PATIENT_PRIORITY_CHANGED"] = TriageEventType.PATIENT_PRIORITY_CHANGED
    old_priority: PatientPriority
    new_priority: PatientPriority
    reason: str
    changed_by: str

    @property
    def is_escalation(self) -> bool:
        return self.new_priority.is_more_severe_than(self.old_priority)


class CaseAssignedEvent(BaseTriageEvent):
    event_type: Literal["CASE_ASSIGNED"] = TriageEventType.CASE_ASSIGNED
    assigned_doctor_id: str
    assigned_doctor_name: str
    previous_status: PatientStatus


class PatientDischargedEvent(BaseTriageEvent):
    event_type: Literal["PATIENT_DISCHARGED"] = TriageEventType.PATIENT_DISCHARGED
    discharged_by: str
    treatment_duration: int = Field(description="Minutes from treatment start to discharge")
    final_status: PatientStatus


class CaseReassignedEvent(BaseTriageEvent):
    event_type: Literal["CASE_REASSIGNED"] = TriageEventType.CASE_REASSIGNED
    previous_doctor_id: str
    new_doctor_id: str
    new_doctor_name: str
    reason: str


class CriticalVitalsDetectedEvent(BaseTriageEvent):
    event_type: Literal["CRITICAL_VITALS_DETECTED"] = TriageEventType.CRITICAL_VITALS_DETECTED
    heart_rate: Optional[float] = None
    oxygen_saturation: Optional[float] = None
    temperature: Optional[float] = None
    assigned_doctor_id: Optional[str] = None


TriageEvent = Annotated[
    Union[
        PatientRegisteredEvent,
        PatientPriorityChangedEvent,
        CaseAssignedEvent,
        PatientDischargedEvent,
        CaseReassignedEvent,
        CriticalVitalsDetectedEvent,
    ],
    Field(discriminator="event_type"),
]

_event_adapter: TypeAdapter = TypeAdapter(TriageEvent)


def parse_triage_event(payload: Union[str, bytes, Dict[str, Any]]) -> BaseTriageEvent:
    """Rebuild an event from its payload, dispatching on ``eventType``."""
    if isinstance(payload, (str, bytes)):
        return _event_adapter.validate_json(payload)
    return _event_adapter.validate_python(payload)


# --- factories -------------------------------------------------------------


def create_patient_registered_event(
    patient_id: str,
    patient_name: str,
    priority: PatientPriority,
    symptoms: Sequence[str],
    registered_by: str,
) -> PatientRegisteredEvent:
    return PatientRegisteredEvent(
        patient_id=patient_id,
        patient_name=patient_name,
        priority=priority,
        symptoms=tuple(symptoms),
        registered_by=registered_by,
    )


def create_priority_changed_event(
    patient_id: str,
    patient_name: str,
    old_priority: PatientPriority,
    new_priority: PatientPriority,
    reason: str,
    changed_by: str,
) -> PatientPriorityChangedEvent:
    return PatientPriorityChangedEvent(
        patient_id=patient_id,
        patient_name=patient_name,
        old_priority=old_priority,
        new_priority=new_priority,
        reason=reason,
        changed_by=changed_by,
    )


def create_case_assigned_event(
    patient_id: str,
    patient_name: str,
    assigned_doctor_id: str,
    assigned_doctor_name: str,
    previous_status: PatientStatus,
) -> CaseAssignedEvent:
    return CaseAssignedEvent(
        patient_id=patient_id,
        patient_name=patient_name,
        assigned_doctor_id=assigned_doctor_id,
        assigned_doctor_name=assigned_doctor_name,
        previous_status=previous_status,
    )


def create_patient_discharged_event(
    patient_id: str,
    patient_name: str,
    discharged_by: str,
    treatment_duration: int,
    final_status: PatientStatus = PatientStatus.DISCHARGED,
) -> PatientDischargedEvent:
    return PatientDischargedEvent(
        patient_id=patient_id,
        patient_name=patient_name,
        discharged_by=discharged_by,
        treatment_duration=treatment_duration,
        final_status=final_status,
    )


def create_case_reassigned_event(
    patient_id: str,
    patient_name: str,
    previous_doctor_id: str,
    new_doctor_id: str,
    new_doctor_name: str,
    reason: str = "Reassigned",
) -> CaseReassignedEvent:
    return CaseReassignedEvent(
        patient_id=patient_id,
        patient_name=patient_name,
        previous_doctor_id=previous_doctor_id,
        new_doctor_id=new_doctor_id,
        new_doctor_name=new_doctor_name,
        reason=reason,
    )


def create_critical_vitals_event(
    patient_id: str,
    patient_name: str,
    heart_rate: Optional[float] = None,
    oxygen_saturation: Optional[float] = None,
    temperature: Optional[float] = None,
    assigned_doctor_id: Optional[str] = None,
) -> CriticalVitalsDetectedEvent:
    return CriticalVitalsDetectedEvent(
        patient_id=patient_id,
        patient_name=patient_name,
        heart_rate=heart_rate,
        oxygen_saturation=oxygen_saturation,
        temperature=temperature,
        assigned_doctor_id=assigned_doctor_id,
    )
