from .event_bus import TriageEventBus, TriageObserver
from .triage_events import (
    BaseTriageEvent,
    CaseAssignedEvent,
    CaseReassignedEvent,
    CriticalVitalsDetectedEvent,
    PatientDischargedEvent,
    PatientPriorityChangedEvent,
    PatientRegisteredEvent,
    TriageEvent,
    TriageEventType,
    create_case_assigned_event,
    create_case_reassigned_event,
    create_critical_vitals_event,
    create_patient_discharged_event,
    create_patient_registered_event,
    create_priority_changed_event,
    parse_triage_event,
)

__all__ = [
    "BaseTriageEvent",
    "CaseAssignedEvent",
    "CaseReassignedEvent",
    "CriticalVitalsDetectedEvent",
    "PatientDischargedEvent",
    "PatientPriorityChangedEvent",
    "PatientRegisteredEvent",
    "TriageEvent",
    "TriageEventBus",
    "TriageEventType",
    "TriageObserver",
    "create_case_assigned_event",
    "create_case_reassigned_event",
    "create_critical_vitals_event",
    "create_patient_discharged_event",
    "create_patient_registered_event",
    "create_priority_changed_event",
    "parse_triage_event",
]
