"""
Audit trail observer.

Every triage event becomes one append-only audit record. The observer
never raises: storage problems are logged and dropped.
"""

from typing import Optional

from ...core.structured_logger import StructuredLogger, get_logger
from ...core.utils.ids import generate_id
from ...domain.events.event_bus import TriageObserver
from ...domain.events.triage_events import (
    BaseTriageEvent,
    CaseAssignedEvent,
    CaseReassignedEvent,
    CriticalVitalsDetectedEvent,
    PatientDischargedEvent,
    PatientPriorityChangedEvent,
    PatientRegisteredEvent,
)
from ..ports.repositories.audit_repo import AuditLogRecord, AuditRepository

SYSTEM_USER = "SYSTEM"


def extract_actor(event: BaseTriageEvent) -> str:
    """The user responsible for an event, or SYSTEM when there is none."""
    actor: Optional[str] = None
    if isinstance(event, PatientRegisteredEvent):
        actor = event.registered_by
    elif isinstance(event, PatientPriorityChangedEvent):
        actor = event.changed_by
    elif isinstance(event, CaseAssignedEvent):
        actor = event.assigned_doctor_id
    elif isinstance(event, PatientDischargedEvent):
        actor = event.discharged_by
    elif isinstance(event, CaseReassignedEvent):
        actor = event.new_doctor_id
    elif isinstance(event, CriticalVitalsDetectedEvent):
        actor = event.assigned_doctor_id
    return actor or SYSTEM_USER


class AuditObserver(TriageObserver):
    """Persists an audit record for each event."""

    def __init__(
        self, audit_repository: AuditRepository, logger: Optional[StructuredLogger] = None
    ) -> None:
        self._audit_repository = audit_repository
        self._logger = logger or get_logger(__name__)

    async def update(self, event: BaseTriageEvent) -> None:
        try:
            record = AuditLogRecord(
                id=generate_id("audit"),
                user_id=extract_actor(event),
                action=event.event_type,
                patient_id=event.patient_id,
                details=event.to_json(),
                timestamp=event.occurred_at,
                metadata={"event_id": event.event_id},
            )
            result = await self._audit_repository.save(record)
            if result.is_failure:
                self._logger.error(
                    "Failed to save audit log",
                    event_type=event.event_type,
                    event_id=event.event_id,
                    error=str(result.error),
                )
                return
            self._logger.debug(
                "Audit log saved",
                audit_id=record.id,
                event_type=event.event_type,
                user_id=record.user_id,
            )
        except Exception as exc:
            self._logger.error(
                "Error in audit observer",
                event_type=getattr(event, "event_type", None),
                error=str(exc),
            )
