"""
Doctor alerting observer.

Maps triage events to messages on the high-priority queue:

* PATIENT_REGISTERED: always
* PATIENT_PRIORITY_CHANGED: only when the priority got more severe
* CRITICAL_VITALS_DETECTED: always
* CASE_REASSIGNED: always

Everything else is ignored. Publish failures are logged, never raised.
"""

import json
from typing import Any, Dict, List, Optional

from ...core.structured_logger import StructuredLogger, get_logger
from ...domain.enums.triage import PRIORITY_LABELS, PatientPriority
from ...domain.events.event_bus import TriageObserver
from ...domain.events.triage_events import (
    BaseTriageEvent,
    CaseReassignedEvent,
    CriticalVitalsDetectedEvent,
    PatientPriorityChangedEvent,
    PatientRegisteredEvent,
)
from ..ports.services.messaging_service import MessagingService

DEFAULT_QUEUE = "triage_high_priority"


def priority_label(priority: Any) -> str:
    try:
        return PRIORITY_LABELS[PatientPriority(priority)]
    except (ValueError, KeyError):
        return f"P{priority}"


def format_vitals(event: CriticalVitalsDetectedEvent) -> List[str]:
    vitals = []
    if event.heart_rate is not None:
        vitals.append(f"HR: {event.heart_rate:g} bpm")
    if event.oxygen_saturation is not None:
        vitals.append(f"SpO2: {event.oxygen_saturation:g}%")
    if event.temperature is not None:
        vitals.append(f"Temp: {event.temperature:g}°C")
    return vitals


class DoctorNotificationObserver(TriageObserver):
    def __init__(
        self,
        messaging_service: MessagingService,
        queue_name: str = DEFAULT_QUEUE,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self._messaging_service = messaging_service
        self._queue_name = queue_name
        self._logger = logger or get_logger(__name__)

    @property
    def queue_name(self) -> str:
        return self._queue_name

    async def update(self, event: BaseTriageEvent) -> None:
        try:
            if isinstance(event, PatientRegisteredEvent):
                await self._handle_patient_registered(event)
            elif isinstance(event, PatientPriorityChangedEvent):
                await self._handle_priority_changed(event)
            elif isinstance(event, CriticalVitalsDetectedEvent):
                await self._handle_critical_vitals(event)
            elif isinstance(event, CaseReassignedEvent):
                await self._handle_case_reassigned(event)
            else:
                self._logger.debug("Event ignored", event_type=event.event_type)
        except Exception as exc:
            self._logger.error(
                "Error in doctor notification observer",
                event_type=getattr(event, "event_type", None),
                error=str(exc),
            )

    async def _handle_patient_registered(self, event: PatientRegisteredEvent) -> None:
        message = {
            **self._envelope(event),
            "priority": int(event.priority),
            "priorityLabel": priority_label(event.priority),
            "symptoms": list(event.symptoms),
            "registeredBy": event.registered_by,
            "message": f"New patient {event.patient_name} - {priority_label(event.priority)}",
        }
        if await self._publish(message, "Failed to publish patient registered event", event):
            self._logger.info(
                "Doctors notified about new patient",
                patient_id=event.patient_id,
                priority=int(event.priority),
            )

    async def _handle_priority_changed(self, event: PatientPriorityChangedEvent) -> None:
        if not event.is_escalation:
            self._logger.debug(
                "Priority not escalated, no notification",
                patient_id=event.patient_id,
                old_priority=int(event.old_priority),
                new_priority=int(event.new_priority),
            )
            return
        self._logger.warning(
            "Priority increased",
            patient_id=event.patient_id,
            old_priority=int(event.old_priority),
            new_priority=int(event.new_priority),
        )
        message = {
            **self._envelope(event),
            "priority": int(event.new_priority),
            "priorityLabel": priority_label(event.new_priority),
            "oldPriority": int(event.old_priority),
            "newPriority": int(event.new_priority),
            "reason": event.reason,
            "changedBy": event.changed_by,
            "message": (
                f"Priority escalated for {event.patient_name}: "
                f"{priority_label(event.old_priority)} -> {priority_label(event.new_priority)}"
            ),
        }
        await self._publish(message, "Failed to publish priority changed event", event)

    async def _handle_critical_vitals(self, event: CriticalVitalsDetectedEvent) -> None:
        self._logger.error(
            "CRITICAL VITALS",
            patient_id=event.patient_id,
            heart_rate=event.heart_rate,
            oxygen_saturation=event.oxygen_saturation,
            temperature=event.temperature,
        )
        vitals = format_vitals(event)
        message = {
            **self._envelope(event),
            "priority": int(PatientPriority.P1),
            "priorityLabel": priority_label(PatientPriority.P1),
            "heartRate": event.heart_rate,
            "oxygenSaturation": event.oxygen_saturation,
            "temperature": event.temperature,
            "vitals": vitals,
            "assignedDoctorId": event.assigned_doctor_id,
            "message": f"Critical vitals for {event.patient_name}: {', '.join(vitals)}",
        }
        await self._publish(message, "Failed to publish critical vitals event", event)

    async def _handle_case_reassigned(self, event: CaseReassignedEvent) -> None:
        message = {
            **self._envelope(event),
            "previousDoctorId": event.previous_doctor_id,
            "newDoctorId": event.new_doctor_id,
            "newDoctorName": event.new_doctor_name,
            "reason": event.reason,
            "message": f"Patient {event.patient_name} reassigned to {event.new_doctor_name}",
        }
        await self._publish(message, "Failed to publish case reassigned event", event)

    @staticmethod
    def _envelope(event: BaseTriageEvent) -> Dict[str, Any]:
        return {
            "eventId": event.event_id,
            "eventType": event.event_type,
            "occurredAt": event.occurred_at.isoformat(),
            "patientId": event.patient_id,
            "patientName": event.patient_name,
        }

    async def _publish(
        self, message: Dict[str, Any], failure_message: str, event: BaseTriageEvent
    ) -> bool:
        result = await self._messaging_service.publish_to_queue(
            self._queue_name, json.dumps(message, ensure_ascii=False)
        )
        if result.is_failure:
            self._logger.error(
                failure_message,
                patient_id=event.patient_id,
                queue=self._queue_name,
                error=str(result.error),
            )
            return False
        return True
