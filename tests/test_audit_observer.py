"""
Tests for AuditObserver.
"""

import json
import logging

import pytest

from clinictriage.application.observers.audit_observer import AuditObserver, extract_actor
from clinictriage.application.ports.repositories.audit_repo import AuditRepository
from clinictriage.core.exceptions import RepositoryError
from clinictriage.core.result import Result
from clinictriage.domain.enums.triage import PatientPriority, PatientStatus
from clinictriage.domain.events.triage_events import (
    create_case_assigned_event,
    create_case_reassigned_event,
    create_critical_vitals_event,
    create_patient_discharged_event,
    create_patient_registered_event,
    create_priority_changed_event,
)


class BrokenAuditRepository(AuditRepository):
    def __init__(self, raise_error: bool = False):
        self.raise_error = raise_error

    async def save(self, record):
        if self.raise_error:
            raise RuntimeError("disk on fire")
        return Result.fail(RepositoryError("write refused"))

    async def find_by_user_id(self, user_id):
        return Result.ok([])

    async def find_by_patient_id(self, patient_id):
        return Result.ok([])

    async def find_by_action(self, action):
        return Result.ok([])

    async def search(self, criteria):
        return Result.ok([])


@pytest.mark.parametrize(
    "event,actor",
    [
        (create_patient_registered_event("p", "Juan", PatientPriority.P3, ["x"], "nurse-1"), "nurse-1"),
        (create_priority_changed_event("p", "Juan", PatientPriority.P3, PatientPriority.P1, "r", "doc-1"), "doc-1"),
        (create_case_assigned_event("p", "Juan", "doc-2", "Dr. Two", PatientStatus.WAITING), "doc-2"),
        (create_patient_discharged_event("p", "Juan", "doc-3", 30), "doc-3"),
        (create_case_reassigned_event("p", "Juan", "doc-a", "doc-b", "Dr. B"), "doc-b"),
        (create_critical_vitals_event("p", "Juan", heart_rate=150, assigned_doctor_id="doc-4"), "doc-4"),
        (create_critical_vitals_event("p", "Juan", heart_rate=150), "SYSTEM"),
    ],
)
def test_actor_extraction(event, actor):
    assert extract_actor(event) == actor


@pytest.mark.asyncio
async def test_update_persists_audit_record(audit_repository):
    observer = AuditObserver(audit_repository)
    event = create_patient_registered_event("patient-1", "Juan", PatientPriority.P2, ["pain"], "nurse-1")

    await observer.update(event)

    records = audit_repository.records
    assert len(records) == 1
    record = records[0]
    assert record.id.startswith("audit-")
    assert record.user_id == "nurse-1"
    assert record.action == "PATIENT_REGISTERED"
    assert record.patient_id == "patient-1"
    assert record.timestamp == event.occurred_at
    assert json.loads(record.details)["eventId"] == event.event_id


@pytest.mark.asyncio
async def test_failed_save_is_logged_not_raised(caplog):
    observer = AuditObserver(BrokenAuditRepository())
    event = create_patient_discharged_event("p", "Juan", "doc-1", 10)
    with caplog.at_level(logging.ERROR):
        await observer.update(event)
    assert "Failed to save audit log" in caplog.text


@pytest.mark.asyncio
async def test_repository_exception_is_swallowed(caplog):
    observer = AuditObserver(BrokenAuditRepository(raise_error=True))
    event = create_patient_discharged_event("p", "Juan", "doc-1", 10)
    with caplog.at_level(logging.ERROR):
        await observer.update(event)
    assert "Error in audit observer" in caplog.text
