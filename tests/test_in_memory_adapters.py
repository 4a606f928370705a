"""
Tests for the in-memory repositories and messaging service.
"""

from datetime import datetime, timedelta, timezone

import pytest

from clinictriage.application.ports.repositories.audit_repo import AuditLogRecord, AuditSearchCriteria
from clinictriage.application.ports.repositories.vitals_repo import VitalsRecord
from clinictriage.adapters.queue import InMemoryMessagingService
from clinictriage.core.exceptions import MessagingServiceUnavailableError, NotificationSendError
from clinictriage.domain.enums.triage import MedicalSpecialty

BASE = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def audit(record_id, user_id, action, minutes, patient_id="patient-1"):
    return AuditLogRecord(
        id=record_id,
        user_id=user_id,
        action=action,
        patient_id=patient_id,
        details="{}",
        timestamp=BASE + timedelta(minutes=minutes),
    )


def vitals(patient_id, minutes, heart_rate=80):
    return VitalsRecord(
        id=f"vitals-{minutes}",
        patient_id=patient_id,
        heart_rate=heart_rate,
        temperature=36.8,
        oxygen_saturation=98,
        respiratory_rate=16,
        blood_pressure="120/80",
        is_abnormal=False,
        is_critical=False,
        recorded_at=BASE + timedelta(minutes=minutes),
    )


class TestAuditRepository:
    @pytest.fixture
    async def filled(self, audit_repository):
        for record in [
            audit("a1", "nurse-1", "PATIENT_REGISTERED", 0),
            audit("a2", "doctor-1", "CASE_ASSIGNED", 10),
            audit("a3", "doctor-1", "PATIENT_DISCHARGED", 20),
            audit("a4", "nurse-1", "PATIENT_REGISTERED", 30, patient_id="patient-2"),
        ]:
            await audit_repository.save(record)
        return audit_repository

    @pytest.mark.asyncio
    async def test_search_is_newest_first_and_paginated(self, filled):
        everything = (await filled.search(AuditSearchCriteria())).value
        assert [r.id for r in everything] == ["a4", "a3", "a2", "a1"]

        page = (await filled.search(AuditSearchCriteria(limit=2, offset=1))).value
        assert [r.id for r in page] == ["a3", "a2"]

    @pytest.mark.asyncio
    async def test_search_combines_filters(self, filled):
        criteria = AuditSearchCriteria(
            user_id="doctor-1", start_date=BASE + timedelta(minutes=15), end_date=BASE + timedelta(hours=1)
        )
        assert [r.id for r in (await filled.search(criteria)).value] == ["a3"]
        assert len((await filled.find_by_patient_id("patient-1")).value) == 3
        assert len((await filled.find_by_action("PATIENT_REGISTERED")).value) == 2
        assert len((await filled.find_by_user_id("nurse-1")).value) == 2

    @pytest.mark.asyncio
    async def test_invalid_pagination_and_duplicate_ids(self, filled):
        assert (await filled.search(AuditSearchCriteria(limit=0))).is_failure
        assert (await filled.save(audit("a1", "x", "Y", 0))).is_failure


class TestVitalsRepository:
    @pytest.mark.asyncio
    async def test_history_queries(self, vitals_repository):
        for minutes in (30, 0, 60):
            await vitals_repository.save(vitals("patient-1", minutes, heart_rate=70 + minutes))
        await vitals_repository.save(vitals("patient-2", 5))

        history = (await vitals_repository.find_by_patient_id("patient-1")).value
        assert [r.heart_rate for r in history] == [70, 100, 130]
        assert (await vitals_repository.find_latest("patient-1")).value.heart_rate == 130
        assert (await vitals_repository.find_latest("patient-3")).value is None

        window = await vitals_repository.find_by_date_range(
            "patient-1", BASE + timedelta(minutes=10), BASE + timedelta(minutes=60)
        )
        assert [r.heart_rate for r in window.value] == [100, 130]


class TestDoctorRepository:
    @pytest.mark.asyncio
    async def test_filters_and_available_ordering(self, doctor_repository, make_doctor):
        busy = make_doctor()
        busy.assign_patient()
        idle = make_doctor(specialty=MedicalSpecialty.CARDIOLOGY)
        away = make_doctor(is_available=False)
        for doctor in (busy, idle, away):
            await doctor_repository.save(doctor)

        assert [d.id for d in await doctor_repository.find_available()] == [idle.id, busy.id]
        cardiology = await doctor_repository.find_all(specialty=MedicalSpecialty.CARDIOLOGY)
        assert [d.id for d in cardiology] == [idle.id]
        assert [d.id for d in await doctor_repository.find_all(is_available=False)] == [away.id]
        assert (await doctor_repository.find_by_user_id(busy.user_id)).current_patient_load == 1


class TestPatientRepository:
    @pytest.mark.asyncio
    async def test_reads_return_independent_copies(self, patient_repository, make_patient):
        patient = await patient_repository.save_entity(make_patient())
        loaded = await patient_repository.find_entity_by_id(patient.id)
        loaded.update_status("stabilized")
        assert (await patient_repository.find_entity_by_id(patient.id)).status.value == "waiting"


class TestInMemoryMessagingService:
    @pytest.mark.asyncio
    async def test_publish_and_consume_in_order(self):
        service = InMemoryMessagingService()
        await service.publish_to_queue("alerts", '{"n": 1}')
        await service.publish_to_queue("alerts", '{"n": 2}')

        assert service.get_queue_length("alerts") == 2
        assert service.peek_messages("alerts") == [{"n": 1}, {"n": 2}]
        assert await service.consume("alerts") == {"n": 1}
        assert service.get_queue_length("alerts") == 1
        assert await service.consume("empty") is None

    @pytest.mark.asyncio
    async def test_disconnected_service_fails(self):
        service = InMemoryMessagingService()
        await service.disconnect()

        result = await service.publish_to_queue("alerts", "{}")

        assert service.is_connected() is False
        assert isinstance(result.error, MessagingServiceUnavailableError)
        await service.connect()
        assert (await service.publish_to_queue("alerts", "{}")).is_success

    @pytest.mark.asyncio
    async def test_full_queue_and_missing_name(self):
        service = InMemoryMessagingService(max_queue_size=1)
        assert (await service.publish_to_queue("alerts", "{}")).is_success

        full = await service.publish_to_queue("alerts", "{}")
        unnamed = await service.publish_to_queue("", "{}")

        assert isinstance(full.error, NotificationSendError)
        assert isinstance(unnamed.error, NotificationSendError)
        assert service.get_queue_length("alerts") == 1
