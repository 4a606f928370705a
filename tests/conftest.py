"""
Shared fixtures for the triage test suite.
"""

import pytest

from clinictriage.adapters.db.memory.repositories import (
    InMemoryAuditRepository,
    InMemoryDoctorRepository,
    InMemoryPatientCommentRepository,
    InMemoryPatientRepository,
    InMemoryUserRepository,
    InMemoryVitalsRepository,
)
from clinictriage.adapters.queue import InMemoryMessagingService
from clinictriage.domain.entities.doctor import Doctor
from clinictriage.domain.entities.patient import Patient
from clinictriage.domain.enums.triage import MedicalSpecialty
from clinictriage.domain.events.event_bus import TriageEventBus
from clinictriage.domain.value_objects.vital_signs import VitalSigns

from .fakes import NORMAL_VITALS, FakeMessagingService, RecordingObserver


@pytest.fixture
def normal_vitals() -> VitalSigns:
    return VitalSigns.from_dict(NORMAL_VITALS)


@pytest.fixture
def make_patient(normal_vitals):
    def _make(**overrides) -> Patient:
        data = {
            "name": "Ana Torres",
            "age": 34,
            "gender": "female",
            "symptoms": ["headache"],
            "vitals": normal_vitals,
        }
        data.update(overrides)
        return Patient.create(**data)

    return _make


@pytest.fixture
def make_doctor():
    counter = {"n": 0}

    def _make(**overrides) -> Doctor:
        counter["n"] += 1
        data = {
            "email": f"doctor{counter['n']}@hospital.org",
            "name": f"Dr. House {counter['n']}",
            "specialty": MedicalSpecialty.EMERGENCY_MEDICINE,
            "license_number": f"LIC-{counter['n']:05d}",
        }
        data.update(overrides)
        return Doctor.create(**data)

    return _make


@pytest.fixture
def patient_repository():
    return InMemoryPatientRepository()


@pytest.fixture
def doctor_repository():
    return InMemoryDoctorRepository()


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def comment_repository():
    return InMemoryPatientCommentRepository()


@pytest.fixture
def audit_repository():
    return InMemoryAuditRepository()


@pytest.fixture
def vitals_repository():
    return InMemoryVitalsRepository()


@pytest.fixture
def messaging_service():
    return InMemoryMessagingService()


@pytest.fixture
def fake_messaging():
    return FakeMessagingService()


@pytest.fixture
def event_bus():
    return TriageEventBus()


@pytest.fixture
def recorder(event_bus):
    observer = RecordingObserver()
    event_bus.subscribe(observer)
    return observer
