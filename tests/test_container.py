"""
Tests for the dependency container and the fully wired triage flow.
"""

import pytest

from clinictriage.application.dto.triage_dto import (
    AssignDoctorRequest,
    RegisterPatientRequest,
    UpdatePatientStatusRequest,
)
from clinictriage.core.config import MessagingSettings, Settings, TriageSettings
from clinictriage.core.container import Container, ServiceNames, build_container
from clinictriage.core.exceptions import ConfigurationError

from .fakes import NORMAL_VITALS


@pytest.fixture
def settings():
    return Settings(
        triage=TriageSettings(high_priority_queue="er_alerts"),
        messaging=MessagingSettings(max_queue_size=50),
    )


@pytest.fixture
def container(settings):
    return build_container(settings)


def test_container_basics(settings):
    container = Container(settings)
    calls = []
    container.register_factory("thing", lambda: calls.append(1) or object())

    assert container.has("thing")
    assert container.get("thing") is container.get("thing")
    assert calls == [1]
    assert container.get_or_none("missing") is None
    with pytest.raises(ConfigurationError):
        container.get("missing")

    container.clear()
    assert not container.has("thing")


def test_every_use_case_resolves(container):
    for name in (
        ServiceNames.REGISTER_PATIENT,
        ServiceNames.ASSIGN_DOCTOR,
        ServiceNames.UPDATE_PATIENT_STATUS,
        ServiceNames.ADD_COMMENT,
        ServiceNames.GET_DOCTOR_PATIENTS,
        ServiceNames.CHANGE_PATIENT_PRIORITY,
        ServiceNames.RECORD_VITALS,
    ):
        assert container.get(name) is not None

    bus = container.get(ServiceNames.EVENT_BUS)
    assert bus.get_observer_count() == 2
    assert container.get(ServiceNames.DOCTOR_NOTIFICATION_OBSERVER).queue_name == "er_alerts"


@pytest.mark.asyncio
async def test_register_assign_discharge_flow(container, make_doctor):
    audit_repository = container.get(ServiceNames.AUDIT_REPOSITORY)
    messaging = container.get(ServiceNames.MESSAGING_SERVICE)
    doctor = await container.get(ServiceNames.DOCTOR_REPOSITORY).save(make_doctor())

    registered = await container.get(ServiceNames.REGISTER_PATIENT).execute(
        RegisterPatientRequest(
            first_name="Lucia",
            last_name="Ramos",
            age=71,
            gender="female",
            symptoms=["confusion"],
            vitals={**NORMAL_VITALS, "oxygenSaturation": 86},
            registered_by="nurse-7",
        )
    )
    patient_id = registered.value.patient_id

    assigned = await container.get(ServiceNames.ASSIGN_DOCTOR).execute(
        AssignDoctorRequest(patient_id, doctor.id)
    )
    discharged = await container.get(ServiceNames.UPDATE_PATIENT_STATUS).execute(
        UpdatePatientStatusRequest(patient_id, "discharged", doctor.id)
    )

    assert registered.is_success and assigned.success and discharged.success

    trail = (await audit_repository.find_by_patient_id(patient_id)).value
    assert sorted(r.action for r in trail) == [
        "CASE_ASSIGNED",
        "PATIENT_DISCHARGED",
        "PATIENT_REGISTERED",
    ]
    assert {r.user_id for r in trail} == {"nurse-7", doctor.id}

    alerts = messaging.peek_messages("er_alerts")
    assert [m["eventType"] for m in alerts] == ["PATIENT_REGISTERED"]
    assert alerts[0]["priorityLabel"] == "P1 - CRITICAL (Resuscitation)"

    stored_doctor = await container.get(ServiceNames.DOCTOR_REPOSITORY).find_by_id(doctor.id)
    assert stored_doctor.current_patient_load == 0
