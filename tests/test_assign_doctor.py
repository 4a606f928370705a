"""
Tests for AssignDoctorToPatientUseCase.
"""

import asyncio
import gc

import pytest

from clinictriage.application.dto.triage_dto import AssignDoctorRequest, UpdatePatientStatusRequest
from clinictriage.application.use_cases.assign_doctor import AssignDoctorToPatientUseCase, KeyedLocks
from clinictriage.application.use_cases.update_patient_status import UpdatePatientStatusUseCase
from clinictriage.domain.enums.triage import PatientStatus
from clinictriage.domain.events.triage_events import CaseAssignedEvent, CaseReassignedEvent

from .fakes import FlakyDoctorRepository, FlakyPatientRepository, YieldingDoctorRepository


@pytest.fixture
def use_case(patient_repository, doctor_repository, event_bus):
    return AssignDoctorToPatientUseCase(patient_repository, doctor_repository, event_bus)


@pytest.fixture
def store(patient_repository, doctor_repository):
    class Store:
        async def patient(self, patient):
            return await patient_repository.save_entity(patient)

        async def doctor(self, doctor):
            return await doctor_repository.save(doctor)

    return Store()


@pytest.mark.asyncio
async def test_first_assignment(use_case, store, make_patient, make_doctor, recorder, doctor_repository):
    patient = await store.patient(make_patient())
    doctor = await store.doctor(make_doctor())

    response = await use_case.execute(AssignDoctorRequest(patient.id, doctor.id))

    assert response.success
    assert response.is_reassignment is False
    assert response.patient.assigned_doctor_id == doctor.id
    assert response.patient.status == PatientStatus.IN_PROGRESS
    assert response.patient.treatment_start_time is not None
    assert (await doctor_repository.find_by_id(doctor.id)).current_patient_load == 1

    assert len(recorder.events) == 1
    event = recorder.events[0]
    assert isinstance(event, CaseAssignedEvent)
    assert event.assigned_doctor_id == doctor.id
    assert event.previous_status == PatientStatus.WAITING


@pytest.mark.asyncio
async def test_same_doctor_twice_fails(use_case, store, make_patient, make_doctor, doctor_repository):
    patient = await store.patient(make_patient())
    doctor = await store.doctor(make_doctor())
    await use_case.execute(AssignDoctorRequest(patient.id, doctor.id))

    response = await use_case.execute(AssignDoctorRequest(patient.id, doctor.id))

    assert response.success is False
    assert response.error == "Patient is already assigned to this doctor"
    assert response.error_code == "PATIENT_ALREADY_ASSIGNED"
    assert (await doctor_repository.find_by_id(doctor.id)).current_patient_load == 1


@pytest.mark.asyncio
async def test_doctor_at_capacity(use_case, store, make_patient, make_doctor, patient_repository, recorder):
    patient_a = await store.patient(make_patient(name="Patient A"))
    patient_b = await store.patient(make_patient(name="Patient B"))
    doctor = await store.doctor(make_doctor(max_patient_load=1))

    first = await use_case.execute(AssignDoctorRequest(patient_a.id, doctor.id))
    second = await use_case.execute(AssignDoctorRequest(patient_b.id, doctor.id))

    assert first.success
    assert second.success is False
    assert second.error == "Doctor has reached maximum patient load (1)"
    assert second.error_code == "DOCTOR_AT_CAPACITY"
    stored_b = await patient_repository.find_entity_by_id(patient_b.id)
    assert stored_b.assigned_doctor_id is None
    assert stored_b.status == PatientStatus.WAITING
    assert len(recorder.events) == 1


@pytest.mark.asyncio
async def test_unavailable_doctor(use_case, store, make_patient, make_doctor):
    patient = await store.patient(make_patient())
    doctor = await store.doctor(make_doctor(is_available=False))

    response = await use_case.execute(AssignDoctorRequest(patient.id, doctor.id))

    assert response.success is False
    assert response.error_code == "DOCTOR_UNAVAILABLE"


@pytest.mark.asyncio
async def test_reassignment_moves_the_slot(
    use_case, store, make_patient, make_doctor, doctor_repository, recorder
):
    patient = await store.patient(make_patient())
    first = await store.doctor(make_doctor())
    second = await store.doctor(make_doctor())
    await use_case.execute(AssignDoctorRequest(patient.id, first.id))

    response = await use_case.execute(AssignDoctorRequest(patient.id, second.id, reason="Shift change"))

    assert response.success
    assert response.is_reassignment is True
    assert response.patient.assigned_doctor_id == second.id
    assert response.patient.assigned_doctor_name == second.name
    assert response.patient.status == PatientStatus.IN_PROGRESS
    assert (await doctor_repository.find_by_id(first.id)).current_patient_load == 0
    assert (await doctor_repository.find_by_id(second.id)).current_patient_load == 1

    event = recorder.events[-1]
    assert isinstance(event, CaseReassignedEvent)
    assert event.previous_doctor_id == first.id
    assert event.new_doctor_id == second.id
    assert event.reason == "Shift change"


@pytest.mark.asyncio
async def test_failed_reassignment_keeps_previous_doctor(
    use_case, store, make_patient, make_doctor, patient_repository, doctor_repository
):
    patient = await store.patient(make_patient())
    other = await store.patient(make_patient(name="Other Patient"))
    first = await store.doctor(make_doctor())
    full = await store.doctor(make_doctor(max_patient_load=1))
    await use_case.execute(AssignDoctorRequest(patient.id, first.id))
    await use_case.execute(AssignDoctorRequest(other.id, full.id))

    response = await use_case.execute(AssignDoctorRequest(patient.id, full.id))

    assert response.success is False
    assert response.error_code == "DOCTOR_AT_CAPACITY"
    stored = await patient_repository.find_entity_by_id(patient.id)
    assert stored.assigned_doctor_id == first.id
    assert (await doctor_repository.find_by_id(first.id)).current_patient_load == 1


@pytest.mark.asyncio
async def test_doctor_resolved_by_user_id(use_case, store, make_patient, make_doctor):
    patient = await store.patient(make_patient())
    doctor = await store.doctor(make_doctor())

    response = await use_case.execute(AssignDoctorRequest(patient.id, doctor.user_id))

    assert response.success
    assert response.patient.assigned_doctor_id == doctor.id


@pytest.mark.asyncio
async def test_missing_patient_or_doctor(use_case, store, make_patient, make_doctor, recorder):
    patient = await store.patient(make_patient())
    doctor = await store.doctor(make_doctor())

    missing_patient = await use_case.execute(AssignDoctorRequest("patient-nope", doctor.id))
    missing_doctor = await use_case.execute(AssignDoctorRequest(patient.id, "doctor-nope"))

    assert missing_patient.error_code == "PATIENT_NOT_FOUND"
    assert missing_doctor.error_code == "DOCTOR_NOT_FOUND"
    assert recorder.events == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["discharged", "transferred"])
async def test_patient_out_of_care_cannot_be_reassigned(
    use_case, store, make_patient, make_doctor, patient_repository, doctor_repository, recorder, status
):
    patient = await store.patient(make_patient())
    first = await store.doctor(make_doctor())
    second = await store.doctor(make_doctor())
    await use_case.execute(AssignDoctorRequest(patient.id, first.id))
    await UpdatePatientStatusUseCase(patient_repository, doctor_repository).execute(
        UpdatePatientStatusRequest(patient.id, status)
    )

    response = await use_case.execute(AssignDoctorRequest(patient.id, second.id))

    assert response.success is False
    assert response.error_code == "PATIENT_NOT_ACTIVE"
    assert (await doctor_repository.find_by_id(first.id)).current_patient_load == 0
    assert (await doctor_repository.find_by_id(second.id)).current_patient_load == 0
    assert (await patient_repository.find_entity_by_id(patient.id)).assigned_doctor_id == first.id
    assert not any(isinstance(e, CaseReassignedEvent) for e in recorder.events)


@pytest.mark.asyncio
async def test_reassignment_after_returning_to_care_leaves_released_doctor_alone(
    use_case, store, make_patient, make_doctor, patient_repository, doctor_repository
):
    patient = await store.patient(make_patient())
    waiting = await store.patient(make_patient(name="Luis Vega"))
    first = await store.doctor(make_doctor())
    second = await store.doctor(make_doctor())
    await use_case.execute(AssignDoctorRequest(patient.id, first.id))
    await use_case.execute(AssignDoctorRequest(waiting.id, first.id))
    statuses = UpdatePatientStatusUseCase(patient_repository, doctor_repository)
    await statuses.execute(UpdatePatientStatusRequest(patient.id, "discharged"))
    await statuses.execute(UpdatePatientStatusRequest(patient.id, "under_treatment"))

    response = await use_case.execute(AssignDoctorRequest(patient.id, second.id))

    assert response.success
    assert response.patient.has_doctor_slot()
    assert (await doctor_repository.find_by_id(first.id)).current_patient_load == 1
    assert (await doctor_repository.find_by_id(second.id)).current_patient_load == 1


@pytest.mark.asyncio
async def test_new_doctor_save_failure_leaves_previous_assignment_intact(
    make_patient, make_doctor, patient_repository, recorder, event_bus
):
    doctors = FlakyDoctorRepository()
    use_case = AssignDoctorToPatientUseCase(patient_repository, doctors, event_bus)
    patient = await patient_repository.save_entity(make_patient())
    first = await doctors.save(make_doctor())
    second = await doctors.save(make_doctor())
    assert (await use_case.execute(AssignDoctorRequest(patient.id, first.id))).success
    doctors.failing_ids.add(second.id)

    response = await use_case.execute(AssignDoctorRequest(patient.id, second.id))

    assert response.success is False
    assert response.error_code == "REPOSITORY_ERROR"
    assert (await doctors.find_by_id(first.id)).current_patient_load == 1
    assert (await doctors.find_by_id(second.id)).current_patient_load == 0
    stored = await patient_repository.find_entity_by_id(patient.id)
    assert stored.assigned_doctor_id == first.id
    assert not any(isinstance(e, CaseReassignedEvent) for e in recorder.events)


@pytest.mark.asyncio
async def test_patient_save_failure_returns_the_new_slot(make_patient, make_doctor, doctor_repository):
    patients = FlakyPatientRepository()
    use_case = AssignDoctorToPatientUseCase(patients, doctor_repository)
    patient = await patients.save_entity(make_patient())
    first = await doctor_repository.save(make_doctor())
    second = await doctor_repository.save(make_doctor())
    await use_case.execute(AssignDoctorRequest(patient.id, first.id))
    patients.error = RuntimeError("write timed out")

    response = await use_case.execute(AssignDoctorRequest(patient.id, second.id))

    assert response.success is False
    assert response.error_code == "INTERNAL_ERROR"
    assert response.error == "write timed out"
    assert (await doctor_repository.find_by_id(first.id)).current_patient_load == 1
    assert (await doctor_repository.find_by_id(second.id)).current_patient_load == 0
    assert (await patients.find_entity_by_id(patient.id)).assigned_doctor_id == first.id


@pytest.mark.asyncio
async def test_previous_doctor_save_failure_still_moves_the_patient(
    make_patient, make_doctor, patient_repository
):
    doctors = FlakyDoctorRepository()
    use_case = AssignDoctorToPatientUseCase(patient_repository, doctors)
    patient = await patient_repository.save_entity(make_patient())
    first = await doctors.save(make_doctor())
    second = await doctors.save(make_doctor())
    await use_case.execute(AssignDoctorRequest(patient.id, first.id))
    doctors.failing_ids.add(first.id)

    response = await use_case.execute(AssignDoctorRequest(patient.id, second.id))

    assert response.success
    assert response.patient.assigned_doctor_id == second.id
    # The stale count on the previous doctor errs towards fewer free slots.
    assert (await doctors.find_by_id(first.id)).current_patient_load == 1
    assert (await doctors.find_by_id(second.id)).current_patient_load == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("serialize", [False, True])
async def test_concurrent_requests_and_doctor_capacity(make_patient, make_doctor, patient_repository, serialize):
    doctors = YieldingDoctorRepository()
    use_case = AssignDoctorToPatientUseCase(
        patient_repository, doctors, serialize_assignments=serialize
    )
    doctor = await doctors.save(make_doctor(max_patient_load=1))
    patients = [await patient_repository.save_entity(make_patient(name=f"Patient {i}")) for i in range(5)]

    responses = await asyncio.gather(
        *(use_case.execute(AssignDoctorRequest(p.id, doctor.id)) for p in patients)
    )

    successes = sum(1 for r in responses if r.success)
    assigned = await patient_repository.find_by_doctor_id(doctor.id)
    if serialize:
        assert successes == 1
        assert len(assigned) == 1
        assert (await doctors.find_by_id(doctor.id)).current_patient_load == 1
        assert {r.error_code for r in responses if not r.success} == {"DOCTOR_AT_CAPACITY"}
    else:
        # Without the lock every request reads the doctor before any write lands.
        assert successes > doctor.max_patient_load
        assert len(assigned) > doctor.max_patient_load


@pytest.mark.asyncio
async def test_locks_are_dropped_once_released(make_patient, make_doctor, patient_repository, doctor_repository):
    use_case = AssignDoctorToPatientUseCase(patient_repository, doctor_repository)
    doctor = await doctor_repository.save(make_doctor())
    for i in range(3):
        patient = await patient_repository.save_entity(make_patient(name=f"Patient {i}"))
        assert (await use_case.execute(AssignDoctorRequest(patient.id, doctor.id))).success

    gc.collect()
    assert len(use_case._locks) == 0


@pytest.mark.asyncio
async def test_keyed_locks_share_a_lock_while_it_is_referenced():
    locks = KeyedLocks()
    held = locks.get("doctor:1")
    assert locks.get("doctor:1") is held
    assert len(locks) == 1
    del held
    gc.collect()
    assert len(locks) == 0
