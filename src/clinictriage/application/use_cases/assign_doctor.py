"""
Assign Doctor use case.

Handles both the first assignment of a patient and moving a patient to a
different doctor. Capacity checks and writes for the doctors involved run
under per-key locks so two requests cannot both take a doctor's last slot.
"""

import asyncio
import weakref
from contextlib import AsyncExitStack
from typing import Iterable, Optional

from ...core.structured_logger import StructuredLogger, get_logger
from ...domain.entities.doctor import Doctor
from ...domain.entities.patient import Patient
from ...domain.enums.triage import PatientStatus
from ...domain.errors import (
    DoctorNotFoundError,
    DomainError,
    NoPatientsToReleaseError,
    PatientAlreadyAssignedError,
    PatientNotActiveError,
    PatientNotFoundError,
)
from ...domain.events.event_bus import TriageEventBus
from ...domain.events.triage_events import (
    create_case_assigned_event,
    create_case_reassigned_event,
)
from ..dto.triage_dto import AssignDoctorRequest, AssignDoctorResponse
from ..ports.repositories.doctor_repo import DoctorRepository
from ..ports.repositories.patient_repo import PatientRepository
from .doctor_lookup import resolve_doctor


class KeyedLocks:
    """Lazily created asyncio locks, one per key.

    Entries are weak: a lock disappears once no request holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        return len(self._locks)

    def get(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def acquire_all(self, stack: AsyncExitStack, keys: Iterable[str]) -> None:
        # Sorted order so overlapping key sets cannot deadlock.
        for key in sorted(set(keys)):
            await stack.enter_async_context(self.get(key))


class AssignDoctorToPatientUseCase:
    """Use case for assigning or reassigning a doctor to a patient."""

    def __init__(
        self,
        patient_repository: PatientRepository,
        doctor_repository: DoctorRepository,
        event_bus: Optional[TriageEventBus] = None,
        logger: Optional[StructuredLogger] = None,
        serialize_assignments: bool = True,
    ):
        self._patient_repository = patient_repository
        self._doctor_repository = doctor_repository
        self._event_bus = event_bus
        self._logger = logger or get_logger(__name__)
        self._serialize = serialize_assignments
        self._locks = KeyedLocks()

    async def execute(self, request: AssignDoctorRequest) -> AssignDoctorResponse:
        try:
            patient = await self._load_patient(request.patient_id)
            doctor = await self._load_doctor(request.doctor_id)

            async with AsyncExitStack() as stack:
                if self._serialize:
                    keys = [f"patient:{patient.id}", f"doctor:{doctor.id}"]
                    if patient.assigned_doctor_id:
                        keys.append(f"doctor:{patient.assigned_doctor_id}")
                    await self._locks.acquire_all(stack, keys)
                    # Re-read under the locks; the first reads may be stale.
                    patient = await self._load_patient(request.patient_id)
                    doctor = await self._load_doctor(request.doctor_id)
                return await self._assign(patient, doctor, request.reason)
        except DomainError as exc:
            self._logger.warning(
                "Doctor assignment failed",
                patient_id=request.patient_id,
                doctor_id=request.doctor_id,
                error=exc.message,
                error_code=exc.error_code,
            )
            return AssignDoctorResponse.failure(exc)
        except Exception as exc:
            self._logger.exception(
                "Unexpected error assigning doctor",
                patient_id=request.patient_id,
                doctor_id=request.doctor_id,
            )
            return AssignDoctorResponse.failure(exc)

    async def _assign(
        self, patient: Patient, doctor: Doctor, reason: Optional[str]
    ) -> AssignDoctorResponse:
        previous_status = patient.status
        previous_doctor_id = patient.assigned_doctor_id
        is_reassignment = patient.is_assigned() and previous_doctor_id != doctor.id

        if patient.is_assigned() and not is_reassignment:
            raise PatientAlreadyAssignedError(patient.id, doctor.id, same_doctor=True)
        if is_reassignment and patient.status.is_terminal:
            raise PatientNotActiveError(patient.id, patient.status.value)

        previous_doctor: Optional[Doctor] = None
        if not is_reassignment:
            doctor.ensure_can_take_patient()
            doctor.assign_patient()
            patient.assign_doctor(doctor.id, doctor.name)
        else:
            # Take the new slot first: if it raises nothing has been changed yet.
            doctor.assign_patient()
            if patient.has_doctor_slot():
                previous_doctor = await self._release_previous(previous_doctor_id)
            patient.reassign_doctor(doctor.id, doctor.name)

        # New doctor, then patient, then previous doctor. A failure part way
        # leaves a doctor counting one patient too many, never too few.
        doctor = await self._doctor_repository.save(doctor)
        try:
            patient = await self._patient_repository.save_entity(patient)
        except Exception:
            await self._return_slot(doctor)
            raise
        if previous_doctor is not None:
            try:
                await self._doctor_repository.save(previous_doctor)
            except Exception:
                self._logger.exception(
                    "Previous doctor slot not released", doctor_id=previous_doctor.id
                )

        self._logger.info(
            "Doctor reassigned to patient" if is_reassignment else "Doctor assigned to patient",
            patient_id=patient.id,
            doctor_id=doctor.id,
            previous_doctor_id=previous_doctor_id,
            doctor_load=doctor.current_patient_load,
        )
        await self._publish(patient, doctor, is_reassignment, previous_doctor_id, previous_status, reason)

        return AssignDoctorResponse(
            success=True,
            patient=patient,
            doctor=doctor,
            is_reassignment=is_reassignment,
            message=(
                f"Patient reassigned to {doctor.name}"
                if is_reassignment
                else f"Patient assigned to {doctor.name}"
            ),
        )

    async def _release_previous(self, previous_doctor_id: Optional[str]) -> Optional[Doctor]:
        if not previous_doctor_id:
            return None
        previous = await resolve_doctor(self._doctor_repository, previous_doctor_id)
        if previous is None:
            self._logger.warning("Previous doctor not found", doctor_id=previous_doctor_id)
            return None
        try:
            previous.release_patient()
        except NoPatientsToReleaseError:
            self._logger.warning("Previous doctor had no patients to release", doctor_id=previous.id)
            return None
        return previous

    async def _return_slot(self, doctor: Doctor) -> None:
        try:
            doctor.release_patient()
            await self._doctor_repository.save(doctor)
        except Exception:
            self._logger.exception("Could not return doctor slot", doctor_id=doctor.id)

    async def _publish(
        self,
        patient: Patient,
        doctor: Doctor,
        is_reassignment: bool,
        previous_doctor_id: Optional[str],
        previous_status: PatientStatus,
        reason: Optional[str],
    ) -> None:
        if self._event_bus is None:
            return
        if is_reassignment:
            event = create_case_reassigned_event(
                patient_id=patient.id,
                patient_name=patient.name,
                previous_doctor_id=previous_doctor_id or "",
                new_doctor_id=doctor.id,
                new_doctor_name=doctor.name,
                reason=reason or "Reassigned",
            )
        else:
            event = create_case_assigned_event(
                patient_id=patient.id,
                patient_name=patient.name,
                assigned_doctor_id=doctor.id,
                assigned_doctor_name=doctor.name,
                previous_status=previous_status,
            )
        await self._event_bus.notify(event)

    async def _load_patient(self, patient_id: str) -> Patient:
        patient = await self._patient_repository.find_entity_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient

    async def _load_doctor(self, doctor_id: str) -> Doctor:
        doctor = await resolve_doctor(self._doctor_repository, doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id)
        return doctor
