"""Doctor resolution and slot release shared by the use cases."""

from typing import Optional

from ...core.structured_logger import StructuredLogger
from ...domain.entities.doctor import Doctor
from ...domain.errors import NoPatientsToReleaseError
from ..ports.repositories.doctor_repo import DoctorRepository


async def resolve_doctor(doctor_repository: DoctorRepository, doctor_id: str) -> Optional[Doctor]:
    """Find a doctor by its own ID, falling back to the underlying user ID."""
    doctor = await doctor_repository.find_by_id(doctor_id)
    if doctor is None:
        doctor = await doctor_repository.find_by_user_id(doctor_id)
    return doctor


async def release_doctor_slot(
    doctor_repository: DoctorRepository, doctor_id: str, logger: StructuredLogger
) -> Optional[Doctor]:
    """Give back one slot of ``doctor_id``'s capacity and persist it.

    A missing doctor or a doctor already at zero load is logged and skipped.
    """
    doctor = await resolve_doctor(doctor_repository, doctor_id)
    if doctor is None:
        logger.warning("Doctor to release not found", doctor_id=doctor_id)
        return None
    try:
        doctor.release_patient()
    except NoPatientsToReleaseError:
        logger.warning("Doctor had no patients to release", doctor_id=doctor.id)
        return None
    return await doctor_repository.save(doctor)
