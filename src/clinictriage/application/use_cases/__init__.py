from .add_comment import AddCommentToPatientUseCase
from .assign_doctor import AssignDoctorToPatientUseCase
from .change_patient_priority import ChangePatientPriorityUseCase
from .get_doctor_patients import GetDoctorPatientsUseCase
from .record_vitals import RecordVitalsUseCase
from .register_patient import RegisterPatientUseCase
from .update_patient_status import UpdatePatientStatusUseCase

__all__ = [
    "AddCommentToPatientUseCase",
    "AssignDoctorToPatientUseCase",
    "ChangePatientPriorityUseCase",
    "GetDoctorPatientsUseCase",
    "RecordVitalsUseCase",
    "RegisterPatientUseCase",
    "UpdatePatientStatusUseCase",
]
