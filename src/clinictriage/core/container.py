"""
Dependency injection container for the triage service.

``build_container`` wires the in-memory adapters, the event bus with its
observers, and every use case into a fresh container.
"""

from typing import Any, Callable, Dict, Optional

from .config import Settings, get_settings
from .exceptions import ConfigurationError
from .structured_logger import configure_logging, get_logger


class Container:
    """Lightweight dependency injection container."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._services: Dict[str, Any] = {}
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._singletons: Dict[str, Any] = {}
        self._settings = settings or get_settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[name] = instance

    def register_factory(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a factory; its first result is cached."""
        self._factories[name] = factory

    def register_service(self, name: str, service: Any) -> None:
        self._services[name] = service

    def get(self, name: str) -> Any:
        """Get a service by name."""
        if name in self._singletons:
            return self._singletons[name]

        if name in self._services:
            return self._services[name]

        if name in self._factories:
            instance = self._factories[name]()
            self._singletons[name] = instance
            return instance

        raise ConfigurationError(f"Service '{name}' not found")

    def get_or_none(self, name: str) -> Optional[Any]:
        try:
            return self.get(name)
        except ConfigurationError:
            return None

    def has(self, name: str) -> bool:
        return name in self._services or name in self._factories or name in self._singletons

    def clear(self) -> None:
        self._services.clear()
        self._factories.clear()
        self._singletons.clear()


class ServiceNames:
    """Service names used by the container."""

    SETTINGS = "settings"

    # Repositories
    PATIENT_REPOSITORY = "patient_repository"
    DOCTOR_REPOSITORY = "doctor_repository"
    USER_REPOSITORY = "user_repository"
    COMMENT_REPOSITORY = "comment_repository"
    AUDIT_REPOSITORY = "audit_repository"
    VITALS_REPOSITORY = "vitals_repository"

    # Messaging and events
    MESSAGING_SERVICE = "messaging_service"
    EVENT_BUS = "event_bus"
    AUDIT_OBSERVER = "audit_observer"
    DOCTOR_NOTIFICATION_OBSERVER = "doctor_notification_observer"

    # Use cases
    REGISTER_PATIENT = "register_patient"
    ASSIGN_DOCTOR = "assign_doctor"
    UPDATE_PATIENT_STATUS = "update_patient_status"
    ADD_COMMENT = "add_comment"
    GET_DOCTOR_PATIENTS = "get_doctor_patients"
    CHANGE_PATIENT_PRIORITY = "change_patient_priority"
    RECORD_VITALS = "record_vitals"


def build_container(settings: Optional[Settings] = None, configure_logs: bool = False) -> Container:
    """Create a container with every triage component registered."""
    from ..adapters.db.memory.repositories import (
        InMemoryAuditRepository,
        InMemoryDoctorRepository,
        InMemoryPatientCommentRepository,
        InMemoryPatientRepository,
        InMemoryUserRepository,
        InMemoryVitalsRepository,
    )
    from ..adapters.queue import InMemoryMessagingService
    from ..application.observers import AuditObserver, DoctorNotificationObserver
    from ..application.use_cases import (
        AddCommentToPatientUseCase,
        AssignDoctorToPatientUseCase,
        ChangePatientPriorityUseCase,
        GetDoctorPatientsUseCase,
        RecordVitalsUseCase,
        RegisterPatientUseCase,
        UpdatePatientStatusUseCase,
    )
    from ..domain.events.event_bus import TriageEventBus

    container = Container(settings)
    settings = container.settings
    if configure_logs:
        configure_logging(settings.logging.level, settings.logging.format)

    container.register_singleton(ServiceNames.SETTINGS, settings)
    container.register_singleton(ServiceNames.PATIENT_REPOSITORY, InMemoryPatientRepository())
    container.register_singleton(ServiceNames.DOCTOR_REPOSITORY, InMemoryDoctorRepository())
    container.register_singleton(ServiceNames.USER_REPOSITORY, InMemoryUserRepository())
    container.register_singleton(ServiceNames.COMMENT_REPOSITORY, InMemoryPatientCommentRepository())
    container.register_singleton(ServiceNames.AUDIT_REPOSITORY, InMemoryAuditRepository())
    container.register_singleton(ServiceNames.VITALS_REPOSITORY, InMemoryVitalsRepository())
    container.register_singleton(
        ServiceNames.MESSAGING_SERVICE,
        InMemoryMessagingService(
            max_queue_size=settings.messaging.max_queue_size,
            logger=get_logger("clinictriage.adapters.queue"),
        ),
    )

    def _event_bus() -> TriageEventBus:
        bus = TriageEventBus(logger=get_logger("clinictriage.events"))
        bus.subscribe(container.get(ServiceNames.AUDIT_OBSERVER))
        bus.subscribe(container.get(ServiceNames.DOCTOR_NOTIFICATION_OBSERVER))
        return bus

    container.register_factory(
        ServiceNames.AUDIT_OBSERVER,
        lambda: AuditObserver(
            container.get(ServiceNames.AUDIT_REPOSITORY),
            logger=get_logger("clinictriage.observers.audit"),
        ),
    )
    container.register_factory(
        ServiceNames.DOCTOR_NOTIFICATION_OBSERVER,
        lambda: DoctorNotificationObserver(
            container.get(ServiceNames.MESSAGING_SERVICE),
            queue_name=settings.triage.high_priority_queue,
            logger=get_logger("clinictriage.observers.doctor_notification"),
        ),
    )
    container.register_factory(ServiceNames.EVENT_BUS, _event_bus)

    container.register_factory(
        ServiceNames.REGISTER_PATIENT,
        lambda: RegisterPatientUseCase(
            container.get(ServiceNames.PATIENT_REPOSITORY),
            container.get(ServiceNames.VITALS_REPOSITORY),
            event_bus=container.get(ServiceNames.EVENT_BUS),
            logger=get_logger("clinictriage.use_cases.register_patient"),
            critical_threshold=settings.triage.critical_priority_threshold,
        ),
    )
    container.register_factory(
        ServiceNames.ASSIGN_DOCTOR,
        lambda: AssignDoctorToPatientUseCase(
            container.get(ServiceNames.PATIENT_REPOSITORY),
            container.get(ServiceNames.DOCTOR_REPOSITORY),
            event_bus=container.get(ServiceNames.EVENT_BUS),
            logger=get_logger("clinictriage.use_cases.assign_doctor"),
            serialize_assignments=settings.triage.serialize_doctor_assignment,
        ),
    )
    container.register_factory(
        ServiceNames.UPDATE_PATIENT_STATUS,
        lambda: UpdatePatientStatusUseCase(
            container.get(ServiceNames.PATIENT_REPOSITORY),
            doctor_repository=container.get(ServiceNames.DOCTOR_REPOSITORY),
            event_bus=container.get(ServiceNames.EVENT_BUS),
            logger=get_logger("clinictriage.use_cases.update_patient_status"),
        ),
    )
    container.register_factory(
        ServiceNames.ADD_COMMENT,
        lambda: AddCommentToPatientUseCase(
            container.get(ServiceNames.PATIENT_REPOSITORY),
            container.get(ServiceNames.COMMENT_REPOSITORY),
            container.get(ServiceNames.USER_REPOSITORY),
            logger=get_logger("clinictriage.use_cases.add_comment"),
        ),
    )
    container.register_factory(
        ServiceNames.GET_DOCTOR_PATIENTS,
        lambda: GetDoctorPatientsUseCase(
            container.get(ServiceNames.PATIENT_REPOSITORY),
            container.get(ServiceNames.DOCTOR_REPOSITORY),
            logger=get_logger("clinictriage.use_cases.get_doctor_patients"),
        ),
    )
    container.register_factory(
        ServiceNames.CHANGE_PATIENT_PRIORITY,
        lambda: ChangePatientPriorityUseCase(
            container.get(ServiceNames.PATIENT_REPOSITORY),
            event_bus=container.get(ServiceNames.EVENT_BUS),
            logger=get_logger("clinictriage.use_cases.change_patient_priority"),
        ),
    )
    container.register_factory(
        ServiceNames.RECORD_VITALS,
        lambda: RecordVitalsUseCase(
            container.get(ServiceNames.PATIENT_REPOSITORY),
            container.get(ServiceNames.VITALS_REPOSITORY),
            event_bus=container.get(ServiceNames.EVENT_BUS),
            logger=get_logger("clinictriage.use_cases.record_vitals"),
        ),
    )
    return container
