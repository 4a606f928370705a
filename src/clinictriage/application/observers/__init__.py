from .audit_observer import AuditObserver
from .doctor_notification_observer import DoctorNotificationObserver

__all__ = ["AuditObserver", "DoctorNotificationObserver"]
