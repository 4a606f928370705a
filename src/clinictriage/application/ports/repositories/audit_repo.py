"""
Audit repository interface and audit record types.

Audit storage is append-only; every operation returns ``Result``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....core.result import Result


@dataclass(frozen=True)
class AuditLogRecord:
    id: str
    user_id: str
    action: str
    patient_id: Optional[str]
    details: str
    timestamp: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AuditSearchCriteria:
    user_id: Optional[str] = None
    patient_id: Optional[str] = None
    action: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = 100
    offset: int = 0


class AuditRepository(ABC):
    """Abstract repository for the audit trail."""

    @abstractmethod
    async def save(self, record: AuditLogRecord) -> Result[AuditLogRecord, Exception]:
        pass

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> Result[List[AuditLogRecord], Exception]:
        pass

    @abstractmethod
    async def find_by_patient_id(self, patient_id: str) -> Result[List[AuditLogRecord], Exception]:
        pass

    @abstractmethod
    async def find_by_action(self, action: str) -> Result[List[AuditLogRecord], Exception]:
        pass

    @abstractmethod
    async def search(self, criteria: AuditSearchCriteria) -> Result[List[AuditLogRecord], Exception]:
        """Filter by any combination of criteria, newest first, paginated."""
