"""
In-process queue service implementing MessagingService.
"""

import json
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from clinictriage.application.ports.services.messaging_service import MessagingService
from clinictriage.core.exceptions import (
    ClinicTriageException,
    MessagingServiceUnavailableError,
    NotificationSendError,
)
from clinictriage.core.result import Result
from clinictriage.core.structured_logger import StructuredLogger, get_logger


class InMemoryMessagingService(MessagingService):
    """Named FIFO queues held in memory."""

    def __init__(self, max_queue_size: int = 1000, logger: Optional[StructuredLogger] = None):
        self._queues: Dict[str, Deque[str]] = {}
        self._max_queue_size = max_queue_size
        self._connected = True
        self._logger = logger or get_logger(__name__)

    async def publish_to_queue(
        self, queue_name: str, message: str
    ) -> Result[None, ClinicTriageException]:
        if not self._connected:
            return Result.fail(MessagingServiceUnavailableError())
        if not queue_name:
            return Result.fail(NotificationSendError("<unnamed>", "queue name is required"))
        queue = self._queues.setdefault(queue_name, deque())
        if len(queue) >= self._max_queue_size:
            self._logger.warning("Queue full, message rejected", queue=queue_name, size=len(queue))
            return Result.fail(
                NotificationSendError(queue_name, f"queue is full ({self._max_queue_size})")
            )
        queue.append(message)
        self._logger.debug("Message published", queue=queue_name, size=len(queue))
        return Result.ok(None)

    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False
        self._logger.info("Messaging service disconnected")

    async def consume(self, queue_name: str) -> Optional[Dict[str, Any]]:
        """Pop the oldest message of a queue, decoded from JSON."""
        queue = self._queues.get(queue_name)
        if not queue:
            return None
        return json.loads(queue.popleft())

    def peek_messages(self, queue_name: str) -> List[Dict[str, Any]]:
        return [json.loads(raw) for raw in self._queues.get(queue_name, ())]

    def get_queue_length(self, queue_name: str) -> int:
        return len(self._queues.get(queue_name, ()))
