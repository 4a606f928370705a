"""
Outbound messaging port.
"""

from abc import ABC, abstractmethod

from ....core.exceptions import ClinicTriageException
from ....core.result import Result


class MessagingService(ABC):
    """Publishes serialized messages to named queues."""

    @abstractmethod
    async def publish_to_queue(
        self, queue_name: str, message: str
    ) -> Result[None, ClinicTriageException]:
        """Publish one message. Failures come back as a failed Result."""

    @abstractmethod
    def is_connected(self) -> bool:
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass
