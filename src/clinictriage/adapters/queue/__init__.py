"""Queue adapters for outbound notifications."""

from .in_memory_messaging_service import InMemoryMessagingService

__all__ = ["InMemoryMessagingService"]
