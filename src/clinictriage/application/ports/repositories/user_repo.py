"""
User repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.user import User
from ....domain.enums.triage import UserRole, UserStatus


class UserRepository(ABC):
    """Abstract repository for users."""

    @abstractmethod
    async def save(self, user: User) -> User:
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_all(
        self, role: Optional[UserRole] = None, status: Optional[UserStatus] = None
    ) -> List[User]:
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        pass

    @abstractmethod
    async def count_by_role(self, role: UserRole) -> int:
        pass
