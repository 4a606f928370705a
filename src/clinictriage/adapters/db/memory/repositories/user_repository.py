"""
In-memory implementation of UserRepository.
"""

from typing import Any, Dict, List, Optional

from clinictriage.application.ports.repositories.user_repo import UserRepository
from clinictriage.domain.entities.user import User
from clinictriage.domain.enums.triage import UserRole, UserStatus


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def save(self, user: User) -> User:
        self._documents[user.id] = user.to_dict()
        return User.from_persistence(self._documents[user.id])

    async def find_by_id(self, user_id: str) -> Optional[User]:
        document = self._documents.get(user_id)
        return User.from_persistence(document) if document else None

    async def find_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        for document in self._documents.values():
            if document["email"] == wanted:
                return User.from_persistence(document)
        return None

    async def find_all(
        self, role: Optional[UserRole] = None, status: Optional[UserStatus] = None
    ) -> List[User]:
        users = [User.from_persistence(document) for document in self._documents.values()]
        if role is not None:
            users = [u for u in users if u.role == UserRole(role)]
        if status is not None:
            users = [u for u in users if u.status == UserStatus(status)]
        return users

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def count_by_role(self, role: UserRole) -> int:
        return len(await self.find_all(role=role))

    def clear(self) -> None:
        self._documents.clear()
