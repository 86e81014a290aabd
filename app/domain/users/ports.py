from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.users.models import UserRecord


class UserRepository(ABC):
    @abstractmethod
    async def create(
        self,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        now_iso: str,
    ) -> UserRecord: ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[UserRecord]: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserRecord]: ...

    @abstractmethod
    async def email_taken_by_other(self, email: str, user_id: str) -> bool: ...

    @abstractmethod
    async def update(
        self,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
        now_iso: str,
    ) -> Optional[UserRecord]: ...

    @abstractmethod
    async def delete(self, user_id: str) -> bool: ...


class PasswordHasher(ABC):
    @abstractmethod
    async def hash(self, password: str) -> str: ...

    @abstractmethod
    async def verify(self, password: str, password_hash: str) -> bool: ...
