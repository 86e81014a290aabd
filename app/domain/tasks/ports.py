from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from app.domain.tasks.models import Task


class TaskRepository(ABC):
    """
    Every read and write is scoped by owner. Lookups by id always use the
    fused predicate `id = ? AND owner_id = ?`.
    """

    @abstractmethod
    async def insert(self, task: Task) -> None: ...

    @abstractmethod
    async def get(self, owner_id: str, task_id: str) -> Optional[Task]: ...

    @abstractmethod
    async def list_for_owner(
        self,
        owner_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> Sequence[Task]: ...

    @abstractmethod
    async def save(self, task: Task) -> bool: ...

    @abstractmethod
    async def delete(self, owner_id: str, task_id: str) -> bool: ...

    @abstractmethod
    async def delete_all_for_owner(self, owner_id: str) -> int: ...

    @abstractmethod
    async def count_by_status_priority(self, owner_id: str) -> Sequence[Tuple[str, str, int]]: ...

    @abstractmethod
    async def count_created_since(self, owner_id: str, since_iso: str) -> int: ...
