from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["TaskStatus"]:
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["TaskPriority"]:
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


PRIORITY_RANK = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


class SortKey(str, Enum):
    CREATED_AT = "createdAt"
    TITLE = "title"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks a patch field the caller did not send (as opposed to an explicit null).
UNSET: Any = _Unset()


@dataclass(frozen=True)
class Task:
    id: str
    owner_id: str
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime]
    tags: Tuple[str, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TaskInput:
    title: Optional[str]
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None


@dataclass(frozen=True)
class TaskPatch:
    title: Any = UNSET
    description: Any = UNSET
    status: Any = UNSET
    priority: Any = UNSET
    due_date: Any = UNSET
    tags: Any = UNSET

    def supplied(self) -> Dict[str, Any]:
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("description", self.description),
                ("status", self.status),
                ("priority", self.priority),
                ("due_date", self.due_date),
                ("tags", self.tags),
            )
            if value is not UNSET
        }


@dataclass(frozen=True)
class TaskFilter:
    status: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class TaskSort:
    key: str = SortKey.CREATED_AT.value
    direction: str = "desc"


@dataclass(frozen=True)
class Stats:
    created: int
    completed: int
    active: int
    high_priority_open: int
    completion_percentage: int
    recent_activity: int
    by_status: Dict[str, int] = field(default_factory=dict)
    by_priority: Dict[str, int] = field(default_factory=dict)
