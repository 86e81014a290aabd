from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from app.domain.common.errors import NotFoundError, ValidationError
from app.domain.common.ports import Clock, IdGenerator
from app.domain.common.time import as_utc
from app.domain.tasks.models import (
    Task,
    TaskFilter,
    TaskInput,
    TaskPatch,
    TaskPriority,
    TaskSort,
    TaskStatus,
)
from app.domain.tasks.ports import TaskRepository
from app.domain.tasks.rules import (
    clean_description,
    clean_tags,
    effective_filter,
    matches_search,
    sort_tasks,
    validate_task_fields,
)

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"


class TaskManager:
    """
    Owner-scoped task CRUD. No HTTP. No sqlite.

    A task owned by someone else and a task that does not exist both raise
    NotFoundError with the same message.
    """

    def __init__(self, repo: TaskRepository, clock: Clock, ids: IdGenerator) -> None:
        self._repo = repo
        self._clock = clock
        self._ids = ids

    async def list(
        self,
        owner_id: str,
        flt: Optional[TaskFilter] = None,
        sort: Optional[TaskSort] = None,
    ) -> List[Task]:
        status, priority, search = effective_filter(flt or TaskFilter())
        tasks = await self._repo.list_for_owner(owner_id, status=status, priority=priority)
        if search:
            tasks = [t for t in tasks if matches_search(t, search)]
        return sort_tasks(tasks, sort or TaskSort())

    async def get(self, owner_id: str, task_id: str) -> Task:
        task = await self._repo.get(owner_id, task_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    async def create(self, owner_id: str, data: TaskInput) -> Task:
        fields: Dict[str, Any] = {
            "title": data.title,
            "description": data.description,
            "due_date": data.due_date,
            "tags": data.tags,
        }
        if data.status is not None:
            fields["status"] = data.status
        if data.priority is not None:
            fields["priority"] = data.priority

        errors = validate_task_fields(fields)
        if errors:
            raise ValidationError("Validation failed", errors)

        now = self._clock.now()
        task = Task(
            id=self._ids.new_id(),
            owner_id=owner_id,
            title=data.title.strip(),
            description=clean_description(data.description),
            status=TaskStatus(data.status) if data.status is not None else TaskStatus.TODO,
            priority=TaskPriority(data.priority) if data.priority is not None else TaskPriority.MEDIUM,
            due_date=as_utc(data.due_date) if data.due_date else None,
            tags=clean_tags(data.tags),
            created_at=now,
            updated_at=now,
        )
        await self._repo.insert(task)
        logger.info("Task created owner=%s task=%s", owner_id, task.id)
        return task

    async def update(self, owner_id: str, task_id: str, patch: TaskPatch) -> Task:
        supplied = patch.supplied()
        errors = validate_task_fields(supplied)
        if errors:
            raise ValidationError("Validation failed", errors)

        existing = await self.get(owner_id, task_id)

        changes: Dict[str, Any] = {}
        if "title" in supplied:
            changes["title"] = supplied["title"].strip()
        if "description" in supplied:
            changes["description"] = clean_description(supplied["description"])
        if "status" in supplied:
            changes["status"] = TaskStatus(supplied["status"])
        if "priority" in supplied:
            changes["priority"] = TaskPriority(supplied["priority"])
        if "due_date" in supplied:
            changes["due_date"] = as_utc(supplied["due_date"]) if supplied["due_date"] else None
        if "tags" in supplied:
            changes["tags"] = clean_tags(supplied["tags"])

        updated = replace(existing, updated_at=self._clock.now(), **changes)
        if not await self._repo.save(updated):
            # deleted between read and write
            raise NotFoundError(TASK_NOT_FOUND)
        return updated

    async def delete(self, owner_id: str, task_id: str) -> None:
        if not await self._repo.delete(owner_id, task_id):
            raise NotFoundError(TASK_NOT_FOUND)
        logger.info("Task deleted owner=%s task=%s", owner_id, task_id)
