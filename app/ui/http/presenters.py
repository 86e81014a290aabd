from __future__ import annotations

from typing import Any, Dict

from app.domain.common.time import to_iso, to_iso_opt
from app.domain.tasks.models import Stats, Task
from app.domain.users.models import User


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "createdAt": to_iso(user.created_at),
        "updatedAt": to_iso(user.updated_at),
    }


def task_to_dict(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "dueDate": to_iso_opt(task.due_date),
        "tags": list(task.tags),
        "user": task.owner_id,
        "createdAt": to_iso(task.created_at),
        "updatedAt": to_iso(task.updated_at),
    }


def stats_to_dict(stats: Stats) -> Dict[str, Any]:
    return {
        "created": stats.created,
        "completed": stats.completed,
        "active": stats.active,
        "highPriorityOpen": stats.high_priority_open,
        "completionPercentage": stats.completion_percentage,
        "recentActivity": stats.recent_activity,
        "byStatus": dict(stats.by_status),
        "byPriority": dict(stats.by_priority),
        # names the existing web client reads
        "tasksCreated": stats.created,
        "tasksCompleted": stats.completed,
    }
