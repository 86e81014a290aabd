from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from app.domain.common.time import EPOCH, as_utc
from app.domain.tasks.models import (
    PRIORITY_RANK,
    SortKey,
    Task,
    TaskFilter,
    TaskPriority,
    TaskSort,
    TaskStatus,
)

MIN_TITLE_LENGTH = 3
MAX_DESCRIPTION_LENGTH = 500
MAX_TAG_LENGTH = 50
MAX_TAGS = 20


def title_error(title: Any) -> Optional[str]:
    if not isinstance(title, str) or len(title.strip()) < MIN_TITLE_LENGTH:
        return f"Title must be at least {MIN_TITLE_LENGTH} characters"
    return None


def description_error(description: Any) -> Optional[str]:
    if description is None:
        return None
    if not isinstance(description, str):
        return "Description must be text"
    if len(description) > MAX_DESCRIPTION_LENGTH:
        return f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
    return None


def status_error(status: Any) -> Optional[str]:
    if TaskStatus.parse(status) is None:
        return "Status must be one of: " + ", ".join(s.value for s in TaskStatus)
    return None


def priority_error(priority: Any) -> Optional[str]:
    if TaskPriority.parse(priority) is None:
        return "Priority must be one of: " + ", ".join(p.value for p in TaskPriority)
    return None


def tags_error(tags: Any) -> Optional[str]:
    if tags is None:
        return None
    if not isinstance(tags, (list, tuple)) or not all(isinstance(t, str) for t in tags):
        return "Tags must be a list of strings"
    cleaned = clean_tags(tags)
    if len(cleaned) > MAX_TAGS:
        return f"No more than {MAX_TAGS} tags allowed"
    if any(len(t) > MAX_TAG_LENGTH for t in cleaned):
        return f"Each tag cannot exceed {MAX_TAG_LENGTH} characters"
    return None


def clean_tags(tags: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if not tags:
        return ()
    return tuple(t.strip() for t in tags if t and t.strip())


def clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    stripped = description.strip()
    return stripped or None


def validate_task_fields(fields: Dict[str, Any]) -> Dict[str, str]:
    """
    Check the given task fields and return {field: message} for the bad ones.

    Only keys present in `fields` are checked, so the same function serves
    both create (all fields) and partial update (supplied fields).
    Keys use the camelCase names callers send.
    """
    errors: Dict[str, str] = {}
    checks = (
        ("title", title_error),
        ("description", description_error),
        ("status", status_error),
        ("priority", priority_error),
        ("tags", tags_error),
    )
    for key, check in checks:
        if key in fields:
            err = check(fields[key])
            if err:
                errors[key] = err

    if "due_date" in fields and fields["due_date"] is not None and not isinstance(fields["due_date"], datetime):
        errors["dueDate"] = "Due date must be a valid date"
    return errors


def matches_search(task: Task, search: str) -> bool:
    needle = search.casefold()
    if needle in task.title.casefold():
        return True
    return bool(task.description) and needle in task.description.casefold()


def effective_filter(flt: TaskFilter) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Drop filter values that are not valid; they are ignored rather than rejected."""
    status = TaskStatus.parse(flt.status)
    priority = TaskPriority.parse(flt.priority)
    search = flt.search.strip() if flt.search and flt.search.strip() else None
    return (
        status.value if status else None,
        priority.value if priority else None,
        search,
    )


def _sort_value(task: Task, key: SortKey) -> Any:
    if key is SortKey.TITLE:
        return task.title.casefold()
    if key is SortKey.PRIORITY:
        return PRIORITY_RANK[task.priority]
    if key is SortKey.DUE_DATE:
        return as_utc(task.due_date) if task.due_date else EPOCH
    return task.created_at


def sort_tasks(tasks: Sequence[Task], sort: TaskSort) -> List[Task]:
    try:
        key = SortKey(sort.key)
    except ValueError:
        key = SortKey.CREATED_AT
    descending = (sort.direction or "desc").lower() != "asc"
    return sorted(tasks, key=lambda t: _sort_value(t, key), reverse=descending)


def completion_percentage(completed: int, created: int) -> int:
    """Rounded half up, 0 for an empty set."""
    if created <= 0:
        return 0
    return (completed * 200 + created) // (2 * created)
