from __future__ import annotations

from datetime import timedelta
from typing import Dict, Iterable, Tuple

from app.domain.common.ports import Clock
from app.domain.common.time import to_iso
from app.domain.tasks.models import Stats, TaskPriority, TaskStatus
from app.domain.tasks.ports import TaskRepository
from app.domain.tasks.rules import completion_percentage

RECENT_WINDOW = timedelta(days=7)


def build_stats(counts: Iterable[Tuple[str, str, int]], recent_activity: int) -> Stats:
    """Fold (status, priority, count) rows into a Stats value."""
    by_status: Dict[str, int] = {s.value: 0 for s in TaskStatus}
    by_priority: Dict[str, int] = {p.value: 0 for p in TaskPriority}
    high_open = 0

    for status, priority, n in counts:
        if status not in by_status or priority not in by_priority:
            continue
        by_status[status] += n
        by_priority[priority] += n
        if priority == TaskPriority.HIGH.value and status != TaskStatus.DONE.value:
            high_open += n

    created = sum(by_status.values())
    completed = by_status[TaskStatus.DONE.value]
    return Stats(
        created=created,
        completed=completed,
        active=by_status[TaskStatus.TODO.value] + by_status[TaskStatus.IN_PROGRESS.value],
        high_priority_open=high_open,
        completion_percentage=completion_percentage(completed, created),
        recent_activity=recent_activity,
        by_status=by_status,
        by_priority=by_priority,
    )


class StatsAggregator:
    """Per-owner task statistics, recomputed from the store on every call."""

    def __init__(self, repo: TaskRepository, clock: Clock) -> None:
        self._repo = repo
        self._clock = clock

    async def compute(self, owner_id: str) -> Stats:
        counts = await self._repo.count_by_status_priority(owner_id)
        since = self._clock.now() - RECENT_WINDOW
        recent = await self._repo.count_created_since(owner_id, to_iso(since))
        return build_stats(counts, recent)
