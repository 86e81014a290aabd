"""
Owner-scoped task CRUD, filtering, search and ordering.

Run with: python -m pytest tests/test_task_manager.py -v
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.common.errors import NotFoundError, ValidationError
from app.domain.tasks.models import (
    TaskFilter,
    TaskInput,
    TaskPatch,
    TaskPriority,
    TaskSort,
    TaskStatus,
)
from app.domain.tasks.rules import completion_percentage


def test_create_applies_defaults(task_manager, clock):
    task = asyncio.run(task_manager.create("u1", TaskInput(title="  Write report  ")))

    assert task.title == "Write report"
    assert task.status is TaskStatus.TODO
    assert task.priority is TaskPriority.MEDIUM
    assert task.description is None
    assert task.due_date is None
    assert task.tags == ()
    assert task.owner_id == "u1"
    assert task.created_at == task.updated_at == clock.now()


def test_create_keeps_given_fields(task_manager):
    due = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)
    task = asyncio.run(
        task_manager.create(
            "u1",
            TaskInput(
                title="Ship release",
                description="  notes ",
                status="in-progress",
                priority="high",
                due_date=due,
                tags=[" work ", "", "urgent"],
            ),
        )
    )
    assert task.description == "notes"
    assert task.status is TaskStatus.IN_PROGRESS
    assert task.priority is TaskPriority.HIGH
    assert task.due_date == due
    assert task.tags == ("work", "urgent")


@pytest.mark.parametrize(
    "data, field",
    [
        (TaskInput(title=None), "title"),
        (TaskInput(title="ab"), "title"),
        (TaskInput(title="  ab  "), "title"),
        (TaskInput(title="Fine title", description="d" * 501), "description"),
        (TaskInput(title="Fine title", status="blocked"), "status"),
        (TaskInput(title="Fine title", priority="urgent"), "priority"),
        (TaskInput(title="Fine title", tags=["t"] * 21), "tags"),
        (TaskInput(title="Fine title", tags=["x" * 51]), "tags"),
    ],
)
def test_create_rejects_bad_fields(task_manager, task_repo, data, field):
    with pytest.raises(ValidationError) as exc:
        asyncio.run(task_manager.create("u1", data))
    assert field in exc.value.errors
    assert task_repo.rows == {}


def test_title_of_exactly_three_characters_is_accepted(task_manager):
    task = asyncio.run(task_manager.create("u1", TaskInput(title="abc")))
    assert task.title == "abc"


def test_long_title_has_no_upper_bound(task_manager):
    long_title = "x" * 1000

    async def run():
        task = await task_manager.create("u1", TaskInput(title=long_title))
        return await task_manager.update("u1", task.id, TaskPatch(title=long_title + "y"))

    updated = asyncio.run(run())
    assert updated.title == long_title + "y"


def test_get_other_owners_task_looks_missing(task_manager):
    task = asyncio.run(task_manager.create("u1", TaskInput(title="Private thing")))

    with pytest.raises(NotFoundError) as foreign:
        asyncio.run(task_manager.get("u2", task.id))
    with pytest.raises(NotFoundError) as missing:
        asyncio.run(task_manager.get("u2", "no-such-task"))
    assert str(foreign.value) == str(missing.value)


def test_update_changes_only_supplied_fields(task_manager, clock):
    async def run():
        task = await task_manager.create(
            "u1", TaskInput(title="Buy milk", description="2 litres", priority="low", tags=["home"])
        )
        clock.advance(minutes=10)
        updated = await task_manager.update("u1", task.id, TaskPatch(status="done"))
        return task, updated

    task, updated = asyncio.run(run())

    assert updated.status is TaskStatus.DONE
    assert updated.title == task.title
    assert updated.description == "2 litres"
    assert updated.priority is TaskPriority.LOW
    assert updated.tags == ("home",)
    assert updated.created_at == task.created_at
    assert updated.updated_at == task.created_at + timedelta(minutes=10)


def test_update_can_clear_optional_fields(task_manager):
    due = datetime(2026, 4, 1, tzinfo=timezone.utc)

    async def run():
        task = await task_manager.create(
            "u1", TaskInput(title="Plan trip", description="beach", due_date=due, tags=["fun"])
        )
        return await task_manager.update("u1", task.id, TaskPatch(description=None, due_date=None, tags=[]))

    updated = asyncio.run(run())
    assert updated.description is None
    assert updated.due_date is None
    assert updated.tags == ()


def test_update_rejects_bad_supplied_field_and_keeps_task(task_manager, task_repo):
    task = asyncio.run(task_manager.create("u1", TaskInput(title="Stable task")))

    with pytest.raises(ValidationError) as exc:
        asyncio.run(task_manager.update("u1", task.id, TaskPatch(title="no", status="done")))

    assert set(exc.value.errors) == {"title"}
    assert task_repo.rows[task.id] == task


def test_update_other_owners_task_is_not_found(task_manager, task_repo):
    task = asyncio.run(task_manager.create("u1", TaskInput(title="Not yours")))
    with pytest.raises(NotFoundError):
        asyncio.run(task_manager.update("u2", task.id, TaskPatch(status="done")))
    assert task_repo.rows[task.id].status is TaskStatus.TODO


def test_delete_is_owner_scoped(task_manager, task_repo):
    task = asyncio.run(task_manager.create("u1", TaskInput(title="Delete me")))

    with pytest.raises(NotFoundError):
        asyncio.run(task_manager.delete("u2", task.id))
    assert task.id in task_repo.rows

    asyncio.run(task_manager.delete("u1", task.id))
    assert task.id not in task_repo.rows

    with pytest.raises(NotFoundError):
        asyncio.run(task_manager.delete("u1", task.id))


def _seed(task_manager, clock):
    """Three tasks for u1 created a minute apart, plus one for u2."""

    async def run():
        a = await task_manager.create(
            "u1", TaskInput(title="Alpha report", priority="low", due_date=datetime(2026, 3, 5, tzinfo=timezone.utc))
        )
        clock.advance(minutes=1)
        b = await task_manager.create(
            "u1", TaskInput(title="beta errands", description="Buy REPORT paper", priority="high", status="done")
        )
        clock.advance(minutes=1)
        c = await task_manager.create(
            "u1", TaskInput(title="Gamma call", due_date=datetime(2026, 3, 2, tzinfo=timezone.utc))
        )
        await task_manager.create("u2", TaskInput(title="Other report"))
        return a, b, c

    return asyncio.run(run())


def test_list_defaults_to_newest_first_for_owner_only(task_manager, clock):
    a, b, c = _seed(task_manager, clock)
    tasks = asyncio.run(task_manager.list("u1"))
    assert [t.id for t in tasks] == [c.id, b.id, a.id]


def test_list_filters_by_status_and_priority(task_manager, clock):
    a, b, c = _seed(task_manager, clock)

    done = asyncio.run(task_manager.list("u1", TaskFilter(status="done")))
    assert [t.id for t in done] == [b.id]

    medium_todo = asyncio.run(task_manager.list("u1", TaskFilter(status="todo", priority="medium")))
    assert [t.id for t in medium_todo] == [c.id]


def test_list_ignores_invalid_filter_values(task_manager, clock):
    _seed(task_manager, clock)
    tasks = asyncio.run(task_manager.list("u1", TaskFilter(status="bogus", priority="nope")))
    assert len(tasks) == 3


def test_search_matches_title_or_description_case_insensitively(task_manager, clock):
    a, b, c = _seed(task_manager, clock)
    found = asyncio.run(task_manager.list("u1", TaskFilter(search="report")))
    assert {t.id for t in found} == {a.id, b.id}


def test_blank_search_is_ignored(task_manager, clock):
    _seed(task_manager, clock)
    assert len(asyncio.run(task_manager.list("u1", TaskFilter(search="   ")))) == 3


def test_sort_by_title_ascending_ignores_case(task_manager, clock):
    a, b, c = _seed(task_manager, clock)
    tasks = asyncio.run(task_manager.list("u1", sort=TaskSort(key="title", direction="asc")))
    assert [t.id for t in tasks] == [a.id, b.id, c.id]


def test_sort_by_priority_descending_puts_high_first(task_manager, clock):
    a, b, c = _seed(task_manager, clock)
    tasks = asyncio.run(task_manager.list("u1", sort=TaskSort(key="priority")))
    assert [t.id for t in tasks] == [b.id, c.id, a.id]


def test_sort_by_due_date_puts_missing_dates_first_ascending(task_manager, clock):
    a, b, c = _seed(task_manager, clock)
    tasks = asyncio.run(task_manager.list("u1", sort=TaskSort(key="dueDate", direction="asc")))
    assert [t.id for t in tasks] == [b.id, c.id, a.id]


def test_unknown_sort_key_falls_back_to_created_at(task_manager, clock):
    a, b, c = _seed(task_manager, clock)
    tasks = asyncio.run(task_manager.list("u1", sort=TaskSort(key="color", direction="asc")))
    assert [t.id for t in tasks] == [a.id, b.id, c.id]


@pytest.mark.parametrize(
    "completed, created, expected",
    [(0, 0, 0), (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 2, 50), (1, 8, 13), (4, 4, 100)],
)
def test_completion_percentage_rounds_half_up(completed, created, expected):
    assert completion_percentage(completed, created) == expected
