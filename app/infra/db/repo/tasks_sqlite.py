from __future__ import annotations

import json
import sqlite3
from typing import Optional, Sequence, Tuple

import aiosqlite

from app.domain.common.errors import NotFoundError
from app.domain.common.time import from_iso, from_iso_opt, to_iso, to_iso_opt
from app.domain.tasks.models import Task, TaskPriority, TaskStatus
from app.domain.tasks.ports import TaskRepository
from app.infra.db.connection import Database

_COLUMNS = "id, owner_id, title, description, status, priority, due_date, tags, created_at, updated_at"


class TaskSqliteRepo(TaskRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def insert(self, task: Task) -> None:
        try:
            await self._db.execute(
                f"INSERT INTO tasks({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);",
                (
                    task.id,
                    task.owner_id,
                    task.title,
                    task.description,
                    task.status.value,
                    task.priority.value,
                    to_iso_opt(task.due_date),
                    self._tags_to_str(task.tags),
                    to_iso(task.created_at),
                    to_iso(task.updated_at),
                ),
            )
        except sqlite3.IntegrityError as e:
            # owner row is gone (token outlived the account)
            raise NotFoundError("User not found") from e

    async def get(self, owner_id: str, task_id: str) -> Optional[Task]:
        row = await self._db.fetchone(
            f"SELECT {_COLUMNS} FROM tasks WHERE id = ? AND owner_id = ?;",
            (task_id, owner_id),
        )
        return self._row_to_task(row) if row else None

    async def list_for_owner(
        self,
        owner_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> Sequence[Task]:
        sql = f"SELECT {_COLUMNS} FROM tasks WHERE owner_id = ?"
        params: list = [owner_id]
        if status:
            sql += " AND status = ?"
            params.append(status)
        if priority:
            sql += " AND priority = ?"
            params.append(priority)
        sql += " ORDER BY created_at DESC;"
        rows = await self._db.fetchall(sql, params)
        return [self._row_to_task(r) for r in rows]

    async def save(self, task: Task) -> bool:
        n = await self._db.execute(
            """
            UPDATE tasks
            SET title = ?, description = ?, status = ?, priority = ?,
                due_date = ?, tags = ?, updated_at = ?
            WHERE id = ? AND owner_id = ?;
            """,
            (
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                to_iso_opt(task.due_date),
                self._tags_to_str(task.tags),
                to_iso(task.updated_at),
                task.id,
                task.owner_id,
            ),
        )
        return n > 0

    async def delete(self, owner_id: str, task_id: str) -> bool:
        n = await self._db.execute(
            "DELETE FROM tasks WHERE id = ? AND owner_id = ?;",
            (task_id, owner_id),
        )
        return n > 0

    async def delete_all_for_owner(self, owner_id: str) -> int:
        return await self._db.execute("DELETE FROM tasks WHERE owner_id = ?;", (owner_id,))

    async def count_by_status_priority(self, owner_id: str) -> Sequence[Tuple[str, str, int]]:
        rows = await self._db.fetchall(
            """
            SELECT status, priority, COUNT(*) AS count
            FROM tasks
            WHERE owner_id = ?
            GROUP BY status, priority;
            """,
            (owner_id,),
        )
        return [(r["status"], r["priority"], int(r["count"])) for r in rows]

    async def count_created_since(self, owner_id: str, since_iso: str) -> int:
        row = await self._db.fetchone(
            "SELECT COUNT(*) AS count FROM tasks WHERE owner_id = ? AND created_at >= ?;",
            (owner_id, since_iso),
        )
        return int(row["count"]) if row else 0

    @staticmethod
    def _tags_to_str(tags: Sequence[str]) -> str:
        return json.dumps(list(tags), ensure_ascii=False)

    @staticmethod
    def _str_to_tags(s: Optional[str]) -> Tuple[str, ...]:
        if not s:
            return ()
        try:
            val = json.loads(s)
        except ValueError:
            return ()
        return tuple(str(t) for t in val) if isinstance(val, list) else ()

    def _row_to_task(self, row: aiosqlite.Row) -> Task:
        return Task(
            id=row["id"],
            owner_id=row["owner_id"],
            title=row["title"],
            description=row["description"],
            status=TaskStatus(row["status"]),
            priority=TaskPriority(row["priority"]),
            due_date=from_iso_opt(row["due_date"]),
            tags=self._str_to_tags(row["tags"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )
