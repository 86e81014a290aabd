from __future__ import annotations

import sqlite3
from typing import Optional

import aiosqlite

from app.domain.common.errors import ConflictError
from app.domain.common.time import from_iso
from app.domain.users.models import Role, User, UserRecord
from app.domain.users.ports import UserRepository
from app.infra.db.connection import Database


class UserSqliteRepo(UserRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(
        self,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        now_iso: str,
    ) -> UserRecord:
        try:
            await self._db.execute(
                """
                INSERT INTO users(id, name, email, password_hash, role, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?);
                """,
                (user_id, name, email, password_hash, role, now_iso, now_iso),
            )
        except sqlite3.IntegrityError as e:
            # lost a race with another registration for the same email
            raise ConflictError("User already exists") from e
        record = await self.get_by_id(user_id)
        if record is None:
            raise RuntimeError(f"user {user_id} missing right after insert")
        return record

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        row = await self._db.fetchone("SELECT * FROM users WHERE id = ?;", (user_id,))
        return self._row_to_record(row) if row else None

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        row = await self._db.fetchone("SELECT * FROM users WHERE email = ?;", (email,))
        return self._row_to_record(row) if row else None

    async def email_taken_by_other(self, email: str, user_id: str) -> bool:
        row = await self._db.fetchone(
            "SELECT 1 FROM users WHERE email = ? AND id != ?;",
            (email, user_id),
        )
        return row is not None

    async def update(
        self,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
        now_iso: str,
    ) -> Optional[UserRecord]:
        try:
            n = await self._db.execute(
                """
                UPDATE users
                SET name = ?, email = ?, password_hash = ?, updated_at = ?
                WHERE id = ?;
                """,
                (name, email, password_hash, now_iso, user_id),
            )
        except sqlite3.IntegrityError as e:
            raise ConflictError("Email already in use") from e
        if n == 0:
            return None
        return await self.get_by_id(user_id)

    async def delete(self, user_id: str) -> bool:
        n = await self._db.execute("DELETE FROM users WHERE id = ?;", (user_id,))
        return n > 0

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> UserRecord:
        user = User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=Role(row["role"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )
        return UserRecord(user=user, password_hash=row["password_hash"])
