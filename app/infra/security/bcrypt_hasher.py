from __future__ import annotations

import asyncio

import bcrypt

from app.domain.users.ports import PasswordHasher

MIN_ROUNDS = 4
MAX_ROUNDS = 31


class BcryptPasswordHasher(PasswordHasher):
    """
    bcrypt with a per-hash random salt. The salt and cost are embedded in the
    stored hash, so verification re-hashes under the same salt and compares in
    constant time (bcrypt.checkpw).

    Hashing is CPU bound; it runs in a worker thread to keep the event loop free.
    """

    def __init__(self, rounds: int = 10) -> None:
        if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
            raise ValueError(f"bcrypt rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}")
        self._rounds = rounds

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self._hash_sync, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self._verify_sync, password, password_hash)

    def _hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")

    @staticmethod
    def _verify_sync(password: str, password_hash: str) -> bool:
        raw = password.encode("utf-8")
        if len(raw) > 72:
            # newer bcrypt releases reject long input instead of truncating
            return False
        try:
            return bcrypt.checkpw(raw, password_hash.encode("ascii"))
        except ValueError:
            return False
