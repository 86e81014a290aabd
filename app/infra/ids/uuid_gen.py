from __future__ import annotations

import uuid

from app.domain.common.ports import IdGenerator


class UuidGenerator(IdGenerator):
    """Random UUID4 ids for users and tasks."""

    def new_id(self) -> str:
        return str(uuid.uuid4())
