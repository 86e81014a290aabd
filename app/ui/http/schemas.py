"""
Request bodies.

These only parse shape (types, JSON names). Presence, lengths and enum
membership are checked by the domain so that errors come back as one field map.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.tasks.models import UNSET, TaskInput, TaskPatch
from app.domain.users.models import LoginRequest, ProfilePatch, RegisterRequest


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RegisterBody(_Body):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    def to_request(self) -> RegisterRequest:
        return RegisterRequest(name=self.name, email=self.email, password=self.password)


class LoginBody(_Body):
    email: Optional[str] = None
    password: Optional[str] = None

    def to_request(self) -> LoginRequest:
        return LoginRequest(email=self.email, password=self.password)


class ProfileBody(_Body):
    name: Optional[str] = None
    email: Optional[str] = None
    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")

    def to_patch(self) -> ProfilePatch:
        return ProfilePatch(
            name=self.name,
            email=self.email,
            current_password=self.current_password,
            new_password=self.new_password,
        )


class _TaskFields(_Body):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    tags: Optional[List[str]] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, v: Any) -> Any:
        # forms send "" for "no due date"
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TaskCreateBody(_TaskFields):
    def to_input(self) -> TaskInput:
        return TaskInput(
            title=self.title,
            description=self.description,
            status=self.status,
            priority=self.priority,
            due_date=self.due_date,
            tags=self.tags,
        )


class TaskUpdateBody(_TaskFields):
    def to_patch(self) -> TaskPatch:
        sent = self.model_fields_set
        return TaskPatch(
            **{name: getattr(self, name) if name in sent else UNSET for name in TaskPatch.__dataclass_fields__}
        )
