from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    """Public view of an account. Never carries the password hash."""

    id: str
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserRecord:
    user: User
    password_hash: str


@dataclass(frozen=True)
class RegisterRequest:
    name: Optional[str]
    email: Optional[str]
    password: Optional[str]


@dataclass(frozen=True)
class LoginRequest:
    email: Optional[str]
    password: Optional[str]


@dataclass(frozen=True)
class ProfilePatch:
    name: Optional[str] = None
    email: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.name, self.email, self.current_password, self.new_password))


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str
