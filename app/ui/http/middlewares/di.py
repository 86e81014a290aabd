from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from fastapi import Request

from app.config import Settings
from app.domain.auth.tokens import TokenService
from app.domain.common.ports import Clock, IdGenerator
from app.domain.tasks.service import TaskManager
from app.domain.tasks.stats import StatsAggregator
from app.domain.users.service import CredentialManager
from app.infra.db.connection import Database
from app.infra.db.repo.tasks_sqlite import TaskSqliteRepo
from app.infra.db.repo.users_sqlite import UserSqliteRepo
from app.infra.security.bcrypt_hasher import BcryptPasswordHasher
from app.ui.http.middlewares.auth import AccessGuard


@dataclass(frozen=True)
class Services:
    """Everything a route may ask for. Built once at startup, read-only afterwards."""

    db: Database
    clock: Clock
    tokens: TokenService
    guard: AccessGuard
    credentials: CredentialManager
    tasks: TaskManager
    stats: StatsAggregator


def build_services(settings: Settings, db: Database, clock: Clock, ids: IdGenerator) -> Services:
    users_repo = UserSqliteRepo(db)
    tasks_repo = TaskSqliteRepo(db)
    tokens = TokenService(settings.jwt_secret, clock, ttl=timedelta(days=settings.jwt_expire_days))
    hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)

    return Services(
        db=db,
        clock=clock,
        tokens=tokens,
        guard=AccessGuard(tokens),
        credentials=CredentialManager(
            users=users_repo,
            tasks=tasks_repo,
            hasher=hasher,
            tokens=tokens,
            clock=clock,
            ids=ids,
        ),
        tasks=TaskManager(repo=tasks_repo, clock=clock, ids=ids),
        stats=StatsAggregator(repo=tasks_repo, clock=clock),
    )


# FastAPI dependencies
def get_services(request: Request) -> Services:
    return request.app.state.services


def get_credentials(request: Request) -> CredentialManager:
    return get_services(request).credentials


def get_task_manager(request: Request) -> TaskManager:
    return get_services(request).tasks


def get_stats(request: Request) -> StatsAggregator:
    return get_services(request).stats
