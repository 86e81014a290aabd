# tests/conftest.py

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.domain.auth.tokens import TokenService
from app.domain.tasks.service import TaskManager
from app.domain.tasks.stats import StatsAggregator
from app.domain.users.service import CredentialManager
from app.ui.http.main import create_app

from .fakes import FixedClock, InMemoryTaskRepo, InMemoryUserRepo, PlainHasher, SequentialIds

SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def user_repo() -> InMemoryUserRepo:
    return InMemoryUserRepo()


@pytest.fixture()
def task_repo() -> InMemoryTaskRepo:
    return InMemoryTaskRepo()


@pytest.fixture()
def tokens(clock: FixedClock) -> TokenService:
    return TokenService(SECRET, clock, ttl=timedelta(days=7))


@pytest.fixture()
def credentials(
    user_repo: InMemoryUserRepo,
    task_repo: InMemoryTaskRepo,
    tokens: TokenService,
    clock: FixedClock,
) -> CredentialManager:
    return CredentialManager(
        users=user_repo,
        tasks=task_repo,
        hasher=PlainHasher(),
        tokens=tokens,
        clock=clock,
        ids=SequentialIds("user"),
    )


@pytest.fixture()
def task_manager(task_repo: InMemoryTaskRepo, clock: FixedClock) -> TaskManager:
    return TaskManager(repo=task_repo, clock=clock, ids=SequentialIds("task"))


@pytest.fixture()
def stats(task_repo: InMemoryTaskRepo, clock: FixedClock) -> StatsAggregator:
    return StatsAggregator(repo=task_repo, clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Real settings with a throwaway database and the cheapest bcrypt cost."""
    return Settings(
        jwt_secret=SECRET,
        jwt_expire_days=7,
        bcrypt_rounds=4,
        db_path=tmp_path / "api.sqlite3",
        host="127.0.0.1",
        port=0,
        cors_origins=("http://localhost:3000",),
        log_level="DEBUG",
    )


@pytest.fixture()
def client(settings: Settings):
    # context manager runs the lifespan, which applies migrations
    with TestClient(create_app(settings)) as c:
        yield c
