from __future__ import annotations

import contextlib
import logging
import time
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings
from app.domain.common.ports import Clock, IdGenerator
from app.domain.common.time import to_iso
from app.infra.clock.system_clock import SystemClock
from app.infra.db.connection import Database
from app.infra.db.schema_version import apply_migrations
from app.infra.ids.uuid_gen import UuidGenerator
from app.ui.http.handlers.auth import router as auth_router
from app.ui.http.handlers.health import router as health_router
from app.ui.http.handlers.tasks import router as tasks_router
from app.ui.http.handlers.users import router as users_router
from app.ui.http.middlewares.di import build_services
from app.ui.http.responses import register_exception_handlers

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def resolve_db_path(db_path: Path) -> Path:
    if not db_path.is_absolute():
        repo_root = Path(__file__).resolve().parents[3]  # .../app/ui/http/main.py -> repo root
        db_path = repo_root / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path


def create_app(
    settings: Settings,
    clock: Optional[Clock] = None,
    ids: Optional[IdGenerator] = None,
) -> FastAPI:
    clock = clock or SystemClock()
    ids = ids or UuidGenerator()
    db = Database(str(resolve_db_path(settings.db_path)))

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("DB_PATH: %s", db.path)
        await apply_migrations(db, now_iso=to_iso(clock.now()))
        yield
        logger.info("API shutdown complete")

    app = FastAPI(title="Task Tracker API", version="1.0.0", lifespan=lifespan)

    # --- services ---
    app.state.services = build_services(settings, db, clock, ids)

    # --- middlewares ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept"],
        max_age=86400,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    register_exception_handlers(app)

    # --- routers ---
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(tasks_router, prefix=API_PREFIX)

    return app
