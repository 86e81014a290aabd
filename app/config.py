from dataclasses import dataclass
import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://localhost:5173")


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_expire_days: int
    bcrypt_rounds: int
    db_path: Path
    host: str
    port: int
    cors_origins: Tuple[str, ...]
    log_level: str


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def load_settings() -> Settings:
    jwt_secret = os.getenv("JWT_SECRET", "").strip()
    jwt_expire_days = _env_int("JWT_EXPIRE_DAYS", 7)
    bcrypt_rounds = _env_int("BCRYPT_SALT_ROUNDS", 10)
    db_raw = os.getenv("DB_PATH", "data/tasktracker.db").strip()
    host = os.getenv("HOST", "0.0.0.0").strip()
    port = _env_int("PORT", 5000)
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    if not jwt_secret:
        raise RuntimeError("JWT_SECRET missing in .env")
    if jwt_expire_days <= 0:
        raise RuntimeError("JWT_EXPIRE_DAYS must be positive")
    if not 4 <= bcrypt_rounds <= 31:
        raise RuntimeError("BCRYPT_SALT_ROUNDS must be between 4 and 31")

    # db_path may be relative; the entrypoint resolves it
    return Settings(
        jwt_secret=jwt_secret,
        jwt_expire_days=jwt_expire_days,
        bcrypt_rounds=bcrypt_rounds,
        db_path=Path(db_raw),
        host=host,
        port=port,
        cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        log_level=log_level,
    )
