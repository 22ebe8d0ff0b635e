from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


_DEV_TOKEN_SECRET = "fitquest-dev-secret"


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str
    token_secret: str
    token_ttl_s: int
    lock_ttl_ms: int
    log_level: str


def load_env_file(*, project_root: Path | None = None) -> None:
    """Load `.env` from the project root without overriding real env vars."""

    root = project_root or Path(__file__).resolve().parents[1]
    env_path = root / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


def get_settings() -> Settings:
    # Read on every call so tests can monkeypatch the environment.
    return Settings(
        redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        token_secret=os.environ.get("FITQUEST_TOKEN_SECRET", _DEV_TOKEN_SECRET),
        token_ttl_s=int(os.environ.get("FITQUEST_TOKEN_TTL_S", "7200")),
        lock_ttl_ms=int(os.environ.get("FITQUEST_LOCK_TTL_MS", "5000")),
        log_level=os.environ.get("FITQUEST_LOG_LEVEL", "INFO").upper(),
    )
