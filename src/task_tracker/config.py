"""Settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    db_path: str = "./data/tasks.db"
    log_level: str = "INFO"
    log_dir: str = "./logs"
    log_file: str = "task_tracker.jsonl"
    log_max_bytes: int = 10_000_000
    log_backups: int = 10
    frontend_url: str = "http://localhost:5173"
    seed_sample_task: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_path=_env("DB_PATH", cls.db_path),
            log_level=_env("LOG_LEVEL", cls.log_level).upper(),
            log_dir=_env("LOG_DIR", cls.log_dir),
            log_file=_env("LOG_FILE", cls.log_file),
            log_max_bytes=_env_int("LOG_MAX_BYTES", cls.log_max_bytes),
            log_backups=_env_int("LOG_BACKUPS", cls.log_backups),
            frontend_url=_env("FRONTEND_URL", cls.frontend_url),
            seed_sample_task=_env_bool("SEED_SAMPLE_TASK", cls.seed_sample_task),
        )
