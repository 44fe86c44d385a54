# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from task_tracker.app.main import create_app
from task_tracker.config import Settings
from task_tracker.infra.db.task_repo_memory import InMemoryTaskRepo
from task_tracker.services.task_service import TaskService

from .fakes import FakeClock


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 8, 16, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def repo(clock: FakeClock) -> InMemoryTaskRepo:
    return InMemoryTaskRepo(clock=clock)


@pytest.fixture()
def service(repo: InMemoryTaskRepo, clock: FakeClock) -> TaskService:
    return TaskService(repo, clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        db_path=str(tmp_path / "tasks.db"),
        log_level="DEBUG",
        log_dir=str(tmp_path / "logs"),
        seed_sample_task=False,
    )


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c
