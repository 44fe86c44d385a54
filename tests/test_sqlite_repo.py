# tests/test_sqlite_repo.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from task_tracker.app.main import SAMPLE_TASK, seed_sample_task
from task_tracker.domain.task_models import LinkedFile, TaskDraft, TaskStatus
from task_tracker.infra.db.sqlite import create_schema, make_engine, make_sessionmaker, make_sqlite_url
from task_tracker.infra.db.task_repo_sqlite import SQLiteTaskRepo

from .fakes import PDF_BYTES

pytestmark = pytest.mark.anyio

CREATED = datetime(2024, 8, 16, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
async def sqlite_repo(tmp_path: Path):
    engine = make_engine(make_sqlite_url(str(tmp_path / "nested" / "tasks.db")))
    await create_schema(engine)
    yield SQLiteTaskRepo(make_sessionmaker(engine))
    await engine.dispose()


def _draft(**overrides) -> TaskDraft:
    values = dict(
        title="Study X",
        description="Read docs",
        deadline=datetime(2024, 8, 19, tzinfo=timezone.utc),
        created_on=CREATED,
    )
    values.update(overrides)
    return TaskDraft(**values)


async def test_create_get_keeps_utc_instants(sqlite_repo: SQLiteTaskRepo) -> None:
    offset = timezone(timedelta(hours=2))
    task = await sqlite_repo.create(_draft(created_on=datetime(2024, 8, 16, 11, 0, tzinfo=offset)))

    loaded = await sqlite_repo.get(task.id)
    assert loaded is not None
    assert loaded.created_on == CREATED
    assert loaded.created_on.tzinfo is not None
    assert loaded.deadline == datetime(2024, 8, 19, tzinfo=timezone.utc)
    assert loaded.status == TaskStatus.todo
    assert loaded.linked_file is None


async def test_attachment_round_trip_and_replace(sqlite_repo: SQLiteTaskRepo) -> None:
    pdf = LinkedFile(data=PDF_BYTES, content_type="application/pdf", filename="a.pdf")
    task = await sqlite_repo.create(_draft(linked_file=pdf))
    assert (await sqlite_repo.get(task.id)).linked_file == pdf

    newer = LinkedFile(data=b"%PDF-2", content_type="application/pdf", filename="b.pdf")
    await sqlite_repo.save(task.model_copy(update={"linked_file": newer}))
    assert (await sqlite_repo.get(task.id)).linked_file == newer


async def test_list_newest_first(sqlite_repo: SQLiteTaskRepo) -> None:
    old = await sqlite_repo.create(_draft(title="old"))
    new = await sqlite_repo.create(_draft(title="new", created_on=CREATED + timedelta(hours=1)))
    assert [t.id for t in await sqlite_repo.list()] == [new.id, old.id]


async def test_save_and_delete_missing_rows(sqlite_repo: SQLiteTaskRepo) -> None:
    task = await sqlite_repo.create(_draft())
    assert await sqlite_repo.delete(task.id) is True
    assert await sqlite_repo.delete(task.id) is False
    assert await sqlite_repo.get(task.id) is None
    assert await sqlite_repo.save(task) is None


async def test_save_bumps_updated_at_only(sqlite_repo: SQLiteTaskRepo) -> None:
    task = await sqlite_repo.create(_draft())
    saved = await sqlite_repo.save(task.model_copy(update={"status": TaskStatus.done}))
    assert saved.status == TaskStatus.done
    assert saved.created_on == task.created_on
    assert saved.updated_at >= task.updated_at


async def test_seed_runs_once(sqlite_repo: SQLiteTaskRepo) -> None:
    assert await seed_sample_task(sqlite_repo) is True
    assert await seed_sample_task(sqlite_repo) is False

    tasks = await sqlite_repo.list()
    assert len(tasks) == 1
    assert tasks[0].title == SAMPLE_TASK.title
    assert tasks[0].deadline == SAMPLE_TASK.deadline
