from __future__ import annotations
from datetime import datetime
from typing import Callable, Optional, List

from sqlalchemy import String, Text, DateTime, LargeBinary, func, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from task_tracker.domain.task_models import (
    LinkedFile, Task, TaskDraft, TaskStatus, as_utc, new_task_id, utc_now,
)


class Base(DeclarativeBase):
    pass


class TaskRow(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_on: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    file_data: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)
    file_content_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def apply(self, task: TaskDraft) -> None:
        self.title = task.title
        self.description = task.description
        self.status = task.status.value
        self.deadline = as_utc(task.deadline)
        self.created_on = as_utc(task.created_on)
        # attachment is replaced as a whole, never merged
        f = task.linked_file
        self.file_data = f.data if f else None
        self.file_content_type = f.content_type if f else None
        self.file_name = f.filename if f else None

    def to_domain(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            status=TaskStatus(self.status),
            deadline=as_utc(self.deadline),
            created_on=as_utc(self.created_on),
            updated_at=as_utc(self.updated_at),
            linked_file=LinkedFile(
                data=self.file_data,
                content_type=self.file_content_type,
                filename=self.file_name,
            ) if self.file_data is not None else None,
        )


class SQLiteTaskRepo:
    def __init__(self, sessionmaker, clock: Callable[[], datetime] = utc_now):
        self.sessionmaker = sessionmaker
        # stamps updatedAt; share it with TaskService so both read the same time
        self.clock = clock

    async def create(self, draft: TaskDraft) -> Task:
        row = TaskRow(id=new_task_id(), updated_at=as_utc(self.clock()))
        row.apply(draft)
        async with self.sessionmaker() as session:
            session.add(row)
            await session.commit()
            return row.to_domain()

    async def get(self, task_id: str) -> Optional[Task]:
        async with self.sessionmaker() as session:
            row = await session.get(TaskRow, task_id)
            return row.to_domain() if row else None

    async def list(self) -> List[Task]:
        async with self.sessionmaker() as session:
            res = await session.execute(select(TaskRow).order_by(TaskRow.created_on.desc()))
            rows = res.scalars().all()
            return [r.to_domain() for r in rows]

    async def save(self, task: Task) -> Optional[Task]:
        async with self.sessionmaker() as session:
            row = await session.get(TaskRow, task.id)
            if row is None:
                return None
            row.apply(task)
            row.updated_at = as_utc(self.clock())
            await session.commit()
            return row.to_domain()

    async def delete(self, task_id: str) -> bool:
        async with self.sessionmaker() as session:
            row = await session.get(TaskRow, task_id)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True

    async def count(self) -> int:
        async with self.sessionmaker() as session:
            res = await session.execute(select(func.count()).select_from(TaskRow))
            return res.scalar_one()
