from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from enum import Enum
from datetime import datetime, timezone
from typing import Optional
import uuid


class TaskStatus(str, Enum):
    todo = "TODO"
    done = "DONE"


class DisplayStatus(str, Enum):
    in_progress = "In Progress"
    done = "Done"
    achieved = "Achieved"
    failed = "Failed"


class LinkedFile(BaseModel):
    data: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None


class TaskFields(BaseModel):
    """Raw caller input for create/update. Everything arrives as optional text."""
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[str] = None
    status: Optional[str] = None


class TaskDraft(BaseModel):
    title: str
    description: str
    status: TaskStatus = TaskStatus.todo
    # None only while invalid; validation rejects it before it reaches the store
    deadline: Optional[datetime] = None
    created_on: datetime
    linked_file: Optional[LinkedFile] = None


class Task(TaskDraft):
    id: str
    updated_at: datetime


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileInfo(_CamelModel):
    filename: Optional[str] = None
    content_type: Optional[str] = None


class TaskView(_CamelModel):
    """Outbound shape of a task: attachment bytes never leave the service."""
    id: str
    title: str
    description: str
    status: TaskStatus
    deadline: datetime
    created_on: datetime
    updated_at: datetime
    has_file: bool = False
    linked_file: Optional[FileInfo] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskView":
        has_file = bool(task.linked_file and task.linked_file.data)
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            deadline=task.deadline,
            created_on=task.created_on,
            updated_at=task.updated_at,
            has_file=has_file,
            linked_file=FileInfo(
                filename=task.linked_file.filename,
                content_type=task.linked_file.content_type,
            ) if has_file else None,
        )


class FileDownload(BaseModel):
    data: bytes
    content_type: str = "application/pdf"
    filename: str = "file.pdf"


def new_task_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_deadline(raw: str) -> Optional[datetime]:
    """
    Accepts an ISO date ("2024-08-19", UTC midnight) or an ISO date-time.
    Returns None when the value cannot be read as a date, including offsets
    that push the instant outside the representable range.
    """
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        return None


def derive_display_status(status: TaskStatus, deadline: datetime, now: datetime) -> DisplayStatus:
    # Achieved needs now strictly past the deadline, Failed already at it.
    # The browser copy in static/app.js must stay identical.
    if status == TaskStatus.done and now > deadline:
        return DisplayStatus.achieved
    if status == TaskStatus.done:
        return DisplayStatus.done
    if now >= deadline:
        return DisplayStatus.failed
    return DisplayStatus.in_progress


def is_overdue(status: TaskStatus, deadline: datetime, now: datetime) -> bool:
    return status != TaskStatus.done and deadline < now
