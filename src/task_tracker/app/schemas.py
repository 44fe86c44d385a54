from __future__ import annotations
from typing import List

from pydantic import BaseModel

from task_tracker.domain.task_models import TaskView


class TaskListEnvelope(BaseModel):
    success: bool = True
    data: List[TaskView]


class TaskEnvelope(BaseModel):
    success: bool = True
    data: TaskView


class TaskMessageEnvelope(TaskEnvelope):
    message: str


class MessageEnvelope(BaseModel):
    success: bool
    message: str
