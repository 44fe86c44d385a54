from __future__ import annotations
from datetime import datetime
from typing import Callable, Dict, List, Optional

from task_tracker.domain.task_models import Task, TaskDraft, new_task_id, utc_now

class InMemoryTaskRepo:
    """
    Dict-backed store with the same contract as SQLiteTaskRepo.
    Used by the service tests; nothing is persisted.
    """
    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._tasks: Dict[str, Task] = {}
        self.clock = clock

    async def create(self, draft: TaskDraft) -> Task:
        task = Task(id=new_task_id(), updated_at=self.clock(), **draft.model_dump())
        self._tasks[task.id] = task
        return task

    async def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def list(self) -> List[Task]:
        # newest first
        return sorted(self._tasks.values(), key=lambda t: t.created_on, reverse=True)

    async def save(self, task: Task) -> Optional[Task]:
        if task.id not in self._tasks:
            return None
        stored = task.model_copy(update={"updated_at": self.clock()})
        self._tasks[task.id] = stored
        return stored

    async def delete(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None

    async def count(self) -> int:
        return len(self._tasks)
