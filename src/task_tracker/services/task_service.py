import logging
from typing import Callable, List, Optional, Protocol
from datetime import datetime

from task_tracker.domain.errors import MissingRequiredField, TaskNotFound
from task_tracker.domain.task_models import (
    FileDownload,
    LinkedFile,
    Task,
    TaskDraft,
    TaskFields,
    TaskStatus,
    TaskView,
    parse_deadline,
    utc_now,
)
from task_tracker.domain.validation import ensure_valid

logger = logging.getLogger("tracker.tasks")


class TaskRepo(Protocol):
    async def create(self, draft: TaskDraft) -> Task: ...

    async def get(self, task_id: str) -> Optional[Task]: ...

    async def list(self) -> List[Task]: ...

    async def save(self, task: Task) -> Optional[Task]: ...

    async def delete(self, task_id: str) -> bool: ...


def _given(value: Optional[str]) -> bool:
    return bool(value and value.strip())


class TaskService:
    """
    Validation, lifecycle rules and response shaping for tasks.

    Every call re-reads from the repo. Errors are raised as `TaskError`
    subclasses and left for the HTTP layer to translate.
    """

    def __init__(self, repo: TaskRepo, clock: Callable[[], datetime] = utc_now):
        self.repo = repo
        self.clock = clock

    async def _require(self, task_id: str) -> Task:
        task = await self.repo.get(task_id)
        if task is None:
            raise TaskNotFound()
        return task

    async def _save(self, task: Task) -> Task:
        # the row can vanish between read and write
        saved = await self.repo.save(task)
        if saved is None:
            raise TaskNotFound()
        return saved

    async def list_tasks(self) -> List[TaskView]:
        tasks = await self.repo.list()
        return [TaskView.from_task(t) for t in tasks]

    async def get_task(self, task_id: str) -> TaskView:
        return TaskView.from_task(await self._require(task_id))

    async def get_task_file(self, task_id: str) -> FileDownload:
        task = await self._require(task_id)
        if not task.linked_file or not task.linked_file.data:
            raise TaskNotFound("No file attached to this task")
        return FileDownload(
            data=task.linked_file.data,
            content_type=task.linked_file.content_type or "application/pdf",
            filename=task.linked_file.filename or "file.pdf",
        )

    async def create_task(self, fields: TaskFields, file: Optional[LinkedFile] = None) -> TaskView:
        if not (_given(fields.title) and _given(fields.description) and _given(fields.deadline)):
            raise MissingRequiredField()

        deadline = parse_deadline(fields.deadline)
        draft = TaskDraft(
            title=fields.title.strip(),
            description=fields.description.strip(),
            deadline=deadline,
            status=TaskStatus.todo,
            created_on=self.clock(),
            linked_file=file,
        )
        ensure_valid(draft, unreadable={"deadline"} if deadline is None else frozenset())

        task = await self.repo.create(draft)
        logger.info(
            "task.create",
            extra={"category": "tasks", "event": "task.create", "task_id": task.id,
                   "title": task.title, "has_file": file is not None},
        )
        return TaskView.from_task(task)

    async def update_task(
        self, task_id: str, fields: TaskFields, file: Optional[LinkedFile] = None
    ) -> TaskView:
        task = await self._require(task_id)
        changes = {}
        unreadable = set()

        if fields.title:
            changes["title"] = fields.title.strip()
        if fields.description:
            changes["description"] = fields.description.strip()
        if fields.deadline:
            deadline = parse_deadline(fields.deadline)
            if deadline is None:
                unreadable.add("deadline")
            else:
                changes["deadline"] = deadline
        if fields.status and fields.status in (TaskStatus.todo.value, TaskStatus.done.value):
            changes["status"] = TaskStatus(fields.status)
        if file is not None:
            changes["linked_file"] = file

        updated = task.model_copy(update=changes)
        ensure_valid(updated, unreadable)

        saved = await self._save(updated)
        logger.info(
            "task.update",
            extra={"category": "tasks", "event": "task.update", "task_id": task_id,
                   "fields": sorted(changes)},
        )
        return TaskView.from_task(saved)

    async def mark_done(self, task_id: str) -> TaskView:
        task = await self._require(task_id)
        saved = await self._save(task.model_copy(update={"status": TaskStatus.done}))
        logger.info(
            "task.done",
            extra={"category": "tasks", "event": "task.done", "task_id": task_id},
        )
        return TaskView.from_task(saved)

    async def delete_task(self, task_id: str) -> str:
        if not await self.repo.delete(task_id):
            raise TaskNotFound()
        logger.info(
            "task.delete",
            extra={"category": "tasks", "event": "task.delete", "task_id": task_id},
        )
        return "Task deleted successfully"
