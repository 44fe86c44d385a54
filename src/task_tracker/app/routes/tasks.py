from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import Response

from task_tracker.app.schemas import (
    MessageEnvelope,
    TaskEnvelope,
    TaskListEnvelope,
    TaskMessageEnvelope,
)
from task_tracker.domain.task_models import LinkedFile, TaskFields
from task_tracker.services.attachments import MAX_FILE_BYTES, accept_attachment
from task_tracker.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_service(request: Request) -> TaskService:
    # wired in main.create_app
    return request.app.state.task_service


async def read_upload(upload: Optional[UploadFile]) -> Optional[LinkedFile]:
    """Buffer an uploaded PDF in memory, rejecting anything else before the service runs."""
    if upload is None or not upload.filename:
        return None
    try:
        # one byte past the ceiling is enough to know it is too big
        data = await upload.read(MAX_FILE_BYTES + 1)
    finally:
        await upload.close()
    return accept_attachment(upload.content_type, upload.filename, data)


def content_disposition(filename: str) -> str:
    plain = filename.replace('"', "").replace("\r", "").replace("\n", "")
    if plain.isascii():
        return f'attachment; filename="{plain}"'
    fallback = plain.encode("ascii", "ignore").decode() or "file.pdf"
    return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quote(plain)}"


@router.get("", response_model=TaskListEnvelope)
async def list_tasks(svc: TaskService = Depends(get_service)):
    return TaskListEnvelope(data=await svc.list_tasks())


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_task(task_id: str, svc: TaskService = Depends(get_service)):
    return TaskEnvelope(data=await svc.get_task(task_id))


@router.get("/{task_id}/file")
async def download_file(task_id: str, svc: TaskService = Depends(get_service)):
    f = await svc.get_task_file(task_id)
    return Response(
        content=f.data,
        media_type=f.content_type,
        headers={"Content-Disposition": content_disposition(f.filename)},
    )


@router.post("", response_model=TaskMessageEnvelope, status_code=201)
async def create_task(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    deadline: Optional[str] = Form(None),
    linkedFile: Optional[UploadFile] = File(None),
    svc: TaskService = Depends(get_service),
):
    attachment = await read_upload(linkedFile)
    fields = TaskFields(title=title, description=description, deadline=deadline)
    task = await svc.create_task(fields, attachment)
    return TaskMessageEnvelope(data=task, message="Task created successfully")


@router.put("/{task_id}", response_model=TaskMessageEnvelope)
async def update_task(
    task_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    deadline: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    linkedFile: Optional[UploadFile] = File(None),
    svc: TaskService = Depends(get_service),
):
    attachment = await read_upload(linkedFile)
    fields = TaskFields(title=title, description=description, deadline=deadline, status=status)
    task = await svc.update_task(task_id, fields, attachment)
    return TaskMessageEnvelope(data=task, message="Task updated successfully")


@router.patch("/{task_id}/status", response_model=TaskMessageEnvelope)
async def mark_done(task_id: str, svc: TaskService = Depends(get_service)):
    task = await svc.mark_done(task_id)
    return TaskMessageEnvelope(data=task, message="Task marked as done")


@router.delete("/{task_id}", response_model=MessageEnvelope)
async def delete_task(task_id: str, svc: TaskService = Depends(get_service)):
    message = await svc.delete_task(task_id)
    return MessageEnvelope(success=True, message=message)
