from __future__ import annotations

import logging
from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_tracker.domain.errors import (
    FileTooLarge,
    InvalidFile,
    MissingRequiredField,
    TaskError,
    TaskNotFound,
    TaskValidationError,
)

logger = logging.getLogger("tracker.errors")

# The only place domain failures are mapped to HTTP status codes.
ERROR_STATUS: Dict[Type[TaskError], int] = {
    TaskNotFound: 404,
    TaskValidationError: 400,
    MissingRequiredField: 400,
    InvalidFile: 400,
    FileTooLarge: 400,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def status_for(exc: TaskError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


async def task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(
        "task.rejected",
        extra={
            "category": "tasks",
            "event": "task.rejected",
            "request_id": _request_id(request),
            "error": type(exc).__name__,
            "status_code": status_code,
            "detail": exc.message,
        },
    )
    return _failure(status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return _failure(400, ", ".join(messages) or "Invalid request")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _failure(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # cause stays in the logs; callers only see the generic message
    logger.error(
        "request.unhandled",
        exc_info=exc,
        extra={
            "category": "http",
            "event": "request.unhandled",
            "request_id": _request_id(request),
            "path": request.url.path,
            "error": type(exc).__name__,
        },
    )
    return _failure(500, INTERNAL_ERROR_MESSAGE)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
