from __future__ import annotations
from typing import List


class TaskError(Exception):
    """Base for every failure the service raises on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TaskNotFound(TaskError):
    def __init__(self, message: str = "Task not found"):
        super().__init__(message)


class TaskValidationError(TaskError):
    def __init__(self, violations: List[str]):
        super().__init__(", ".join(violations))
        self.violations = list(violations)


class MissingRequiredField(TaskError):
    def __init__(self, message: str = "title, description and deadline are all required"):
        super().__init__(message)


class InvalidFile(TaskError):
    def __init__(self, message: str = "Only PDF files are allowed."):
        super().__init__(message)


class FileTooLarge(TaskError):
    def __init__(self, message: str = "File too large – max 10 MB allowed."):
        super().__init__(message)
