from __future__ import annotations
from typing import Optional

from task_tracker.domain.errors import FileTooLarge, InvalidFile
from task_tracker.domain.task_models import LinkedFile

PDF_CONTENT_TYPE = "application/pdf"
MAX_FILE_BYTES = 10 * 1024 * 1024  # 10 MiB


def accept_attachment(content_type: Optional[str], filename: Optional[str], data: bytes) -> LinkedFile:
    # type is checked before size, so an oversized text file is InvalidFile
    if content_type != PDF_CONTENT_TYPE:
        raise InvalidFile()
    if len(data) > MAX_FILE_BYTES:
        raise FileTooLarge()
    return LinkedFile(data=data, content_type=content_type, filename=filename)
