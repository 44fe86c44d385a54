import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from task_tracker.domain.errors import FileTooLarge
from task_tracker.services.attachments import MAX_FILE_BYTES

logger = logging.getLogger("tracker.access")

# room for the text fields and multipart boundaries around one PDF
FORM_OVERHEAD_BYTES = 64 * 1024
MAX_REQUEST_BYTES = MAX_FILE_BYTES + FORM_OVERHEAD_BYTES


class BodyLimitMiddleware(BaseHTTPMiddleware):
    """
    Refuses a request from its Content-Length alone, before any form parsing,
    so an oversized upload is never buffered or spooled.
    """

    def __init__(self, app, max_bytes: int = MAX_REQUEST_BYTES):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_bytes:
            err = FileTooLarge()
            logger.info(
                "request.too_large",
                extra={
                    "category": "http",
                    "event": "request.too_large",
                    "request_id": getattr(request.state, "request_id", None),
                    "path": request.url.path,
                    "content_length": int(declared),
                    "max_bytes": self.max_bytes,
                },
            )
            return JSONResponse(status_code=400, content={"success": False, "message": err.message})
        return await call_next(request)
