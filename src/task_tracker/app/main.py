from pathlib import Path
from datetime import datetime, timezone
from typing import Callable, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from starlette.formparsers import MultiPartParser
from starlette.templating import Jinja2Templates

from task_tracker.app.errors import install_error_handlers
from task_tracker.app.middleware.access_log import AccessLogMiddleware
from task_tracker.app.middleware.body_limit import MAX_REQUEST_BYTES, BodyLimitMiddleware
from task_tracker.app.routes import tasks
from task_tracker.config import Settings
from task_tracker.domain.task_models import TaskDraft, TaskStatus, utc_now
from task_tracker.infra.db.sqlite import create_schema, make_sqlite_url, make_engine, make_sessionmaker
from task_tracker.infra.db.task_repo_sqlite import SQLiteTaskRepo
from task_tracker.services.task_service import TaskService
from task_tracker.observability.logging import setup_logging

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
logger = logging.getLogger("tracker.system")

SAMPLE_TASK = TaskDraft(
    title="Study TypeScript",
    description="Read the documentation and make notes.",
    status=TaskStatus.todo,
    created_on=datetime(2024, 8, 16, tzinfo=timezone.utc),
    deadline=datetime(2024, 8, 19, tzinfo=timezone.utc),
)


async def seed_sample_task(repo: SQLiteTaskRepo) -> bool:
    """Insert the sample task on first run only."""
    if await repo.count() > 0:
        return False
    await repo.create(SAMPLE_TASK)
    return True


def create_app(
    settings: Optional[Settings] = None, clock: Callable[[], datetime] = utc_now
) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings)
    logger.info("system.start", extra={"category": "system", "event": "system.start"})

    app = FastAPI(title="Task Tracker")
    # innermost first: the size check runs inside the access log
    app.add_middleware(BodyLimitMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    # Static files (CSS/JS)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    # --- SQLite wiring ---
    engine = make_engine(make_sqlite_url(settings.db_path))
    repo = SQLiteTaskRepo(make_sessionmaker(engine), clock=clock)
    app.state.task_service = TaskService(repo, clock=clock)

    # keep every accepted upload in memory; BodyLimitMiddleware bounds the size
    MultiPartParser.spool_max_size = MAX_REQUEST_BYTES

    app.include_router(tasks.router)

    @app.on_event("startup")
    async def _startup():
        await create_schema(engine)
        logger.info(
            "db.ready",
            extra={"category": "system", "event": "db.ready", "db_path": settings.db_path},
        )
        if settings.seed_sample_task and await seed_sample_task(repo):
            logger.info("db.seeded", extra={"category": "system", "event": "db.seeded"})

    @app.on_event("shutdown")
    async def _shutdown():
        await engine.dispose()
        logger.info("system.stop", extra={"category": "system", "event": "system.stop"})

    # Pages
    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        return templates.TemplateResponse(request, "index.html", {"max_file_mb": 10})

    @app.get("/health")
    def health():
        return {"status": "OK", "message": "Task Manager API is running"}

    return app
