"""FastAPI application factory for the lead distribution API."""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.errors import LeadSplitError
from ..storage import AgentDirectory, Database, ListStore
from .config import Settings
from .routes.agents import router as agents_router
from .routes.health import router as health_router
from .routes.upload import router as upload_router
from .services.agents import AgentService
from .services.intake import UploadIntake
from .services.upload import UploadService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Younger staged files may still be in use by another worker.
STALE_UPLOAD_SECONDS = 60 * 60


def _clear_stale_uploads(upload_dir: Path, max_age: float = STALE_UPLOAD_SECONDS) -> int:
    """Remove staged files left behind by a crashed process."""
    if not upload_dir.is_dir():
        return 0
    cutoff = time.time() - max_age
    removed = 0
    for path in upload_dir.iterdir():
        if path.is_file() and path.stat().st_mtime < cutoff:
            path.unlink(missing_ok=True)
            removed += 1
    return removed


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: Settings = app.state.settings
    logger.info(f"Starting leadsplit API (database: {settings.db_path})")

    removed = _clear_stale_uploads(Path(settings.upload_dir))
    if removed:
        logger.warning(f"Removed {removed} stale upload(s) from {settings.upload_dir}")

    yield

    logger.info("leadsplit API shutting down")


async def lead_split_error_handler(request: Request, exc: LeadSplitError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(p) for p in err.get("loc", ())) for err in exc.errors())
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "validation_error", "detail": f"Invalid request: {fields}"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Every service is constructed here from ``settings`` and stored on
    ``app.state``; routes reach them through dependencies.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="leadsplit API",
        description="Agent administration and round-robin lead list distribution",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    db = Database(settings.db_path)
    directory = AgentDirectory(db)
    list_store = ListStore(db)

    app.state.settings = settings
    app.state.db = db
    app.state.list_store = list_store
    app.state.agent_service = AgentService(directory, bcrypt_rounds=settings.bcrypt_rounds)
    app.state.upload_service = UploadService(directory, list_store)
    app.state.upload_intake = UploadIntake(settings.upload_dir, settings.max_upload_bytes)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LeadSplitError, lead_split_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routes
    app.include_router(health_router)
    app.include_router(agents_router)
    app.include_router(upload_router)

    return app
