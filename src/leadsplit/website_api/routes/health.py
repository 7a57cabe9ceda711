"""Health check routes."""

from fastapi import APIRouter, Depends

from ... import __version__
from ...storage import Database
from ..dependencies import get_database

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "healthy", "service": "leadsplit-api", "version": __version__}


@router.get("/ready")
def ready(db: Database = Depends(get_database)):
    """Readiness check - verifies database is accessible."""
    try:
        db.ping()
        return {"status": "ready"}
    except Exception as e:
        return {"status": "not_ready", "detail": str(e)}
