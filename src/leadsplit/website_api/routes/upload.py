"""Lead list upload and retrieval routes."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from ...core.errors import LeadSplitError
from ...storage import ListStore
from ..dependencies import get_list_store, get_upload_intake, get_upload_service
from ..middleware.auth import verify_secret
from ..schemas.agent import ErrorResponse
from ..schemas.upload import AgentListGroup, UploadResponse
from ..services.intake import UploadIntake
from ..services.upload import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"], dependencies=[Depends(verify_secret)])


@router.post(
    "",
    status_code=201,
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_and_distribute(
    file: Optional[UploadFile] = File(None),
    intake: UploadIntake = Depends(get_upload_intake),
    service: UploadService = Depends(get_upload_service),
):
    """Upload a .csv/.xlsx/.xls lead file and split it across five agents."""
    try:
        async with intake.receive(file) as staged:
            summary = await run_in_threadpool(service.process_file, staged.path, staged.fmt)
    except LeadSplitError:
        raise
    except Exception:
        logger.exception("Upload processing error")
        raise LeadSplitError("Server error while processing file")
    return summary.to_dict()


@router.get("/lists", response_model=List[AgentListGroup])
def get_lists(store: ListStore = Depends(get_list_store)):
    """Persisted entries grouped by the agent they were assigned to."""
    result = []
    for group in store.grouped_by_agent():
        agent = None
        if group.agent is not None:
            agent = {
                "id": group.agent.id,
                "name": group.agent.name,
                "email": group.agent.email,
                "mobile": group.agent.mobile,
            }
        result.append({"agent": agent, "items": [e.to_item_dict() for e in group.entries]})
    return result
