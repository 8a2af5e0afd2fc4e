import uuid
import logging
import asyncio
from fastapi import APIRouter, BackgroundTasks, Depends

from core.dependencies import get_lock
from geotag.cluster.schema import OrganizeRequest, OrganizeTaskResponse
from geotag.cluster.services.callback_sender import CallbackSender
from geotag.cluster.services.organizing import OrganizeService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_organize_service() -> OrganizeService:
    return OrganizeService(CallbackSender())


@router.post("", response_model=OrganizeTaskResponse, status_code=202)
async def submit_organize_task(
    req: OrganizeRequest,
    background_tasks: BackgroundTasks,
    service: OrganizeService = Depends(get_organize_service),
    lock: asyncio.Lock = Depends(get_lock),
):
    """
    Submit an asynchronous geotag-and-cluster task for a photo directory.
    """
    task_id = str(uuid.uuid4())
    logger.info(f"[Task {task_id}] Accepted. ReqID: {req.request_id}, Webhook: {req.webhook_url}")

    background_tasks.add_task(
        service.process_task,
        task_id=task_id,
        req=req,
        lock=lock
    )

    return OrganizeTaskResponse(
        task_id=task_id,
        request_id=req.request_id,
        status="processing",
        message="Organize task started in background."
    )
