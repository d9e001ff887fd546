"""Store lifecycle routes."""

import logging

from fastapi import APIRouter, Depends

from ..deps import get_task_store
from ..schemas import StoreStatusResponse
from ..services.task_store import TaskStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/store", tags=["store"])


@router.get("/status", response_model=StoreStatusResponse)
async def get_store_status(task_store: TaskStore = Depends(get_task_store)) -> StoreStatusResponse:
    return StoreStatusResponse(status=task_store.status.value, error=task_store.error)


@router.post("/reload", response_model=StoreStatusResponse)
async def reload_store(task_store: TaskStore = Depends(get_task_store)) -> StoreStatusResponse:
    """Reload tasks and categories from persistence, e.g. after a failed startup load."""
    logger.info("Reloading task store")
    result = await task_store.load()
    return StoreStatusResponse(status=result.value, error=task_store.error)
