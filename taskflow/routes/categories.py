"""Category routes."""

import logging
from typing import List

from fastapi import APIRouter, Depends

from ..deps import get_task_store
from ..schemas import CategoryResponse
from ..services.task_store import TaskStore
from .tasks import require_ready, to_category_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryResponse])
async def list_categories(task_store: TaskStore = Depends(get_task_store)) -> List[CategoryResponse]:
    """List categories with their unfiltered task counts."""
    require_ready(task_store)
    return [to_category_response(c, task_store) for c in task_store.categories]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    task_store: TaskStore = Depends(get_task_store)
) -> CategoryResponse:
    """Resolve a category id; unknown ids resolve to Uncategorized instead of 404."""
    require_ready(task_store)
    category = task_store.resolve_category(category_id)
    logger.debug(f"Resolved category {category_id} -> {category.name}")
    return to_category_response(category, task_store)
