"""Filter criteria routes."""

import logging

from fastapi import APIRouter, Depends

from ..deps import get_task_store
from ..exceptions import TaskStoreError
from ..schemas import FilterResponse, FilterUpdate
from ..services.task_store import TaskStore
from .errors import store_error_to_http

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/filters", tags=["filters"])


@router.get("/", response_model=FilterResponse)
async def get_filters(task_store: TaskStore = Depends(get_task_store)) -> FilterResponse:
    """Get the current filter criteria."""
    return FilterResponse(**task_store.criteria.model_dump())


@router.put("/", response_model=FilterResponse)
async def update_filters(
    filter_data: FilterUpdate,
    task_store: TaskStore = Depends(get_task_store)
) -> FilterResponse:
    """Change the filter criteria present in the request body.

    Raises:
        HTTPException: If the priority filter is not a known priority or 'all'
    """
    fields = filter_data.model_dump(exclude_unset=True)
    logger.debug(f"Updating filters: {fields}")
    try:
        if "priority_filter" in fields:
            task_store.set_priority_filter(fields["priority_filter"])
        if "selected_category" in fields:
            task_store.set_selected_category(fields["selected_category"])
        if "search_query" in fields:
            task_store.set_search_query(fields["search_query"])
    except TaskStoreError as e:
        raise store_error_to_http(e)

    return FilterResponse(**task_store.criteria.model_dump())
