"""Task management routes."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..deps import get_task_store
from ..exceptions import StoreNotReady, TaskStoreError
from ..models.category import Category
from ..models.task import Task
from ..schemas import (
    CategoryResponse,
    FilterResponse,
    QuickAddRequest,
    StatsResponse,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from ..services import views
from ..services.task_store import StoreStatus, TaskStore
from .errors import store_error_to_http

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def to_category_response(category: Category, task_store: TaskStore) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        color=category.color,
        icon=category.icon,
        task_count=task_store.category_task_count(category.id) if category.id is not None else 0,
    )


def to_task_response(task: Task, task_store: TaskStore, today: date) -> TaskResponse:
    """Render a task together with its resolved category and due-date label."""
    category = task_store.resolve_category(task.category_id)
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        category_id=task.category_id,
        category=to_category_response(category, task_store),
        priority=task.priority,
        due_date=task.due_date,
        due_label=views.due_date_label(task, today),
        is_overdue=views.is_overdue(task, today),
        completed=task.completed,
        completed_at=task.completed_at,
        created_at=task.created_at,
    )


def require_ready(task_store: TaskStore) -> None:
    """Reject reads while the store holds no loaded state."""
    if task_store.status != StoreStatus.READY:
        raise store_error_to_http(StoreNotReady(task_store.status.value, task_store.error))


@router.get("/", response_model=TaskListResponse)
async def list_tasks(task_store: TaskStore = Depends(get_task_store)) -> TaskListResponse:
    """List tasks passing the current filter, split into active and completed.

    Args:
        task_store: Task store instance

    Returns:
        Filtered task view with completion metrics
    """
    require_ready(task_store)
    view = task_store.view()
    today = date.today()
    logger.debug(f"Listing tasks with filters: {view.criteria}")

    return TaskListResponse(
        filters=FilterResponse(**view.criteria.model_dump()),
        active=[to_task_response(t, task_store, today) for t in view.active],
        completed=[to_task_response(t, task_store, today) for t in view.completed],
        filtered_count=len(view.filtered),
        total=view.total_count,
        completion_percentage=view.completion_percentage,
    )


@router.get("/stats", response_model=StatsResponse)
async def get_task_statistics(task_store: TaskStore = Depends(get_task_store)) -> StatsResponse:
    """Get completion metrics over all tasks, ignoring filters."""
    require_ready(task_store)
    view = task_store.view()
    completed = sum(1 for t in task_store.tasks if t.completed)

    return StatsResponse(
        total_tasks=view.total_count,
        completed_tasks=completed,
        active_tasks=view.total_count - completed,
        completion_percentage=view.completion_percentage,
        category_counts=view.category_counts,
    )


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    task_store: TaskStore = Depends(get_task_store)
) -> TaskResponse:
    """Create a new task.

    Args:
        task_data: Task creation data
        task_store: Task store instance

    Returns:
        Created task response

    Raises:
        HTTPException: If task creation fails
    """
    logger.info(f"Creating new task: {task_data.title}")
    try:
        task = await task_store.create_task_from_schema(task_data)
    except TaskStoreError as e:
        raise store_error_to_http(e)

    return to_task_response(task, task_store, date.today())


@router.post("/quick", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def quick_add_task(
    request: QuickAddRequest,
    task_store: TaskStore = Depends(get_task_store)
) -> TaskResponse:
    """Create a task from a title alone."""
    try:
        task = await task_store.quick_add(request.title)
    except TaskStoreError as e:
        raise store_error_to_http(e)

    return to_task_response(task, task_store, date.today())


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    task_store: TaskStore = Depends(get_task_store)
) -> TaskResponse:
    """Get a specific task by ID.

    Raises:
        HTTPException: If task not found
    """
    require_ready(task_store)
    task = task_store.get_task(task_id)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task {task_id} not found"
        )
    return to_task_response(task, task_store, date.today())


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    task_store: TaskStore = Depends(get_task_store)
) -> TaskResponse:
    """Update a task with the fields present in the request body.

    Args:
        task_id: Task ID
        task_data: Task update data
        task_store: Task store instance

    Returns:
        Updated task response

    Raises:
        HTTPException: If task not found or update fails
    """
    logger.info(f"Updating task: {task_id}")
    try:
        task = await task_store.update_task(task_id, task_data.model_dump(exclude_unset=True))
    except TaskStoreError as e:
        raise store_error_to_http(e)

    return to_task_response(task, task_store, date.today())


@router.post("/{task_id}/toggle", response_model=TaskResponse)
async def toggle_task(
    task_id: str,
    task_store: TaskStore = Depends(get_task_store)
) -> TaskResponse:
    """Flip a task between open and completed."""
    try:
        task = await task_store.toggle_task(task_id)
    except TaskStoreError as e:
        raise store_error_to_http(e)

    return to_task_response(task, task_store, date.today())


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    task_store: TaskStore = Depends(get_task_store)
):
    """Delete a task.

    Raises:
        HTTPException: If task not found or deletion fails
    """
    logger.info(f"Deleting task: {task_id}")
    try:
        await task_store.delete_task(task_id)
    except TaskStoreError as e:
        raise store_error_to_http(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
