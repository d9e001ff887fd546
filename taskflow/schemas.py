"""API request/response schemas for the task management service."""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .models.task import Priority


# Task-related schemas
class TaskCreate(BaseModel):
    """Schema for creating a new task."""
    title: str = Field(..., max_length=200, description="Task title")
    description: str = Field(default="", max_length=2000, description="Task description")
    category_id: Optional[str] = Field(None, description="Category identifier")
    priority: Optional[Priority] = Field(None, description="Task priority, medium when omitted")
    due_date: Optional[str] = Field(None, description="Due date as YYYY-MM-DD")


class QuickAddRequest(BaseModel):
    """Schema for the quick-add box: a title and nothing else."""
    title: str = Field(..., max_length=200, description="Task title")


class TaskUpdate(BaseModel):
    """Schema for updating an existing task. Only fields that are sent change."""
    title: Optional[str] = Field(None, max_length=200, description="Task title")
    description: Optional[str] = Field(None, max_length=2000, description="Task description")
    category_id: Optional[str] = Field(None, description="Category identifier")
    priority: Optional[Priority] = Field(None, description="Task priority")
    due_date: Optional[str] = Field(None, description="Due date as YYYY-MM-DD, null to clear")
    completed: Optional[bool] = Field(None, description="Completion flag")


class CategoryResponse(BaseModel):
    """Schema for category API responses."""
    id: Optional[str] = Field(None, description="Category identifier, null for Uncategorized")
    name: str = Field(..., description="Display name")
    color: str = Field(..., description="Colour token")
    icon: Optional[str] = Field(None, description="Icon token")
    task_count: int = Field(default=0, description="Number of tasks in the category, unfiltered")


class TaskResponse(BaseModel):
    """Schema for task API responses."""
    id: str = Field(..., description="Unique task identifier")
    title: str = Field(..., description="Task title")
    description: str = Field(..., description="Task description")
    category_id: Optional[str] = Field(None, description="Category identifier")
    category: CategoryResponse = Field(..., description="Resolved category")
    priority: Priority = Field(..., description="Task priority")
    due_date: Optional[date] = Field(None, description="Due date")
    due_label: Optional[str] = Field(None, description="Today, Overdue or a short date")
    is_overdue: bool = Field(default=False, description="Due date is in the past")
    completed: bool = Field(..., description="Completion flag")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")


class FilterUpdate(BaseModel):
    """Schema for changing filter criteria. Only fields that are sent change."""
    selected_category: Optional[str] = Field(None, description="Category id or 'all'")
    search_query: Optional[str] = Field(None, max_length=200, description="Text query")
    priority_filter: Optional[str] = Field(None, description="Priority value or 'all'")


class FilterResponse(BaseModel):
    """Schema for filter criteria responses."""
    selected_category: str = Field(..., description="Category id or 'all'")
    search_query: str = Field(..., description="Text query")
    priority_filter: str = Field(..., description="Priority value or 'all'")


class TaskListResponse(BaseModel):
    """Schema for the filtered task view."""
    filters: FilterResponse = Field(..., description="Criteria the view was computed with")
    active: List[TaskResponse] = Field(..., description="Filtered tasks still open")
    completed: List[TaskResponse] = Field(..., description="Filtered tasks already done")
    filtered_count: int = Field(..., description="Number of tasks passing the filter")
    total: int = Field(..., description="Total number of tasks, unfiltered")
    completion_percentage: int = Field(..., description="Completed share of all tasks, 0-100")


class StatsResponse(BaseModel):
    """Schema for completion metrics."""
    total_tasks: int = Field(..., description="Total number of tasks")
    completed_tasks: int = Field(..., description="Number of completed tasks")
    active_tasks: int = Field(..., description="Number of open tasks")
    completion_percentage: int = Field(..., description="Completed share of all tasks, 0-100")
    category_counts: Dict[str, int] = Field(..., description="Task count per category id")


class StoreStatusResponse(BaseModel):
    """Schema for store status responses."""
    status: str = Field(..., description="loading, ready or errored")
    error: Optional[str] = Field(None, description="Failure detail when errored")


# Health check schema
class HealthResponse(BaseModel):
    """Schema for health check responses."""
    status: str = Field(default="healthy", description="Service health status")
    store: StoreStatusResponse = Field(..., description="Task store status")
    version: str = Field(default="1.0.0", description="Application version")
