"""Domain models for tasks and their priorities."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Priority(str, Enum):
    """Task priority enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def values(cls) -> list:
        return [p.value for p in cls]


class Task(BaseModel):
    """Task domain model.

    Instances are built from the records returned by the persistence
    collaborator and are never mutated in place; the store swaps whole
    records when the collaborator confirms a change.
    """

    id: str = Field(..., description="Identity assigned by the persistence collaborator")
    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field(default="", description="Task description")
    category_id: Optional[str] = Field(default=None, description="Category the task belongs to")
    priority: Priority = Field(default=Priority.MEDIUM, description="Task priority")
    due_date: Optional[date] = Field(default=None, description="Day the task is due")
    completed: bool = Field(default=False, description="Completion flag")
    completed_at: Optional[datetime] = Field(default=None, description="When the task was completed")
    created_at: Optional[datetime] = Field(default=None, description="When the record was stored")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True
        extra = "ignore"
        coerce_numbers_to_str = True
