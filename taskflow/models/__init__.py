"""Domain models."""

from .category import UNCATEGORIZED, Category
from .filters import ALL, FilterCriteria
from .task import Priority, Task

__all__ = [
    "ALL",
    "UNCATEGORIZED",
    "Category",
    "FilterCriteria",
    "Priority",
    "Task",
]
