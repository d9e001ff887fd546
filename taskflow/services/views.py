"""Derived views over the task and category collections.

Everything here is a pure function of (tasks, categories, criteria). The
store calls these on demand, so a view can never drift from the state it
was computed from.
"""

from datetime import date
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..models.category import UNCATEGORIZED, Category
from ..models.filters import ALL, FilterCriteria
from ..models.task import Task

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class TaskView(BaseModel):
    """Snapshot of every derived view for one state + criteria pair."""

    criteria: FilterCriteria
    filtered: List[Task] = Field(default_factory=list)
    active: List[Task] = Field(default_factory=list)
    completed: List[Task] = Field(default_factory=list)
    total_count: int = 0
    completion_percentage: int = 0
    category_counts: Dict[str, int] = Field(default_factory=dict)


def matches_criteria(task: Task, criteria: FilterCriteria) -> bool:
    """Check a task against all three filter predicates.

    Args:
        task: Task to check
        criteria: Current filter criteria

    Returns:
        True if the category, priority and text predicates all hold
    """
    if criteria.selected_category != ALL and task.category_id != criteria.selected_category:
        return False
    if criteria.priority_filter != ALL and task.priority != criteria.priority_filter:
        return False
    query = criteria.search_query
    if query:
        query_lower = query.lower()
        if query_lower not in task.title.lower() and query_lower not in (task.description or "").lower():
            return False
    return True


def filter_tasks(tasks: Sequence[Task], criteria: FilterCriteria) -> List[Task]:
    """Return the tasks passing the filter, in store order."""
    return [task for task in tasks if matches_criteria(task, criteria)]


def active_tasks(tasks: Sequence[Task], criteria: FilterCriteria) -> List[Task]:
    return [task for task in filter_tasks(tasks, criteria) if not task.completed]


def completed_tasks(tasks: Sequence[Task], criteria: FilterCriteria) -> List[Task]:
    return [task for task in filter_tasks(tasks, criteria) if task.completed]


def completion_percentage(tasks: Sequence[Task]) -> int:
    """Percentage of completed tasks over the whole, unfiltered collection.

    Rounds half up. A collection with any open task never reports 100.

    Args:
        tasks: All tasks

    Returns:
        Integer in [0, 100]; 0 for an empty collection
    """
    total = len(tasks)
    if total == 0:
        return 0
    done = sum(1 for task in tasks if task.completed)
    percentage = (200 * done + total) // (2 * total)
    if done < total:
        percentage = min(percentage, 99)
    return percentage


def category_task_count(tasks: Sequence[Task], category_id: Optional[str]) -> int:
    """Count tasks (unfiltered) assigned to a category."""
    return sum(1 for task in tasks if task.category_id == category_id)


def category_counts(tasks: Sequence[Task], categories: Sequence[Category]) -> Dict[str, int]:
    counts = {category.id: 0 for category in categories if category.id is not None}
    for task in tasks:
        if task.category_id in counts:
            counts[task.category_id] += 1
    return counts


def resolve_category(categories: Sequence[Category], category_id: Optional[str]) -> Category:
    """Look up a category, falling back to the Uncategorized sentinel.

    Never raises: unknown, empty and None ids all resolve to the sentinel.
    """
    if category_id is None:
        return UNCATEGORIZED
    for category in categories:
        if category.id == category_id:
            return category
    return UNCATEGORIZED


def is_overdue(task: Task, today: date) -> bool:
    return task.due_date is not None and task.due_date < today


def due_date_label(task: Task, today: date) -> Optional[str]:
    """Short label for a task's due date.

    Returns:
        "Today", "Overdue", a "Mon D" label, or None without a due date
    """
    if task.due_date is None:
        return None
    if task.due_date == today:
        return "Today"
    if task.due_date < today:
        return "Overdue"
    return f"{_MONTHS[task.due_date.month - 1]} {task.due_date.day}"


def build_view(
    tasks: Sequence[Task],
    categories: Sequence[Category],
    criteria: FilterCriteria,
) -> TaskView:
    """Compute every derived view in one pass over the current state."""
    filtered = filter_tasks(tasks, criteria)
    return TaskView(
        criteria=criteria,
        filtered=filtered,
        active=[task for task in filtered if not task.completed],
        completed=[task for task in filtered if task.completed],
        total_count=len(tasks),
        completion_percentage=completion_percentage(tasks),
        category_counts=category_counts(tasks, categories),
    )
