"""Task & category store: in-memory state backed by persistence collaborators."""

import asyncio
import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..exceptions import (
    NotFound,
    PersistenceFailure,
    RecordNotFoundError,
    StoreNotReady,
    ValidationFailure,
)
from ..models.category import Category
from ..models.filters import ALL, FilterCriteria
from ..models.task import Priority, Task
from ..schemas import TaskCreate
from ..utils.logging import TimedOperation
from . import views
from .persistence import RecordCollection

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "title",
    "description",
    "category_id",
    "priority",
    "due_date",
    "completed",
    "completed_at",
})


class StoreStatus(str, Enum):
    """Store lifecycle status."""
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


Listener = Callable[["TaskStore"], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_priority(value: Any) -> str:
    try:
        return Priority(value).value
    except ValueError:
        raise ValidationFailure(
            f"Invalid priority '{value}'. Valid values: {', '.join(Priority.values())}"
        ) from None


def _resolve_due_date(value: Any) -> Optional[date]:
    """Turn a date-only string (YYYY-MM-DD) or date into a date; empty means no due date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise ValidationFailure(f"Invalid due date '{value}', expected YYYY-MM-DD") from None
    raise ValidationFailure(f"Invalid due date {value!r}")


def _clean_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailure("Task title cannot be empty")
    return value.strip()


class TaskStore:
    """Single owner of task and category state.

    Every mutation goes to the persistence collaborator first and is applied
    in memory only from the collaborator's response. Mutations are not
    serialized against each other: responses are applied by id to whatever
    the collection holds when they arrive, so changes to different tasks
    never overwrite each other. For two in-flight changes to the same task,
    the response that resolves last wins.
    """

    def __init__(
        self,
        tasks: RecordCollection,
        categories: RecordCollection,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the store.

        Args:
            tasks: Persistence collaborator for task records
            categories: Persistence collaborator for category records
            clock: Source of completion timestamps
        """
        self._task_records = tasks
        self._category_records = categories
        self._clock = clock

        self._tasks: List[Task] = []
        self._categories: List[Category] = []
        self._criteria = FilterCriteria()
        self._status = StoreStatus.LOADING
        self._error: Optional[str] = None
        self._listeners: List[Listener] = []

    # ---- query surface ----

    @property
    def status(self) -> StoreStatus:
        return self._status

    @property
    def error(self) -> Optional[str]:
        """Failure detail while the store is errored."""
        return self._error

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def categories(self) -> Tuple[Category, ...]:
        return tuple(self._categories)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def get_task(self, task_id: Any) -> Optional[Task]:
        task_id = str(task_id)
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def filtered_tasks(self) -> List[Task]:
        return views.filter_tasks(self._tasks, self._criteria)

    def active_tasks(self) -> List[Task]:
        return views.active_tasks(self._tasks, self._criteria)

    def completed_tasks(self) -> List[Task]:
        return views.completed_tasks(self._tasks, self._criteria)

    def completion_percentage(self) -> int:
        return views.completion_percentage(self._tasks)

    def category_task_count(self, category_id: Optional[str]) -> int:
        return views.category_task_count(self._tasks, category_id)

    def resolve_category(self, category_id: Optional[str]) -> Category:
        return views.resolve_category(self._categories, category_id)

    def view(self) -> views.TaskView:
        """Snapshot of all derived views for the current state and criteria."""
        return views.build_view(self._tasks, self._categories, self._criteria)

    # ---- change notification ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after every applied state change.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Store listener %r failed", listener)

    # ---- lifecycle ----

    async def load(self) -> StoreStatus:
        """Load tasks and categories concurrently and replace state wholesale.

        On failure of either read the store becomes errored with no partial
        state exposed. May be called again to retry from the errored state.

        Returns:
            The resulting store status
        """
        self._status = StoreStatus.LOADING
        self._error = None
        self._notify()

        try:
            with TimedOperation("store load", __name__):
                task_records, category_records = await asyncio.gather(
                    self._task_records.get_all(),
                    self._category_records.get_all(),
                )
                tasks = [Task.model_validate(record) for record in task_records]
                categories = [Category.model_validate(record) for record in category_records]
        except Exception as e:
            self._tasks = []
            self._categories = []
            self._status = StoreStatus.ERRORED
            self._error = str(e) or type(e).__name__
            logger.error(f"Failed to load tasks and categories: {self._error}")
            self._notify()
            return self._status

        self._tasks = tasks
        self._categories = categories
        self._status = StoreStatus.READY
        logger.info(f"Store ready with {len(tasks)} tasks and {len(categories)} categories")
        self._notify()
        return self._status

    def _require_ready(self) -> None:
        if self._status != StoreStatus.READY:
            logger.warning(f"Rejected mutation while store is {self._status.value}")
            raise StoreNotReady(self._status.value, self._error)

    def _require_task(self, task_id: Any) -> Task:
        task = self.get_task(task_id)
        if task is None:
            logger.warning(f"Task {task_id} not found")
            raise NotFound(task_id)
        return task

    def _missing_record(self, task_id: str, error: RecordNotFoundError) -> NotFound:
        logger.warning(f"Task {task_id} is no longer known to persistence: {error}")
        return NotFound(task_id)

    def _persistence_failure(self, operation: str, error: Exception) -> PersistenceFailure:
        detail = str(error) or type(error).__name__
        logger.error(f"Persistence call '{operation}' failed: {detail}")
        return PersistenceFailure(operation, detail)

    # ---- command surface ----

    def _default_category_id(self) -> str:
        selected = self._criteria.selected_category
        if selected != ALL and any(c.id == selected for c in self._categories):
            return selected
        if self._categories and self._categories[0].id is not None:
            return self._categories[0].id
        return ""

    async def create_task(
        self,
        title: str,
        description: str = "",
        category_id: Optional[str] = None,
        priority: Optional[str] = None,
        due_date: Any = None,
    ) -> Task:
        """Create a new task.

        Args:
            title: Task title, trimmed; must not be blank
            description: Optional task description
            category_id: Category; defaults to the selected or first category
            priority: Priority value; defaults to medium
            due_date: Date or YYYY-MM-DD string

        Returns:
            The task as stored by the persistence collaborator

        Raises:
            StoreNotReady: If the store is not ready
            ValidationFailure: If the title is blank or a field is invalid
            PersistenceFailure: If the collaborator call fails
        """
        self._require_ready()

        record = {
            "title": _clean_title(title),
            "description": description or "",
            "category_id": category_id or self._default_category_id(),
            "priority": _resolve_priority(priority) if priority is not None else Priority.MEDIUM.value,
            "due_date": _resolve_due_date(due_date),
            "completed": False,
            "completed_at": None,
        }

        try:
            created = Task.model_validate(await self._task_records.create(record))
        except Exception as e:
            raise self._persistence_failure("create", e) from e

        self._tasks = [created] + [t for t in self._tasks if t.id != created.id]
        logger.info(f"Created task {created.id}: {created.title}")
        self._notify()
        return created

    async def create_task_from_schema(self, task_data: TaskCreate) -> Task:
        """Create a new task from schema."""
        return await self.create_task(
            title=task_data.title,
            description=task_data.description,
            category_id=task_data.category_id,
            priority=task_data.priority,
            due_date=task_data.due_date,
        )

    async def quick_add(self, title: str) -> Task:
        """Create a task from a title alone, with every other field defaulted."""
        return await self.create_task(title)

    def _build_update(self, current: Task, fields: Mapping[str, Any]) -> Dict[str, Any]:
        unknown = sorted(set(fields) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationFailure(f"Unknown or read-only fields: {', '.join(unknown)}")

        payload: Dict[str, Any] = {}
        for key, value in fields.items():
            if key == "title":
                payload[key] = _clean_title(value)
            elif key == "description":
                payload[key] = value or ""
            elif key == "priority":
                payload[key] = _resolve_priority(value)
            elif key == "due_date":
                payload[key] = _resolve_due_date(value)
            elif key == "completed":
                if not isinstance(value, bool):
                    raise ValidationFailure(f"Invalid completed flag {value!r}, expected true or false")
                payload[key] = value
            else:
                payload[key] = value

        if "completed" in payload:
            if not payload["completed"]:
                payload["completed_at"] = None
            elif payload.get("completed_at") is None:
                payload["completed_at"] = current.completed_at if current.completed else self._clock()
        elif "completed_at" in payload:
            raise ValidationFailure("completed_at can only be changed together with completed")

        return payload

    async def update_task(self, task_id: Any, fields: Mapping[str, Any]) -> Task:
        """Update a task with a partial field set.

        The in-memory record is replaced by the collaborator's response, not
        by the submitted fields.

        Args:
            task_id: Task ID
            fields: Fields to change

        Returns:
            The updated task

        Raises:
            StoreNotReady: If the store is not ready
            NotFound: If the task is not in the store or persistence no longer has it
            ValidationFailure: If a field is invalid
            PersistenceFailure: If the collaborator call fails
        """
        self._require_ready()
        current = self._require_task(task_id)
        payload = self._build_update(current, fields)

        try:
            updated = Task.model_validate(await self._task_records.update(current.id, payload))
        except RecordNotFoundError as e:
            raise self._missing_record(current.id, e) from e
        except Exception as e:
            raise self._persistence_failure("update", e) from e

        # A task deleted while this call was in flight is not brought back.
        self._tasks = [updated if t.id == updated.id else t for t in self._tasks]
        logger.info(f"Updated task {updated.id}: {updated.title}")
        self._notify()
        return updated

    async def toggle_task(self, task_id: Any) -> Task:
        """Flip a task's completion flag.

        Completing stamps completed_at with the current time; reopening
        clears it. Toggling twice restores the flag but not the original
        timestamp.
        """
        self._require_ready()
        current = self._require_task(task_id)
        completed = not current.completed
        return await self.update_task(
            current.id,
            {"completed": completed, "completed_at": self._clock() if completed else None},
        )

    async def delete_task(self, task_id: Any) -> None:
        """Delete a task.

        Raises:
            StoreNotReady: If the store is not ready
            NotFound: If the task is not in the store or persistence no longer has it
            PersistenceFailure: If the collaborator call fails; the task stays
        """
        self._require_ready()
        current = self._require_task(task_id)

        try:
            await self._task_records.delete(current.id)
        except RecordNotFoundError as e:
            raise self._missing_record(current.id, e) from e
        except Exception as e:
            raise self._persistence_failure("delete", e) from e

        self._tasks = [t for t in self._tasks if t.id != current.id]
        logger.info(f"Deleted task {current.id}: {current.title}")
        self._notify()

    def set_selected_category(self, category_id: Optional[str]) -> FilterCriteria:
        value = ALL if category_id in (None, "") else str(category_id)
        self._criteria = self._criteria.model_copy(update={"selected_category": value})
        self._notify()
        return self._criteria

    def set_search_query(self, query: Optional[str]) -> FilterCriteria:
        self._criteria = self._criteria.model_copy(update={"search_query": query or ""})
        self._notify()
        return self._criteria

    def set_priority_filter(self, priority: Optional[str]) -> FilterCriteria:
        value = ALL if priority in (None, "", ALL) else _resolve_priority(priority)
        self._criteria = self._criteria.model_copy(update={"priority_filter": value})
        self._notify()
        return self._criteria


# Global task store instance - will be initialized during app startup
_task_store: Optional[TaskStore] = None


def get_task_store() -> Optional[TaskStore]:
    """Get the global task store instance.

    Returns:
        Task store instance or None if not initialized
    """
    return _task_store


def initialize_task_store(tasks: RecordCollection, categories: RecordCollection) -> TaskStore:
    """Initialize the global task store instance.

    Returns:
        Initialized (not yet loaded) task store
    """
    global _task_store
    _task_store = TaskStore(tasks, categories)
    logger.info("Task store initialized")
    return _task_store
