"""Custom exceptions for the task store and its persistence collaborators."""

from __future__ import annotations

from typing import Any, Optional


class TaskStoreError(Exception):
    """Base exception for all store errors."""


class ValidationFailure(TaskStoreError, ValueError):
    """Rejected input (empty title, unknown priority, bad date, unknown field)."""


class NotFound(TaskStoreError):
    """Operation referenced a task id the store does not hold."""

    def __init__(self, task_id: Any) -> None:
        """Initialize with the unknown task id."""
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class PersistenceFailure(TaskStoreError):
    """The persistence collaborator failed; the store state is unchanged."""

    def __init__(self, operation: str, message: str) -> None:
        """Initialize with the failed operation name."""
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


class StoreNotReady(TaskStoreError):
    """Mutation attempted while the store is loading or errored."""

    def __init__(self, status: str, detail: Optional[str] = None) -> None:
        """Initialize with the store status at the time of the attempt."""
        self.status = status
        self.detail = detail
        message = f"Store is {status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class PersistenceError(Exception):
    """Raised by persistence collaborators on storage or transport errors."""


class RecordNotFoundError(PersistenceError):
    """Raised by persistence collaborators for unknown record ids."""

    def __init__(self, record_id: Any) -> None:
        """Initialize with the unknown record id."""
        self.record_id = record_id
        super().__init__(f"Record {record_id} not found")
