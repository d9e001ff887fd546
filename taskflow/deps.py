"""Dependency injection helpers for FastAPI."""

from functools import lru_cache

from fastapi import HTTPException, status

from .config import Settings, settings
from .services import task_store as task_store_module
from .services.task_store import TaskStore


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return settings


def get_task_store() -> TaskStore:
    """Get the task store created during app startup."""
    store = task_store_module.get_task_store()
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Task store not initialized"
        )
    return store
