"""Shared test fixtures and configuration for the test suite."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, List
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from taskflow.config import Settings
from taskflow.main import create_app
from taskflow.services import task_store as task_store_module
from taskflow.services.persistence import InMemoryCollection, Record
from taskflow.services.task_store import TaskStore

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """Timestamp returned by the store clock in tests."""
    return FIXED_NOW


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test settings with temporary directories."""
    return Settings(
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        data_dir=tmp_path / "data",
        environment="test",
        persistence_backend="memory",
        simulated_latency_ms=0,
        seed_demo_tasks=True,
    )


@pytest.fixture
def category_records() -> List[Record]:
    """Sample category records."""
    return [
        {"id": "1", "name": "Work", "color": "#3b82f6", "icon": "Briefcase"},
        {"id": "2", "name": "Personal", "color": "#8b5cf6", "icon": "User"},
        {"id": "3", "name": "Shopping", "color": "#10b981", "icon": "ShoppingCart"},
    ]


@pytest.fixture
def task_records() -> List[Record]:
    """Sample task records: two open, one completed."""
    return [
        {
            "id": "1",
            "title": "Write report",
            "description": "Quarterly numbers",
            "category_id": "1",
            "priority": "high",
            "due_date": "2026-10-20",
            "completed": False,
            "completed_at": None,
        },
        {
            "id": "2",
            "title": "Buy milk",
            "description": "",
            "category_id": "3",
            "priority": "low",
            "due_date": None,
            "completed": False,
            "completed_at": None,
        },
        {
            "id": "3",
            "title": "Pay rent",
            "description": "Transfer before the 1st",
            "category_id": "2",
            "priority": "medium",
            "due_date": None,
            "completed": True,
            "completed_at": "2026-10-01T08:00:00+00:00",
        },
    ]


@pytest.fixture
def task_collection(task_records) -> InMemoryCollection:
    return InMemoryCollection(task_records, name="tasks")


@pytest.fixture
def category_collection(category_records) -> InMemoryCollection:
    return InMemoryCollection(category_records, name="categories")


@pytest.fixture
def task_store(task_collection, category_collection, fixed_now) -> TaskStore:
    """Create a task store that has not been loaded yet."""
    return TaskStore(task_collection, category_collection, clock=lambda: fixed_now)


@pytest.fixture
def loaded_store(task_store) -> TaskStore:
    """Create a task store in the ready state."""
    asyncio.run(task_store.load())
    return task_store


@pytest.fixture
def client(test_settings) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    with patch("taskflow.deps.get_settings", return_value=test_settings):
        app = create_app()
        with TestClient(app) as test_client:
            yield test_client
    task_store_module._task_store = None


@pytest.fixture
def sample_task_data():
    """Sample task data for testing."""
    return {
        "title": "Review pull request",
        "description": "Check the new filter endpoints",
        "category_id": "1",
        "priority": "high",
        "due_date": "2026-10-25",
    }
