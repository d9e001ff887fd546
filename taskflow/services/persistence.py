"""Persistence collaborators for task and category records.

The store depends on the ``RecordCollection`` protocol only. Two
implementations ship with the app:

- ``InMemoryCollection``: records held in a list, with an optional
  per-call latency to mimic a remote service.
- ``JsonFileCollection``: records kept in a JSON file, rewritten atomically
  on every change.

Records are plain dicts. Collaborators assign the ``id`` on create and raise
``RecordNotFoundError`` for unknown ids on update/delete.
"""

import asyncio
import json
import logging
import os
import threading
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple

from ..config import Settings
from ..exceptions import PersistenceError, RecordNotFoundError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class RecordCollection(Protocol):
    """Async CRUD over opaque records."""

    async def get_all(self) -> List[Record]: ...

    async def create(self, fields: Record) -> Record: ...

    async def update(self, record_id: str, fields: Record) -> Record: ...

    async def delete(self, record_id: str) -> None: ...


def _next_numeric_id(records: List[Record]) -> int:
    numeric = [int(r["id"]) for r in records if str(r.get("id", "")).isdigit()]
    return max(numeric, default=0) + 1


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCollection:
    """In-memory record collection with simulated latency."""

    def __init__(
        self,
        records: Optional[List[Record]] = None,
        *,
        latency: float = 0.0,
        name: str = "records",
    ):
        """Initialize the collection.

        Args:
            records: Initial records, copied on the way in
            latency: Seconds to sleep before each call completes
            name: Collection name used in log lines
        """
        self._records: List[Record] = [dict(r) for r in records or []]
        self._latency = max(0.0, float(latency))
        self._name = name
        self._next_id = _next_numeric_id(self._records)
        logger.info(f"In-memory {name} collection initialized with {len(self._records)} records")

    async def _delay(self) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)

    def _index_of(self, record_id: str) -> int:
        for i, record in enumerate(self._records):
            if str(record.get("id")) == str(record_id):
                return i
        raise RecordNotFoundError(record_id)

    async def get_all(self) -> List[Record]:
        await self._delay()
        return [dict(r) for r in self._records]

    async def create(self, fields: Record) -> Record:
        await self._delay()
        record = dict(fields)
        record["id"] = str(self._next_id)
        record.setdefault("created_at", _now())
        self._next_id += 1
        self._records.append(record)
        logger.debug(f"Created {self._name} record {record['id']}")
        return dict(record)

    async def update(self, record_id: str, fields: Record) -> Record:
        await self._delay()
        index = self._index_of(record_id)
        record = {**self._records[index], **fields, "id": self._records[index]["id"]}
        self._records[index] = record
        logger.debug(f"Updated {self._name} record {record_id}")
        return dict(record)

    async def delete(self, record_id: str) -> None:
        await self._delay()
        index = self._index_of(record_id)
        self._records.pop(index)
        logger.debug(f"Deleted {self._name} record {record_id}")


def _encode(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonFileCollection:
    """Record collection persisted to a JSON file.

    Each call reads the file, applies the change and rewrites it through a
    temporary file and ``os.replace``, so a failed call leaves the previous
    content in place. File I/O runs in a worker thread.
    """

    def __init__(self, path: Path, seed: Optional[List[Record]] = None):
        self._path = Path(path)
        self._lock = threading.Lock()
        if not self._path.exists():
            self._write(list(seed or []))
            logger.info(f"Created {self._path} with {len(seed or [])} seed records")

    def _read(self) -> List[Record]:
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read {self._path}: {e}") from e
        if not isinstance(data, list):
            raise PersistenceError(f"{self._path} does not contain a list of records")
        return [r for r in data if isinstance(r, dict)]

    def _write(self, records: List[Record]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(records, ensure_ascii=False, indent=2, default=_encode), "utf-8")
            os.replace(tmp, self._path)
        except (OSError, TypeError) as e:
            raise PersistenceError(f"Failed to write {self._path}: {e}") from e

    async def get_all(self) -> List[Record]:
        return await asyncio.to_thread(self._read)

    async def create(self, fields: Record) -> Record:
        return await asyncio.to_thread(self._create, fields)

    async def update(self, record_id: str, fields: Record) -> Record:
        return await asyncio.to_thread(self._update, record_id, fields)

    async def delete(self, record_id: str) -> None:
        await asyncio.to_thread(self._delete, record_id)

    def _create(self, fields: Record) -> Record:
        with self._lock:
            records = self._read()
            record = dict(fields)
            record["id"] = str(_next_numeric_id(records))
            record.setdefault("created_at", _now())
            records.append(record)
            self._write(records)
        return json.loads(json.dumps(record, default=_encode))

    def _update(self, record_id: str, fields: Record) -> Record:
        with self._lock:
            records = self._read()
            for i, record in enumerate(records):
                if str(record.get("id")) == str(record_id):
                    records[i] = {**record, **fields, "id": record["id"]}
                    self._write(records)
                    return json.loads(json.dumps(records[i], default=_encode))
        raise RecordNotFoundError(record_id)

    def _delete(self, record_id: str) -> None:
        with self._lock:
            records = self._read()
            remaining = [r for r in records if str(r.get("id")) != str(record_id)]
            if len(remaining) == len(records):
                raise RecordNotFoundError(record_id)
            self._write(remaining)


def load_seed(name: str) -> List[Record]:
    """Load bundled seed records from ``taskflow/data/<name>.json``."""
    path = DATA_DIR / f"{name}.json"
    return json.loads(path.read_text("utf-8"))


def build_collections(settings: Settings) -> Tuple[RecordCollection, RecordCollection]:
    """Build the (tasks, categories) collections selected by settings."""
    categories_seed = load_seed("categories")
    tasks_seed = load_seed("tasks") if settings.seed_demo_tasks else []

    backend = settings.persistence_backend.lower()
    if backend == "json":
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        tasks = JsonFileCollection(settings.data_dir / "tasks.json", seed=tasks_seed)
        categories = JsonFileCollection(settings.data_dir / "categories.json", seed=categories_seed)
    elif backend == "memory":
        latency = settings.simulated_latency_ms / 1000.0
        tasks = InMemoryCollection(tasks_seed, latency=latency, name="tasks")
        categories = InMemoryCollection(categories_seed, latency=latency, name="categories")
    else:
        raise ValueError(f"Unknown persistence backend: {settings.persistence_backend}")

    logger.info(f"Persistence backend: {backend}")
    return tasks, categories
