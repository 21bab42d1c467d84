"""Shared fixtures for tests."""

from __future__ import annotations

import asyncio
import copy
import os
import sqlite3
import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest

# Set up test database before importing storage
_test_db_fd, _test_db_path = tempfile.mkstemp(suffix=".db")
os.environ["TIMESHEET_DB"] = _test_db_path


@pytest.fixture(scope="session", autouse=True)
def setup_test_db() -> Generator[Path, None, None]:
    """Set up a test database for the entire test session."""
    import storage

    # Reinitialise storage module with test db path
    storage.DB_PATH = Path(_test_db_path)
    storage.init_db()

    yield Path(_test_db_path)

    # Cleanup
    os.close(_test_db_fd)
    os.unlink(_test_db_path)


@pytest.fixture
def temp_database(tmp_path, monkeypatch):
    """Point storage at a fresh database file for one test."""
    db_path = tmp_path / "test_timesheet.db"
    monkeypatch.setenv("TIMESHEET_DB", str(db_path))

    # Re-import storage to pick up new DB_PATH
    import importlib
    import storage
    importlib.reload(storage)

    storage.init_db()

    yield storage

    if db_path.exists():
        db_path.unlink()


class FakeRowStore:
    """In-memory stand-in for storage.RowStore.

    Rows are keyed by date key for a single user. Upserts listed in
    fail_keys raise, delays (seconds) are consumed one per upsert call and
    fetch_delay holds every fetch for that long.
    """

    def __init__(self, rows: dict[str, dict[str, Any]] | None = None):
        self.rows: dict[str, dict[str, Any]] = copy.deepcopy(rows or {})
        self.upserts: list[tuple[str, str, dict[str, Any]]] = []
        self.fail_keys: set[str] = set()
        self.fail_fetch = False
        self.delays: list[float] = []
        self.fetch_delay = 0.0

    async def fetch_rows(self, user_id: str) -> list[dict[str, Any]]:
        if self.fetch_delay:
            await asyncio.sleep(self.fetch_delay)
        if self.fail_fetch:
            raise sqlite3.OperationalError("unable to open database file")
        return [{"date_key": key, "data": copy.deepcopy(data)} for key, data in self.rows.items()]

    async def upsert_row(self, user_id: str, date_key: str, data: dict[str, Any]) -> None:
        if self.delays:
            await asyncio.sleep(self.delays.pop(0))
        if date_key in self.fail_keys:
            raise sqlite3.OperationalError("disk I/O error")
        self.rows[date_key] = copy.deepcopy(data)
        self.upserts.append((user_id, date_key, copy.deepcopy(data)))


@pytest.fixture
def fake_row_store() -> FakeRowStore:
    return FakeRowStore()


@pytest.fixture
def legacy_rows() -> dict[str, dict[str, Any]]:
    """Stored rows in both the old single-task shape and the current shape."""
    return {
        "15/01/2024": {"isLeave": False, "task": "Fix bug", "hours": 4},
        "16/01/2024": {"isLeave": False, "tasks": [{"id": "t-1", "description": "Review", "hours": "2"}]},
        "17/01/2024": {"isLeave": True},
    }


@pytest.fixture
def sample_entry():
    """A day with two tasks."""
    from models import DayEntry, Task

    return DayEntry(
        is_leave=False,
        tasks=[
            Task(id="task-1", description="Write report", hours="2"),
            Task(id="task-2", description="Standup", hours="3.5"),
        ],
    )


@pytest.fixture
def sample_user():
    from models import User

    return User(id="user-1", email="alex@example.com")


@pytest.fixture
def sample_config():
    """Create a sample Config for testing."""
    from models import Config

    return Config(theme="dark", holiday_country="GB", holiday_subdiv="SCT")
