"""Client-side cache of a user's day entries backed by the row store.

Local state is updated as soon as an edit is made. The matching row store
write is queued behind any earlier write for the same date key, so writes
for one day reach the store in the order they were made. Store failures are
logged and never undo the local state.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from typing import Any

from models import DayEntry, LegacyEntry, Task
from tasks import new_task_id

logger = logging.getLogger(__name__)

STORE_ERRORS = (sqlite3.Error, OSError)


def decode_entry(data: dict[str, Any]) -> DayEntry | LegacyEntry:
    """Decode a stored row into the current shape, or LegacyEntry for old single-task rows."""
    is_leave = bool(data.get("isLeave", False))
    tasks = data.get("tasks")
    if isinstance(tasks, list):
        return DayEntry(is_leave=is_leave, tasks=[Task.from_dict(t) for t in tasks])
    if data.get("task") or data.get("hours"):
        hours = data.get("hours")
        return LegacyEntry(
            is_leave=is_leave,
            task=data.get("task") or "",
            hours="" if hours is None else hours,
        )
    return DayEntry(is_leave=is_leave, tasks=[])


def migrate(data: dict[str, Any]) -> tuple[DayEntry, bool]:
    """Return the current-shape entry for a stored row and whether it was rewritten."""
    decoded = decode_entry(data)
    if isinstance(decoded, LegacyEntry):
        task = Task(id=new_task_id(), description=decoded.task, hours=decoded.hours)
        return DayEntry(is_leave=decoded.is_leave, tasks=[task]), True
    return decoded, False


class EntryStore:
    def __init__(self, row_store):
        self.row_store = row_store
        self.user_id: str | None = None
        self.entries: dict[str, DayEntry] = {}
        self._pending: dict[str, asyncio.Task] = {}
        # Bumped by clear() so loads started before it cannot refill the cache
        self._generation = 0

    def get(self, date_key: str) -> DayEntry:
        """Cached entry for a day, or a blank one if nothing is stored."""
        return self.entries.get(date_key) or DayEntry()

    def clear(self) -> None:
        self._generation += 1
        self.user_id = None
        self.entries = {}

    async def load(self, user_id: str) -> dict[str, DayEntry]:
        """Fetch and migrate all of a user's entries, replacing the cache.

        Queued writes are drained first so the fetch sees them. Days saved
        while the fetch is running keep their cached entry.
        """
        generation = self._generation
        await self.flush()
        try:
            rows = await self.row_store.fetch_rows(user_id)
        except STORE_ERRORS:
            logger.exception("Error fetching entries for user %s", user_id)
            rows = []
        if generation != self._generation:
            logger.info("Dropping entries loaded for user %s after the cache was cleared", user_id)
            return {}

        entries: dict[str, DayEntry] = {}
        dirty: list[str] = []
        for row in rows:
            data = row.get("data")
            if not isinstance(data, dict):
                logger.warning("Skipping malformed entry %s for user %s", row.get("date_key"), user_id)
                continue
            entry, migrated = migrate(data)
            entries[row["date_key"]] = entry
            if migrated:
                dirty.append(row["date_key"])

        for date_key in dirty:
            try:
                await self.row_store.upsert_row(user_id, date_key, entries[date_key].to_dict())
            except STORE_ERRORS:
                logger.exception("Error saving migrated entry %s for user %s", date_key, user_id)
        if dirty:
            logger.info("Migrated %d legacy entries for user %s", len(dirty), user_id)

        if generation != self._generation:
            return {}
        for date_key in self._pending:
            if date_key in self.entries:
                entries[date_key] = self.entries[date_key]

        self.user_id = user_id
        self.entries = entries
        return entries

    def save(self, user_id: str, date_key: str, entry: DayEntry) -> asyncio.Task:
        """Update the cache now and queue the row store write.

        Must be called from a running event loop. Returns the queued write.
        """
        self.entries = {**self.entries, date_key: entry}

        previous = self._pending.get(date_key)
        write = asyncio.get_running_loop().create_task(
            self._write(previous, user_id, date_key, entry.to_dict())
        )
        self._pending[date_key] = write
        write.add_done_callback(lambda done: self._forget(date_key, done))
        return write

    async def _write(self, previous: asyncio.Task | None, user_id: str, date_key: str, data: dict[str, Any]) -> None:
        if previous is not None:
            await asyncio.wait([previous])
        try:
            await self.row_store.upsert_row(user_id, date_key, data)
        except STORE_ERRORS:
            logger.exception("Error saving entry %s for user %s", date_key, user_id)

    def _forget(self, date_key: str, done: asyncio.Task) -> None:
        if self._pending.get(date_key) is done:
            del self._pending[date_key]

    async def flush(self) -> None:
        """Wait for every queued write to finish."""
        while self._pending:
            await asyncio.wait(list(self._pending.values()))
