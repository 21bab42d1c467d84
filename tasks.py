"""Per-day task list edits.

Every function returns a new DayEntry and leaves its input untouched, so the
caller can hand the result straight to the entry store.
"""

from __future__ import annotations

import uuid
from dataclasses import replace

from models import DayEntry, DisplayRow, Placeholder, RealTask, Task, TASK_FIELDS


def new_task_id() -> str:
    return str(uuid.uuid4())


def _check_field(field: str) -> None:
    if field not in TASK_FIELDS:
        raise ValueError(f"Unknown task field: {field!r}")


def update_task_field(entry: DayEntry, task_id: str, field: str, value) -> DayEntry:
    """Replace one field of the task with task_id.

    An unknown task_id appends a task built from that single field rather
    than failing.
    """
    _check_field(field)
    tasks = [
        replace(task, **{field: value}) if task.id == task_id else replace(task)
        for task in entry.tasks
    ]
    if not any(task.id == task_id for task in tasks):
        tasks.append(Task(id=task_id, **{field: value}))
    return replace(entry, tasks=tasks)


def add_task(entry: DayEntry) -> DayEntry:
    """Append a blank task with a fresh id."""
    tasks = [replace(task) for task in entry.tasks]
    tasks.append(Task(id=new_task_id()))
    return replace(entry, tasks=tasks)


def remove_task(entry: DayEntry, task_id: str) -> DayEntry:
    tasks = [replace(task) for task in entry.tasks if task.id != task_id]
    return replace(entry, tasks=tasks)


def toggle_leave(entry: DayEntry) -> DayEntry:
    """Flip the leave flag. Tasks are kept as they are."""
    return replace(entry, is_leave=not entry.is_leave, tasks=[replace(task) for task in entry.tasks])


def display_rows(entry: DayEntry | None) -> list[DisplayRow]:
    """Rows to render for a day: its tasks, or a single placeholder."""
    if entry is None or not entry.tasks:
        return [Placeholder()]
    return [RealTask(task) for task in entry.tasks]


def edit_row(entry: DayEntry, row: DisplayRow, field: str, value) -> DayEntry:
    """Apply an edit made on a rendered row.

    Typing a description on the placeholder creates a real task first and
    edits that. Hours typed on the placeholder are ignored.
    """
    _check_field(field)
    if isinstance(row, Placeholder):
        if field == "hours":
            return entry
        materialized = add_task(entry)
        return update_task_field(materialized, materialized.tasks[-1].id, field, value)
    return update_task_field(entry, row.task.id, field, value)
