from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Union

VIEW_MODES = ("day", "week", "month")

TASK_FIELDS = ("description", "hours")


@dataclass(frozen=True)
class Day:
    date: date
    key: str
    day_name: str
    is_weekend: bool


@dataclass
class Task:
    id: str
    description: str = ""
    hours: str | int | float = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "description": self.description, "hours": self.hours}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        hours = data.get("hours")
        return cls(
            id=str(data.get("id", "")),
            description=data.get("description") or "",
            hours="" if hours is None else hours,
        )


@dataclass
class DayEntry:
    is_leave: bool = False
    tasks: list[Task] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Wire shape stored in the row store."""
        return {
            "isLeave": self.is_leave,
            "tasks": [task.to_dict() for task in self.tasks],
        }


@dataclass
class LegacyEntry:
    """Row written before days could hold several tasks."""

    is_leave: bool = False
    task: str = ""
    hours: str | int | float = ""


@dataclass(frozen=True)
class RealTask:
    task: Task

    @property
    def description(self) -> str:
        return self.task.description

    @property
    def hours(self) -> str | int | float:
        return self.task.hours


@dataclass(frozen=True)
class Placeholder:
    """Blank row shown for a day without tasks. Never persisted."""

    @property
    def description(self) -> str:
        return ""

    @property
    def hours(self) -> str:
        return ""


DisplayRow = Union[RealTask, Placeholder]


@dataclass
class User:
    id: str
    email: str

    @property
    def default_name(self) -> str:
        return self.email.split("@")[0]


@dataclass
class Profile:
    id: str
    name: str | None = None


@dataclass
class Config:
    theme: str = "light"
    holiday_country: str = "GB"
    holiday_subdiv: str = "ENG"
