"""Hour totals and labels for the stats bar."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

from models import Day, DayEntry
from utils import format_date_key


def parse_hours(value) -> Decimal:
    """Hours as a decimal. Blank or non-numeric values count as zero."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        hours = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal("0")
    if not hours.is_finite():
        return Decimal("0")
    return hours


def day_total_hours(entry: DayEntry | None) -> Decimal:
    if entry is None:
        return Decimal("0")
    return sum((parse_hours(task.hours) for task in entry.tasks), Decimal("0"))


def visible_total_hours(days: list[Day], entries: dict[str, DayEntry]) -> Decimal:
    """Sum of every task's hours over the visible days."""
    return sum((day_total_hours(entries.get(day.key)) for day in days), Decimal("0"))


def hours_label(view_mode: str, days: list[Day], today: date | None = None) -> str:
    if view_mode == "month":
        return "Total Hours logged this month"
    if view_mode == "week":
        return "Total Hours logged this week"

    today_key = format_date_key(today or date.today())
    if days and days[0].key == today_key:
        return "Total Hours logged today"
    return f"Total Hours logged on {days[0].key if days else ''}"


def format_hours(total: Decimal) -> str:
    """Render a total without trailing zeros, e.g. 7.5 or 8."""
    return f"{float(total):g}"
