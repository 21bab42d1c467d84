"""Tests for summary.py - totals and labels."""

from datetime import date
from decimal import Decimal

import pytest

from models import DayEntry, Task
from summary import day_total_hours, format_hours, hours_label, parse_hours, visible_total_hours
from utils import build_days


def _entry(*hours) -> DayEntry:
    return DayEntry(tasks=[Task(id=f"t{i}", description="x", hours=h) for i, h in enumerate(hours)])


class TestParseHours:
    """Tests for parse_hours."""

    @pytest.mark.parametrize("value, expected", [
        ("2", Decimal("2")),
        ("3.5", Decimal("3.5")),
        (4, Decimal("4")),
        (1.25, Decimal("1.25")),
        (" 6 ", Decimal("6")),
    ])
    def test_numbers(self, value, expected):
        assert parse_hours(value) == expected

    @pytest.mark.parametrize("value", ["", None, "abc", "NaN", "inf", True])
    def test_blank_or_invalid_is_zero(self, value):
        assert parse_hours(value) == Decimal("0")


class TestTotals:
    """Tests for day_total_hours and visible_total_hours."""

    def test_day_total(self):
        assert day_total_hours(_entry("2", "3.5")) == Decimal("5.5")

    def test_missing_day_is_zero(self):
        assert day_total_hours(None) == Decimal("0")

    def test_week_total(self):
        days = build_days(date(2024, 1, 3), "week")
        entries = {day.key: _entry("2", "3.5") for day in days}

        assert visible_total_hours(days, entries) == Decimal("38.5")

    def test_blank_and_invalid_hours_contribute_nothing(self):
        days = build_days(date(2024, 1, 3), "day")
        entries = {days[0].key: _entry("2", "", "lots")}

        assert visible_total_hours(days, entries) == Decimal("2")

    def test_only_visible_days_counted(self):
        days = build_days(date(2024, 1, 3), "day")
        entries = {"03/01/2024": _entry("1"), "04/01/2024": _entry("8")}

        assert visible_total_hours(days, entries) == Decimal("1")

    def test_leave_days_still_count_tasks(self):
        days = build_days(date(2024, 1, 3), "day")
        entries = {days[0].key: DayEntry(is_leave=True, tasks=[Task(id="t", hours="2")])}

        assert visible_total_hours(days, entries) == Decimal("2")


class TestHoursLabel:
    """Tests for hours_label."""

    def test_month(self):
        days = build_days(date(2024, 1, 3), "month")
        assert hours_label("month", days) == "Total Hours logged this month"

    def test_week(self):
        days = build_days(date(2024, 1, 3), "week")
        assert hours_label("week", days) == "Total Hours logged this week"

    def test_today(self):
        days = build_days(date(2024, 1, 3), "day")
        assert hours_label("day", days, today=date(2024, 1, 3)) == "Total Hours logged today"

    def test_other_day(self):
        days = build_days(date(2024, 1, 3), "day")
        assert hours_label("day", days, today=date(2024, 1, 4)) == "Total Hours logged on 03/01/2024"


class TestFormatHours:
    def test_trims_trailing_zeros(self):
        assert format_hours(Decimal("7.50")) == "7.5"
        assert format_hours(Decimal("8")) == "8"
        assert format_hours(Decimal("0")) == "0"
