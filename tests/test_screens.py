"""Tests for the screens module."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from screens import DatePickerScreen, EditFieldScreen, LoginScreen, RemoveTaskScreen


class TestRemoveTaskScreen:
    """Tests for the RemoveTaskScreen."""

    def test_message_names_task_and_day(self):
        screen = RemoveTaskScreen("03/01/2024", "Write report")

        assert screen.day_key == "03/01/2024"
        assert screen.message == 'Remove "Write report" from 03/01/2024?'

    def test_untitled_task(self):
        screen = RemoveTaskScreen("03/01/2024")
        assert screen.message == "Remove this task from 03/01/2024?"

    def test_remove_button_confirms(self):
        screen = RemoveTaskScreen("03/01/2024", "Standup")
        screen.dismiss = MagicMock()
        event = MagicMock()
        event.button.id = "remove"

        screen.on_button_pressed(event)

        screen.dismiss.assert_called_once_with(True)

    def test_keep_button_and_escape_cancel(self):
        screen = RemoveTaskScreen("03/01/2024", "Standup")
        screen.dismiss = MagicMock()
        event = MagicMock()
        event.button.id = "keep"

        screen.on_button_pressed(event)
        screen.action_keep()

        assert [c.args for c in screen.dismiss.call_args_list] == [(False,), (False,)]


class TestLoginScreen:
    """Tests for the LoginScreen."""

    def test_init_with_auth(self):
        auth = MagicMock()
        screen = LoginScreen(auth)
        assert screen.auth is auth


class TestEditFieldScreen:
    """Tests for the EditFieldScreen."""

    def test_init(self):
        screen = EditFieldScreen("Task for Monday 01/01/2024", "Fix bug", placeholder="Enter task...")

        assert screen.title_text == "Task for Monday 01/01/2024"
        assert screen.value == "Fix bug"
        assert screen.numeric is False

    def test_text_accepts_anything(self):
        screen = EditFieldScreen("Task")
        assert screen.check_value("anything at all") is None

    @pytest.mark.parametrize("value", ["", "0", "0.0", "7.5", "12"])
    def test_valid_hours(self, value):
        screen = EditFieldScreen("Hours", numeric=True)
        assert screen.check_value(value) is None

    @pytest.mark.parametrize("value", ["abc", "1,5", "NaN", "Infinity"])
    def test_non_numeric_hours(self, value):
        screen = EditFieldScreen("Hours", numeric=True)
        assert screen.check_value(value) == "Hours must be a number"

    def test_negative_hours(self):
        screen = EditFieldScreen("Hours", numeric=True)
        assert screen.check_value("-2") == "Hours cannot be negative"


class TestDatePickerScreen:
    """Tests for the DatePickerScreen."""

    def test_starts_on_current_month(self):
        screen = DatePickerScreen(date(2024, 1, 17))

        assert screen.year == 2024
        assert screen.month == 1
        assert screen.current == date(2024, 1, 17)

    def test_date_at(self):
        screen = DatePickerScreen(date(2024, 1, 17))

        # 1 Jan 2024 is a Monday, second column of the first row
        assert screen.date_at(0, 0) is None
        assert screen.date_at(0, 1) == date(2024, 1, 1)
        assert screen.date_at(2, 3) == date(2024, 1, 17)

    def test_date_at_out_of_range(self):
        screen = DatePickerScreen(date(2024, 1, 17))

        assert screen.date_at(10, 0) is None
        assert screen.date_at(0, 7) is None
