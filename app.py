#!/usr/bin/env python3
"""Daily work tracker TUI application."""

from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.reactive import reactive
from textual.widgets import DataTable, Footer
from rich.text import Text

import storage
from auth import AuthService
from entry_store import EntryStore
from models import Day, DayEntry, DisplayRow, Placeholder, RealTask, User
from screens import DatePickerScreen, EditFieldScreen, LoginScreen, RemoveTaskScreen
from summary import hours_label, visible_total_hours
from tasks import add_task, display_rows, edit_row, remove_task, toggle_leave
from utils import build_days, get_holidays_in_range, period_title, shift_date
from widgets import DashboardHeader, StatsBar

logger = logging.getLogger(__name__)

TEXTUAL_THEMES = {"light": "textual-light", "dark": "textual-dark"}


class TimesheetDataTable(DataTable):
    """DataTable that hands left/right to the app for period navigation."""

    def on_key(self, event) -> None:
        if event.key == "left":
            self.app.action_prev_period()  # type: ignore[attr-defined]
            event.prevent_default()
            event.stop()
        elif event.key == "right":
            self.app.action_next_period()  # type: ignore[attr-defined]
            event.prevent_default()
            event.stop()


class TimesheetApp(App):
    """Main work tracker application."""

    CSS = """
    Screen {
        background: $surface;
    }

    #dashboard-header {
        height: auto;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }

    #grid {
        height: 1fr;
        margin: 1 2;
    }

    #stats-bar {
        height: auto;
        padding: 0 2 1 2;
        color: $text;
    }

    DataTable {
        height: 100%;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        # left/right handled in TimesheetDataTable.on_key
        Binding("d", "day_view", "Day"),
        Binding("w", "week_view", "Week"),
        Binding("m", "month_view", "Month"),
        Binding("t", "goto_today", "Today"),
        Binding("g", "pick_date", "Go to"),
        Binding("e", "edit_description", "Task"),
        Binding("h", "edit_hours", "Hours"),
        Binding("a", "add_task", "Add"),
        Binding("x", "remove_task", "Remove"),
        Binding("l", "toggle_leave", "Leave"),
        Binding("D", "toggle_theme", "Theme"),
        Binding("n", "rename", "Name", show=False),
        Binding("o", "sign_out", "Logout"),
    ]

    # Reflected onto Textual's theme by watch_ui_theme
    ui_theme = reactive("light", always_update=True, init=False)

    def __init__(self):
        super().__init__()
        storage.init_db()

        self.prefs = storage.get_config()
        self.auth = AuthService()
        self.store = EntryStore(storage.RowStore())
        self.user: User | None = None

        # View mode: "day", "week" or "month"
        self.view_mode = "month"
        self.current_date = date.today()

        self.days: list[Day] = []
        # Row index in the grid -> (day, rendered row)
        self.rows: list[tuple[Day, DisplayRow]] = []

    def compose(self) -> ComposeResult:
        yield DashboardHeader(id="dashboard-header")
        yield Container(TimesheetDataTable(id="grid"), id="grid-container")
        yield StatsBar(id="stats-bar")
        yield Footer()

    def on_mount(self):
        self._setup_grid()
        self.ui_theme = self.prefs.theme

        user = self.auth.restore_session()
        if user:
            self._start_session(user)
        else:
            self._show_login()

    def watch_ui_theme(self, theme: str) -> None:
        self.theme = TEXTUAL_THEMES.get(theme, TEXTUAL_THEMES["light"])

    def _setup_grid(self):
        table = self.query_one("#grid", DataTable)
        table.cursor_type = "row"
        table.add_column("Date", width=10)
        table.add_column("Day", width=9)
        table.add_column("Task", width=48)
        table.add_column("Hrs", width=6)
        table.add_column("Status", width=18)

    # --- Session ---

    def _show_login(self) -> None:
        self.push_screen(LoginScreen(self.auth), self._on_login)

    def _on_login(self, user: User | None) -> None:
        if user:
            self._start_session(user)

    def _start_session(self, user: User) -> None:
        self.user = user
        self.current_date = date.today()
        self._reload_entries()
        self.query_one("#grid", DataTable).focus()

    def _reload_entries(self) -> None:
        """Render what is cached, then fetch the user's entries in the background."""
        self._refresh_display()
        if self.user:
            self.run_worker(self._load_entries(self.user.id), exclusive=True, group="entries")

    async def _load_entries(self, user_id: str) -> None:
        await self.store.load(user_id)
        if self.user and self.user.id == user_id:
            self._refresh_display()

    # --- Rendering ---

    def _holidays(self) -> dict[date, str]:
        if not self.days:
            return {}
        try:
            return get_holidays_in_range(
                self.days[0].date,
                self.days[-1].date,
                self.prefs.holiday_country,
                self.prefs.holiday_subdiv or None,
            )
        except NotImplementedError:
            logger.warning("No holiday calendar for %s/%s", self.prefs.holiday_country, self.prefs.holiday_subdiv)
            return {}

    def _status_text(self, day: Day, entry: DayEntry | None, holiday: str | None) -> Text:
        if day.is_weekend:
            return Text("Weekend", style="dim")
        if entry and entry.is_leave:
            return Text("On Leave", style="bold yellow")
        if holiday:
            return Text(holiday[:18], style="cyan")
        return Text("")

    def _grid_rows(self, holidays: dict[date, str] | None = None) -> list[tuple[str, tuple, tuple[Day, DisplayRow]]]:
        """(row key, cells, (day, row)) for every row of the visible days."""
        holidays = holidays or {}
        result = []
        for day in self.days:
            entry = self.store.entries.get(day.key)
            is_leave = bool(entry and entry.is_leave)
            style = "dim" if is_leave or day.is_weekend else ""

            for i, row in enumerate(display_rows(entry)):
                first = i == 0
                if isinstance(row, Placeholder):
                    row_key = f"{day.key}|placeholder"
                    description = Text("Weekend" if day.is_weekend else "Enter task...", style="dim italic")
                else:
                    row_key = f"{day.key}|{row.task.id}"
                    description = Text(row.description, style=style)

                cells = (
                    Text(day.key if first else "", style=style),
                    Text(day.day_name if first else "", style=style),
                    description,
                    Text(str(row.hours), style=style, justify="right"),
                    self._status_text(day, entry, holidays.get(day.date)) if first else Text(""),
                )
                result.append((row_key, cells, (day, row)))
        return result

    def _refresh_display(self):
        if not self.user:
            return

        self.days = build_days(self.current_date, self.view_mode)

        header = self.query_one("#dashboard-header", DashboardHeader)
        header.update_display(
            self.auth.display_name(self.user),
            period_title(self.current_date, self.view_mode),
            self.view_mode,
        )

        table = self.query_one("#grid", DataTable)
        cursor_row = table.cursor_row
        table.clear()
        self.rows = []
        for row_key, cells, selection in self._grid_rows(self._holidays()):
            table.add_row(*cells, key=row_key)
            self.rows.append(selection)
        if self.rows:
            table.move_cursor(row=min(max(cursor_row, 0), len(self.rows) - 1))

        stats = self.query_one("#stats-bar", StatsBar)
        stats.update_display(
            hours_label(self.view_mode, self.days),
            visible_total_hours(self.days, self.store.entries),
        )

    def _get_selected(self) -> tuple[Day, DisplayRow] | None:
        table = self.query_one("#grid", DataTable)
        if 0 <= table.cursor_row < len(self.rows):
            return self.rows[table.cursor_row]
        return None

    # --- Navigation ---

    def _set_view_mode(self, mode: str):
        self.view_mode = mode
        self.refresh_bindings()
        self._reload_entries()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Hide the binding for the view that is already showing."""
        if action == "day_view":
            return self.view_mode != "day"
        elif action == "week_view":
            return self.view_mode != "week"
        elif action == "month_view":
            return self.view_mode != "month"
        return True

    def action_prev_period(self):
        self.current_date = shift_date(self.current_date, self.view_mode, -1)
        self._reload_entries()

    def action_next_period(self):
        self.current_date = shift_date(self.current_date, self.view_mode, 1)
        self._reload_entries()

    def action_day_view(self):
        self._set_view_mode("day")

    def action_week_view(self):
        self._set_view_mode("week")

    def action_month_view(self):
        self._set_view_mode("month")

    def action_goto_today(self):
        self.current_date = date.today()
        self._set_view_mode("day")

    def action_pick_date(self):
        self.push_screen(DatePickerScreen(self.current_date), self._on_date_picked)

    def _on_date_picked(self, picked: date | None) -> None:
        if picked:
            self.current_date = picked
            self._reload_entries()

    def _navigate_to_day_view(self, d: date) -> None:
        self.current_date = d
        self._set_view_mode("day")

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter opens the day in day view, or edits the task when already there."""
        if event.data_table.id != "grid":
            return
        selected = self._get_selected()
        if not selected:
            return
        if self.view_mode == "day":
            self.action_edit_description()
        else:
            self._navigate_to_day_view(selected[0].date)

    # --- Editing ---

    def _save(self, date_key: str, entry: DayEntry) -> None:
        if not self.user:
            return
        self.store.save(self.user.id, date_key, entry)
        self._refresh_display()

    def _apply_row_edit(self, day: Day, row: DisplayRow, field: str, value: str) -> None:
        entry = self.store.get(day.key)
        updated = edit_row(entry, row, field, value)
        if updated is entry:
            return
        self._save(day.key, updated)

    def _editable(self, day: Day) -> bool:
        if self.store.get(day.key).is_leave:
            self.notify(f"{day.key} is marked as leave", severity="warning")
            return False
        return True

    def action_edit_description(self):
        selected = self._get_selected()
        if not selected:
            return
        day, row = selected
        if not self._editable(day):
            return

        def on_done(value: str | None) -> None:
            if value is not None and value != row.description:
                self._apply_row_edit(day, row, "description", value)

        self.push_screen(
            EditFieldScreen(
                f"Task for {day.day_name} {day.key}",
                row.description,
                placeholder="Weekend" if day.is_weekend else "Enter task...",
            ),
            on_done,
        )

    def action_edit_hours(self):
        selected = self._get_selected()
        if not selected:
            return
        day, row = selected
        if isinstance(row, Placeholder):
            self.notify("Enter a task before its hours")
            return
        if not self._editable(day):
            return

        def on_done(value: str | None) -> None:
            if value is not None:
                self._apply_row_edit(day, row, "hours", value)

        self.push_screen(
            EditFieldScreen(f"Hours for {day.day_name} {day.key}", str(row.hours), placeholder="0", numeric=True),
            on_done,
        )

    def action_add_task(self):
        selected = self._get_selected()
        if not selected:
            return
        day, _ = selected
        if day.is_weekend:
            self.notify("Tasks cannot be added on weekends", severity="warning")
            return
        if not self._editable(day):
            return
        self._save(day.key, add_task(self.store.get(day.key)))

    def action_remove_task(self):
        selected = self._get_selected()
        if not selected:
            return
        day, row = selected
        if not isinstance(row, RealTask):
            self.notify("Nothing to remove")
            return
        if day.is_weekend:
            self.notify("Tasks cannot be removed on weekends", severity="warning")
            return
        if not self._editable(day):
            return

        def on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self._save(day.key, remove_task(self.store.get(day.key), row.task.id))

        self.push_screen(RemoveTaskScreen(day.key, row.description), on_confirm)

    def action_toggle_leave(self):
        selected = self._get_selected()
        if not selected:
            return
        day, _ = selected
        if day.is_weekend:
            return
        updated = toggle_leave(self.store.get(day.key))
        self._save(day.key, updated)
        self.notify(f"{day.key} {'marked as leave' if updated.is_leave else 'back to work'}")

    # --- Account and preferences ---

    def action_toggle_theme(self):
        self.prefs.theme = "dark" if self.ui_theme == "light" else "light"
        storage.save_config(self.prefs)
        self.ui_theme = self.prefs.theme

    def action_rename(self):
        if not self.user:
            return
        user = self.user

        def on_done(value: str | None) -> None:
            if value is not None:
                storage.update_profile(user.id, value or None)
                self._refresh_display()

        self.push_screen(EditFieldScreen("Display name", self.auth.display_name(user)), on_done)

    async def action_sign_out(self):
        self.workers.cancel_group(self, "entries")
        await self.store.flush()
        self.auth.sign_out()
        self.user = None
        self.store.clear()
        self.rows = []
        self.query_one("#grid", DataTable).clear()
        self._show_login()

    async def action_quit(self):
        await self.store.flush()
        self.exit()


def _configure_logging() -> Path:
    """Log to a file since the TUI owns the terminal."""
    log_path = Path(os.environ.get("TIMESHEET_LOG") or storage.DB_PATH.parent / "timesheet.log")
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=os.environ.get("TIMESHEET_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(log_path)],
    )
    return log_path


def main():
    import sys
    if len(sys.argv) > 1 and sys.argv[1] == "--db-info":
        from datetime import datetime
        db_path = storage.DB_PATH
        print(f"Database: {db_path}")
        if db_path.exists():
            mtime = datetime.fromtimestamp(db_path.stat().st_mtime)
            size = db_path.stat().st_size
            print(f"Modified: {mtime.strftime('%Y-%m-%d %H:%M:%S')}")
            print(f"Size: {size:,} bytes")
        else:
            print("Status: Does not exist (will be created on first run)")
        return

    _configure_logging()
    app = TimesheetApp()
    app.run()


if __name__ == "__main__":
    main()
