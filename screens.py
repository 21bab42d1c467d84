"""Modal screens for the work tracker."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Label
from textual.screen import ModalScreen
from rich.text import Text

from auth import AuthError, AuthService
from models import User
from utils import month_calendar, shift_date


class RemoveTaskScreen(ModalScreen[bool]):
    """Ask before deleting one task from a day."""

    CSS = """
    RemoveTaskScreen {
        align: center middle;
    }

    #remove-dialog {
        width: 56;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $error;
    }

    #remove-detail {
        color: $text-muted;
        margin-top: 1;
    }

    #remove-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #remove-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "keep", "Keep"),
        Binding("enter", "remove", "Remove"),
    ]

    def __init__(self, day_key: str, description: str = ""):
        super().__init__()
        self.day_key = day_key
        self.description = description

    @property
    def message(self) -> str:
        label = f'"{self.description}"' if self.description else "this task"
        return f"Remove {label} from {self.day_key}?"

    def compose(self) -> ComposeResult:
        with Vertical(id="remove-dialog"):
            yield Label(self.message)
            yield Label("Its hours come off the day's total.", id="remove-detail")
            with Horizontal(id="remove-buttons"):
                yield Button("Remove", variant="error", id="remove")
                yield Button("Keep", variant="default", id="keep")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "remove")

    def action_remove(self) -> None:
        self.dismiss(True)

    def action_keep(self) -> None:
        self.dismiss(False)


class LoginScreen(ModalScreen[User]):
    """Sign in or create an account. Cannot be dismissed without a user."""

    CSS = """
    LoginScreen {
        align: center middle;
    }

    #login-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #login-title {
        width: 100%;
        text-align: center;
        text-style: bold;
    }

    #login-subtitle {
        width: 100%;
        text-align: center;
        color: $text-muted;
        margin-bottom: 1;
    }

    .field-label {
        height: 1;
        color: $text-muted;
    }

    #login-dialog Input {
        width: 100%;
        margin-bottom: 1;
    }

    #login-message {
        width: 100%;
        color: $error;
        height: auto;
    }

    #login-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #login-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    def __init__(self, auth: AuthService):
        super().__init__()
        self.auth = auth

    def compose(self) -> ComposeResult:
        with Vertical(id="login-dialog"):
            yield Label("Daily Work Tracker", id="login-title")
            yield Label("Sign in to sync your timesheets", id="login-subtitle")
            yield Label("Email", classes="field-label")
            yield Input(placeholder="Your email address", id="email")
            yield Label("Password", classes="field-label")
            yield Input(placeholder="Password", password=True, id="password")
            yield Label("", id="login-message")
            with Horizontal(id="login-buttons"):
                yield Button("Sign in", variant="primary", id="sign-in")
                yield Button("Sign up", variant="default", id="sign-up")

    def on_mount(self) -> None:
        self.query_one("#email", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "email":
            self.query_one("#password", Input).focus()
        else:
            self._submit(create=False)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self._submit(create=event.button.id == "sign-up")

    def _submit(self, create: bool) -> None:
        email = self.query_one("#email", Input).value
        password = self.query_one("#password", Input).value
        if not email.strip():
            return

        try:
            if create:
                user = self.auth.sign_up(email, password)
            else:
                user = self.auth.sign_in(email, password)
        except AuthError as e:
            self.query_one("#login-message", Label).update(str(e))
            return
        self.dismiss(user)


class EditFieldScreen(ModalScreen[str | None]):
    """Single-field editor used for task descriptions, hours and the display name."""

    CSS = """
    EditFieldScreen {
        align: center middle;
    }

    #field-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #field-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #field-dialog Input {
        width: 100%;
    }

    #field-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #field-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str, value: str = "", placeholder: str = "", numeric: bool = False):
        super().__init__()
        self.title_text = title
        self.value = value
        self.placeholder = placeholder
        self.numeric = numeric

    def compose(self) -> ComposeResult:
        with Vertical(id="field-dialog"):
            yield Label(self.title_text, id="field-title")
            yield Input(value=self.value, placeholder=self.placeholder, id="field-value")
            with Horizontal(id="field-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#field-value", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def check_value(self, value: str) -> str | None:
        """Return an error message, or None if the value can be saved."""
        if not self.numeric or not value:
            return None
        try:
            hours = Decimal(value)
        except InvalidOperation:
            return "Hours must be a number"
        if not hours.is_finite():
            return "Hours must be a number"
        if hours < 0:
            return "Hours cannot be negative"
        return None

    def _save(self) -> None:
        value = self.query_one("#field-value", Input).value.strip()
        error = self.check_value(value)
        if error:
            self.app.notify(error, severity="error")
            return
        self.dismiss(value)


class DatePickerScreen(ModalScreen[date | None]):
    """Month calendar for jumping to a date."""

    CSS = """
    DatePickerScreen {
        align: center middle;
    }

    #picker-dialog {
        width: 40;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #picker-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #picker-table {
        height: auto;
    }

    #picker-help {
        width: 100%;
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Close"),
        Binding("left_square_bracket", "prev_month", "Prev month"),
        Binding("right_square_bracket", "next_month", "Next month"),
    ]

    def __init__(self, current: date):
        super().__init__()
        self.current = current
        self.year = current.year
        self.month = current.month
        self.weeks: list[list[date | None]] = month_calendar(self.year, self.month)

    def compose(self) -> ComposeResult:
        with Vertical(id="picker-dialog"):
            yield Label("", id="picker-title")
            yield DataTable(id="picker-table")
            yield Label("Enter: select   [ ]: month   Esc: close", id="picker-help")

    def on_mount(self) -> None:
        table = self.query_one("#picker-table", DataTable)
        table.cursor_type = "cell"
        for label in ("S", "M", "T", "W", "T", "F", "S"):
            table.add_column(label, width=3)
        self._rebuild()
        table.focus()

    def _rebuild(self) -> None:
        self.weeks = month_calendar(self.year, self.month)
        self.query_one("#picker-title", Label).update(date(self.year, self.month, 1).strftime("%B %Y"))

        table = self.query_one("#picker-table", DataTable)
        table.clear()
        today = date.today()
        for week in self.weeks:
            cells = []
            for d in week:
                if d is None:
                    cells.append("")
                elif d == self.current:
                    cells.append(Text(f"{d.day:>2}", style="reverse"))
                elif d == today:
                    cells.append(Text(f"{d.day:>2}", style="bold underline"))
                else:
                    cells.append(f"{d.day:>2}")
            table.add_row(*cells)

    def date_at(self, row: int, column: int) -> date | None:
        if 0 <= row < len(self.weeks) and 0 <= column < 7:
            return self.weeks[row][column]
        return None

    def on_data_table_cell_selected(self, event: DataTable.CellSelected) -> None:
        picked = self.date_at(event.coordinate.row, event.coordinate.column)
        if picked is not None:
            self.dismiss(picked)

    def action_prev_month(self) -> None:
        self._move_month(-1)

    def action_next_month(self) -> None:
        self._move_month(1)

    def _move_month(self, direction: int) -> None:
        first = shift_date(date(self.year, self.month, 1), "month", direction)
        self.year, self.month = first.year, first.month
        self._rebuild()

    def action_cancel(self) -> None:
        self.dismiss(None)
