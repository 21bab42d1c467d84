"""Custom widgets for the work tracker."""

from __future__ import annotations

from decimal import Decimal

from textual.widgets import Static
from rich.text import Text

from summary import format_hours


class DashboardHeader(Static):
    """Shows the welcome line on the left and the visible period on the right."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.name_text = ""
        self.period = ""
        self.view_mode = ""

    def update_display(self, name: str, period: str, view_mode: str):
        self.name_text = name
        self.period = period
        self.view_mode = view_mode

        text = Text()
        text.append(f"Welcome, {name}", style="bold")
        text.append("   ")
        text.append("◄ ", style="bold")
        text.append(period, style="bold")
        text.append(" ►", style="bold")
        text.append(f"   [{view_mode.capitalize()}]", style="dim")

        self.update(text)

    def on_click(self, event) -> None:
        """Clicking the left half goes back a period, the right half forward."""
        if event.x < self.size.width // 2:
            self.app.action_prev_period()  # type: ignore[attr-defined]
        else:
            self.app.action_next_period()  # type: ignore[attr-defined]


class StatsBar(Static):
    """Total hours for the visible days."""

    def update_display(self, label: str, total: Decimal):
        text = Text()
        text.append(f"{label}: ")
        text.append(f"{format_hours(total)} hrs", style="bold")
        self.update(text)
