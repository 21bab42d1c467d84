"""Calendar helpers for building the visible day grid."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from calendar import monthrange

from models import Day, VIEW_MODES

DATE_KEY_FORMAT = "%d/%m/%Y"

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def normalize_date(value: date | datetime) -> date:
    """Strip the time of day, leaving the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def format_date_key(d: date) -> str:
    """Key used for a day in the entry collection and the row store (DD/MM/YYYY)."""
    return d.strftime(DATE_KEY_FORMAT)


def parse_date_key(key: str) -> date:
    return datetime.strptime(key, DATE_KEY_FORMAT).date()


def make_day(d: date) -> Day:
    return Day(
        date=d,
        key=format_date_key(d),
        day_name=DAY_NAMES[d.weekday()],
        # Saturday = 5, Sunday = 6 in weekday()
        is_weekend=d.weekday() >= 5,
    )


def get_week_start(d: date) -> date:
    """Get the Monday that starts the week containing date d."""
    # Counting Sunday as 0, Sunday is 6 days after Monday, any other day is weekday - 1
    sunday_based = (d.weekday() + 1) % 7
    offset = 6 if sunday_based == 0 else sunday_based - 1
    return d - timedelta(days=offset)


def get_month_days(year: int, month: int) -> list[date]:
    """Every date from the 1st to the last day of the month."""
    last_day = monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, last_day + 1)]


def build_days(reference: date | datetime, view_mode: str) -> list[Day]:
    """Ordered days shown for a reference date in the given view mode."""
    d = normalize_date(reference)

    if view_mode == "day":
        dates = [d]
    elif view_mode == "week":
        start = get_week_start(d)
        dates = [start + timedelta(days=i) for i in range(7)]
    elif view_mode == "month":
        dates = get_month_days(d.year, d.month)
    else:
        raise ValueError(f"Unknown view mode: {view_mode!r} (expected one of {VIEW_MODES})")

    return [make_day(x) for x in dates]


def shift_date(current: date, view_mode: str, direction: int) -> date:
    """Move the reference date by one unit of the view mode.

    Month steps keep the day of month where possible and clamp it to the
    length of the target month (Jan 31 + 1 month -> Feb 28/29).
    """
    if view_mode == "day":
        return current + timedelta(days=direction)
    if view_mode == "week":
        return current + timedelta(days=7 * direction)
    if view_mode == "month":
        month_index = current.year * 12 + (current.month - 1) + direction
        year, month = divmod(month_index, 12)
        month += 1
        day = min(current.day, monthrange(year, month)[1])
        return date(year, month, day)
    raise ValueError(f"Unknown view mode: {view_mode!r}")


def month_calendar(year: int, month: int) -> list[list[date | None]]:
    """Sunday-first week rows for the date picker, padded with None."""
    days: list[date | None] = []
    first = date(year, month, 1)
    days.extend([None] * ((first.weekday() + 1) % 7))
    days.extend(get_month_days(year, month))
    while len(days) % 7:
        days.append(None)
    return [days[i:i + 7] for i in range(0, len(days), 7)]


def period_title(reference: date, view_mode: str) -> str:
    """Header text for the visible period."""
    if view_mode == "month":
        return reference.strftime("%B %Y")
    if view_mode == "week":
        start = get_week_start(reference)
        end = start + timedelta(days=6)
        return f"{start.strftime('%a %d %b')} - {end.strftime('%a %d %b %Y')}"
    return reference.strftime("%A %d %B %Y")


def get_holidays_in_range(start: date, end: date, country: str = "GB", subdiv: str | None = "ENG") -> dict[date, str]:
    """Get public holidays for a country in a date range."""
    import holidays

    years = list(range(start.year, end.year + 1))
    calendar = holidays.country_holidays(country, subdiv=subdiv, years=years)
    return {d: name for d, name in calendar.items() if start <= d <= end}
