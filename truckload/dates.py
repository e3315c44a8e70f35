from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

DateLike = Union[date, datetime, str]

MONTH_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]
WEEKDAY_NAMES = ["Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb"]


def to_iso_date(value: DateLike) -> str:
    """Normalize a date, datetime or date-ish string to ``YYYY-MM-DD``.

    Strings keep their first 10 characters (``2024-01-02T10:00:00`` ->
    ``2024-01-02``); no timezone conversion happens.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()[:10]


def parse_iso_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(to_iso_date(value))


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_in_month(year: int, month: int) -> List[date]:
    last = calendar.monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, last + 1)]


def month_start(year: int, month: int) -> date:
    return date(year, month, 1)


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def week_days(anchor: Union[date, datetime]) -> List[date]:
    """Sunday..Saturday of the week containing ``anchor``."""
    day = _as_date(anchor)
    # date.weekday(): Monday=0 .. Sunday=6
    sunday = day - timedelta(days=(day.weekday() + 1) % 7)
    return [sunday + timedelta(days=i) for i in range(7)]


def is_same_day(d1: Union[date, datetime], d2: Union[date, datetime]) -> bool:
    return (d1.year, d1.month, d1.day) == (d2.year, d2.month, d2.day)


def is_today(value: Union[date, datetime], today: Optional[date] = None) -> bool:
    return is_same_day(value, today or date.today())


def is_date_in_range(value: DateLike, start_date: DateLike, end_date: DateLike) -> bool:
    check = to_iso_date(value)
    return to_iso_date(start_date) <= check <= to_iso_date(end_date)


def ranges_overlap(start: DateLike, end: DateLike, range_start: DateLike, range_end: DateLike) -> bool:
    """True when [start, end] intersects [range_start, range_end] (all inclusive)."""
    return to_iso_date(start) <= to_iso_date(range_end) and to_iso_date(end) >= to_iso_date(range_start)


def iter_days(start: DateLike, end: DateLike) -> List[date]:
    """Inclusive day span; empty when ``end`` precedes ``start``."""
    first, last = parse_iso_date(start), parse_iso_date(end)
    if last < first:
        return []
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def format_display_date(value: DateLike) -> str:
    d = parse_iso_date(value)
    return f"{d.day:02d}/{d.month:02d}"


def format_full_date(value: Optional[DateLike]) -> str:
    if value is None or value == "":
        return "-"
    d = parse_iso_date(value)
    return f"{d.day:02d}/{d.month:02d}/{d.year}"


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1
