from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from truckload.aggregation import compute_status_counts
from truckload.dates import (
    MONTH_NAMES,
    WEEKDAY_NAMES,
    days_in_month,
    is_date_in_range,
    is_today,
    month_end,
    month_start,
    ranges_overlap,
    shift_month,
    week_days,
)
from truckload.filters import CalendarState
from truckload.records import BADGE_LABELS, LoadingRecord

MONTH_CELL_VISIBLE = 2


def records_for_day(records: Iterable[LoadingRecord], day: date) -> List[LoadingRecord]:
    return [r for r in records if is_date_in_range(day, r.start_date, r.end_date)]


def records_for_range(records: Iterable[LoadingRecord], start: date, end: date) -> List[LoadingRecord]:
    return [r for r in records if ranges_overlap(r.start_date, r.end_date, start, end)]


def navigate(state: CalendarState, direction: int) -> CalendarState:
    anchor = state.anchor
    if state.view == "month":
        year, month = shift_month(anchor.year, anchor.month, direction)
        return replace(state, anchor=date(year, month, 1))
    if state.view == "week":
        return replace(state, anchor=anchor + timedelta(days=7 * direction))
    return replace(state, anchor=anchor + timedelta(days=direction))


def view_range(state: CalendarState) -> Tuple[date, date]:
    anchor = state.anchor
    if state.view == "month":
        return month_start(anchor.year, anchor.month), month_end(anchor.year, anchor.month)
    if state.view == "week":
        days = week_days(anchor)
        return days[0], days[-1]
    return anchor, anchor


def calendar_title(state: CalendarState) -> str:
    anchor = state.anchor
    if state.view == "month":
        return f"{MONTH_NAMES[anchor.month - 1]} {anchor.year}"
    if state.view == "week":
        days = week_days(anchor)
        start, end = days[0], days[-1]
        return f"{start.day} - {end.day} {MONTH_NAMES[end.month - 1]} {end.year}"
    return f"{anchor.day} {MONTH_NAMES[anchor.month - 1]} {anchor.year}"


def _entry(record: LoadingRecord) -> Dict[str, Any]:
    out = record.to_dict()
    out["status_label"] = BADGE_LABELS[record.status]
    return out


def _day_cell(records: List[LoadingRecord], day: date, today: date, *, limit: Optional[int] = None) -> Dict[str, Any]:
    day_records = records_for_day(records, day)
    shown = day_records if limit is None else day_records[:limit]
    return {
        "date": day.isoformat(),
        "day": day.day,
        "weekday": WEEKDAY_NAMES[(day.weekday() + 1) % 7],
        "is_today": is_today(day, today),
        "records": [_entry(r) for r in shown],
        "overflow": len(day_records) - len(shown),
    }


def compute_calendar(state: CalendarState, records: Iterable[LoadingRecord], *, today: Optional[date] = None) -> Dict[str, Any]:
    records = list(records)
    today = today or date.today()
    start, end = view_range(state)
    counts = compute_status_counts(records_for_range(records, start, end))

    payload: Dict[str, Any] = {
        "view": state.view,
        "anchor": state.anchor.isoformat(),
        "title": calendar_title(state),
        "range": {"start": start.isoformat(), "end": end.isoformat()},
        "stats": {"pending": counts.pending, "completed": counts.completed, "cancelled": counts.cancelled},
        "weekday_names": list(WEEKDAY_NAMES),
    }

    if state.view == "month":
        days = days_in_month(state.anchor.year, state.anchor.month)
        payload["leading_blanks"] = (days[0].weekday() + 1) % 7
        payload["cells"] = [_day_cell(records, d, today, limit=MONTH_CELL_VISIBLE) for d in days]
    elif state.view == "week":
        payload["cells"] = [_day_cell(records, d, today) for d in week_days(state.anchor)]
    else:
        payload["cells"] = [_day_cell(records, state.anchor, today)]
    return payload
