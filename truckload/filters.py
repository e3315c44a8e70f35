from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from truckload.dates import parse_iso_date

STATUS_FILTERS = ("all", "pending", "completed", "cancelled")
PERIOD_FILTERS = ("all", "current_month", "current_week", "next_week")
CALENDAR_VIEWS = ("month", "week", "day")


@dataclass(frozen=True)
class TableFilters:
    truck_query: str = ""
    carrier_query: str = ""
    quotation_query: str = ""
    status: str = "all"
    period: str = "all"


@dataclass(frozen=True)
class CalendarState:
    view: str = "month"
    anchor: date = field(default_factory=date.today)


def _choice(value: object, options: tuple, default: str) -> str:
    text = str(value or "").strip().lower()
    return text if text in options else default


def normalize_table_filters(raw: Optional[dict]) -> TableFilters:
    raw = raw or {}
    return TableFilters(
        truck_query=str(raw.get("truck_query") or "").strip(),
        carrier_query=str(raw.get("carrier_query") or "").strip(),
        quotation_query=str(raw.get("quotation_query") or "").strip(),
        status=_choice(raw.get("status"), STATUS_FILTERS, "all"),
        period=_choice(raw.get("period"), PERIOD_FILTERS, "all"),
    )


def normalize_calendar_state(raw: Optional[dict], *, today: Optional[date] = None) -> CalendarState:
    raw = raw or {}
    today = today or date.today()
    anchor = raw.get("anchor")
    try:
        anchor = parse_iso_date(anchor) if anchor else today
    except ValueError:
        anchor = today
    return CalendarState(view=_choice(raw.get("view"), CALENDAR_VIEWS, "month"), anchor=anchor)
