from __future__ import annotations

from dataclasses import asdict
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from truckload.dates import format_full_date, month_end, month_start, ranges_overlap, week_days
from truckload.filters import TableFilters
from truckload.records import BADGE_LABELS, LoadingRecord, LoadingStatus, records_frame

EXPORT_COLUMNS = {
    "truck_id": "Caminhão",
    "carrier": "Transportadora",
    "quotation_ref": "Cotação",
    "quantity": "Quantidade",
    "start_date": "Início",
    "end_date": "Fim",
    "completed_date": "Data Realizado",
    "status": "Status",
    "notes": "Observações",
}


def period_bounds(period: str, today: date) -> Optional[Tuple[date, date]]:
    if period == "current_month":
        return month_start(today.year, today.month), month_end(today.year, today.month)
    if period == "current_week":
        days = week_days(today)
        return days[0], days[-1]
    if period == "next_week":
        days = week_days(today + timedelta(days=7))
        return days[0], days[-1]
    return None


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def filter_records(records: Iterable[LoadingRecord], filters: TableFilters, *, today: Optional[date] = None) -> List[LoadingRecord]:
    out = list(records)
    if filters.truck_query:
        out = [r for r in out if _contains(r.truck_id, filters.truck_query)]
    if filters.carrier_query:
        out = [r for r in out if _contains(r.carrier, filters.carrier_query)]
    if filters.quotation_query:
        out = [r for r in out if _contains(r.quotation_ref, filters.quotation_query)]
    if filters.status != "all":
        out = [r for r in out if r.status.value == filters.status]

    bounds = period_bounds(filters.period, today or date.today())
    if bounds is not None:
        lo, hi = bounds
        out = [r for r in out if ranges_overlap(r.start_date, r.end_date, lo, hi)]

    return sorted(out, key=lambda r: (r.start_date, r.truck_id))


def next_status(status: LoadingStatus) -> LoadingStatus:
    """Status a click on the table badge moves to."""
    if status is LoadingStatus.PENDING:
        return LoadingStatus.COMPLETED
    return LoadingStatus.PENDING


def table_row(record: LoadingRecord) -> Dict[str, Any]:
    row = record.to_dict()
    row["window"] = f"{format_full_date(record.start_date)} até {format_full_date(record.end_date)}"
    row["completed_display"] = format_full_date(record.completed_date)
    row["status_label"] = BADGE_LABELS[record.status]
    return row


def compute_table(filters: TableFilters, records: Iterable[LoadingRecord], *, today: Optional[date] = None) -> Dict[str, Any]:
    rows = filter_records(records, filters, today=today)
    return {
        "filters": asdict(filters),
        "rows": [table_row(r) for r in rows],
        "count": len(rows),
    }


def export_frame(records: Iterable[LoadingRecord]) -> pd.DataFrame:
    df = records_frame(records)
    df["status"] = df["status"].map(lambda s: BADGE_LABELS[LoadingStatus(s)])
    return df[list(EXPORT_COLUMNS)].rename(columns=EXPORT_COLUMNS)
