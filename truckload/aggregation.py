from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import pandas as pd

from truckload.dates import iter_days
from truckload.records import STATUS_LABELS, STATUS_ORDER, LoadingRecord, LoadingStatus


@dataclass(frozen=True)
class DailyCount:
    date: str
    count: int


@dataclass(frozen=True)
class StatusCount:
    pending: int = 0
    completed: int = 0
    cancelled: int = 0

    @property
    def total(self) -> int:
        return self.pending + self.completed + self.cancelled

    def get(self, status: LoadingStatus) -> int:
        return getattr(self, status.value)


@dataclass(frozen=True)
class StatusPercentage:
    status: str
    label: str
    count: int
    percentage: float


def compute_daily_counts(records: Iterable[LoadingRecord]) -> List[DailyCount]:
    """Count, for each day, how many loading windows cover it.

    A record spanning N days lands in N buckets. Records whose end date precedes
    the start date cover no days.
    """
    spans = pd.Series([iter_days(r.start_date, r.end_date) for r in records], dtype=object)
    days = spans.explode().dropna()
    if days.empty:
        return []
    counts = days.map(lambda d: d.isoformat()).value_counts().sort_index()
    return [DailyCount(date=str(day), count=int(n)) for day, n in counts.items()]


def compute_status_counts(records: Iterable[LoadingRecord]) -> StatusCount:
    tally = {status: 0 for status in STATUS_ORDER}
    for record in records:
        # LoadingStatus is closed; anything else was rejected when the row was parsed.
        tally[record.status] += 1
    return StatusCount(
        pending=tally[LoadingStatus.PENDING],
        completed=tally[LoadingStatus.COMPLETED],
        cancelled=tally[LoadingStatus.CANCELLED],
    )


def compute_status_percentages(counts: StatusCount) -> List[StatusPercentage]:
    total = counts.total
    out: List[StatusPercentage] = []
    for status in STATUS_ORDER:
        count = counts.get(status)
        pct = (count / total) * 100 if total else 0.0
        out.append(StatusPercentage(status=status.value, label=STATUS_LABELS[status], count=count, percentage=pct))
    return out


def daily_counts_frame(daily: Sequence[DailyCount]) -> pd.DataFrame:
    if not daily:
        return pd.DataFrame(columns=["date", "count"])
    df = pd.DataFrame([{"date": d.date, "count": d.count} for d in daily])
    df["date"] = pd.to_datetime(df["date"])
    return df
