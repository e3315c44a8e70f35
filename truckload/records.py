from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from truckload.errors import InvalidRecordError


class LoadingStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: object) -> "LoadingStatus":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidRecordError(f"Unknown loading status: {value!r}") from None


STATUS_ORDER = [LoadingStatus.PENDING, LoadingStatus.COMPLETED, LoadingStatus.CANCELLED]

# Chart/legend labels, badge labels (table + calendar) and bar labels differ in the UI.
STATUS_LABELS = {
    LoadingStatus.PENDING: "Pendente",
    LoadingStatus.COMPLETED: "Concluído",
    LoadingStatus.CANCELLED: "Cancelado",
}
BADGE_LABELS = {
    LoadingStatus.PENDING: "Pendente",
    LoadingStatus.COMPLETED: "Realizado",
    LoadingStatus.CANCELLED: "Cancelado",
}
BAR_LABELS = {
    LoadingStatus.PENDING: "Pendentes",
    LoadingStatus.COMPLETED: "Concluídos",
    LoadingStatus.CANCELLED: "Cancelados",
}
STATUS_COLORS = {
    LoadingStatus.PENDING: "#3b82f6",
    LoadingStatus.COMPLETED: "#10b981",
    LoadingStatus.CANCELLED: "#ef4444",
}


@dataclass(frozen=True)
class LoadingRecord:
    """One truck loading window as read from the store.

    ``status`` is the only completion flag; ``is_completed`` is derived from it.
    Dates are ``YYYY-MM-DD`` strings.
    """

    id: str
    truck_id: str
    quotation_ref: str
    quantity: str
    carrier: str
    start_date: str
    end_date: str
    status: LoadingStatus = LoadingStatus.PENDING
    completed_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status is LoadingStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["status"] = self.status.value
        out["is_completed"] = self.is_completed
        return out


RECORD_COLUMNS = [
    "id",
    "truck_id",
    "quotation_ref",
    "quantity",
    "carrier",
    "start_date",
    "end_date",
    "completed_date",
    "is_completed",
    "status",
    "notes",
]


def records_frame(records: Iterable[LoadingRecord]) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = [r.to_dict() for r in records]
    if not rows:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    return pd.DataFrame(rows)[RECORD_COLUMNS]
