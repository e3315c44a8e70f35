from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from supabase import Client, create_client

from truckload.config import Settings
from truckload.errors import InvalidRecordError, StoreError
from truckload.records import LoadingRecord, LoadingStatus, records_frame
from truckload.schemas import LoadingFormModel, parse_row

logger = logging.getLogger(__name__)


def get_client(settings: Settings) -> Client:
    url, key = settings.require_credentials()
    return create_client(url, key)


class LoadingRepository:
    """CRUD over the ``truck_loadings`` table of the remote store."""

    def __init__(self, client: Any, table: str = "truck_loadings") -> None:
        self._client = client
        self._table = table

    def _query(self):
        return self._client.table(self._table)

    def fetch_rows(self) -> List[Dict[str, Any]]:
        try:
            response = self._query().select("*").order("start_date", desc=False).execute()
        except Exception as exc:
            logger.exception("fetch %s failed", self._table)
            raise StoreError(f"Could not load loadings: {exc}") from exc
        return list(response.data or [])

    def list_all(self) -> List[LoadingRecord]:
        return [parse_row(row) for row in self.fetch_rows()]

    def get(self, record_id: str) -> Optional[LoadingRecord]:
        try:
            response = self._query().select("*").eq("id", record_id).execute()
        except Exception as exc:
            logger.exception("get %s failed", record_id)
            raise StoreError(f"Could not load loading {record_id}: {exc}") from exc
        rows = response.data or []
        return parse_row(rows[0]) if rows else None

    def insert(self, form: LoadingFormModel, *, today: Optional[date] = None) -> None:
        payload = form.to_store_payload(today=today)
        try:
            self._query().insert([payload]).execute()
        except Exception as exc:
            logger.exception("insert failed for truck %s", form.truck_id)
            raise StoreError(f"Could not save loading: {exc}") from exc
        logger.info("Inserted loading for truck %s", form.truck_id)

    def update(self, record_id: str, form: LoadingFormModel, *, today: Optional[date] = None) -> None:
        self._update(record_id, form.to_store_payload(today=today))

    def delete(self, record_id: str) -> None:
        try:
            self._query().delete().eq("id", record_id).execute()
        except Exception as exc:
            logger.exception("delete %s failed", record_id)
            raise StoreError(f"Could not delete loading {record_id}: {exc}") from exc
        logger.info("Deleted loading %s", record_id)

    def set_status(self, record_id: str, status: LoadingStatus, *, today: Optional[date] = None) -> None:
        completed = status is LoadingStatus.COMPLETED
        self._update(
            record_id,
            {
                "status": status.value,
                "is_completed": completed,
                "completed_date": (today or date.today()).isoformat() if completed else None,
            },
        )

    def _update(self, record_id: str, payload: Mapping[str, Any]) -> None:
        try:
            self._query().update(dict(payload)).eq("id", record_id).execute()
        except Exception as exc:
            logger.exception("update %s failed", record_id)
            raise StoreError(f"Could not update loading {record_id}: {exc}") from exc
        logger.info("Updated loading %s", record_id)


def load_dashboard_data(repository: LoadingRepository) -> Dict[str, object]:
    """Fetch a fresh snapshot; rows violating the record contract are logged and counted."""
    records: List[LoadingRecord] = []
    rejected = 0
    for row in repository.fetch_rows():
        try:
            records.append(parse_row(row))
        except InvalidRecordError:
            logger.warning("Rejected loading row %r", row.get("id"), exc_info=True)
            rejected += 1
    return {"records": records, "frame": records_frame(records), "rejected": rejected}
