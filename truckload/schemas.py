from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from truckload.dates import parse_iso_date, to_iso_date
from truckload.errors import InvalidRecordError
from truckload.records import LoadingRecord, LoadingStatus


def _iso_or_none(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    # raises ValueError on malformed dates
    return parse_iso_date(to_iso_date(value)).isoformat()


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class LoadingRowModel(BaseModel):
    """A row of the ``truck_loadings`` table as returned by the store."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    truck_id: str = ""
    quotation_ref: str = Field(default="", alias="cotacao")
    quantity: str = ""
    carrier: str = ""
    start_date: str
    end_date: str
    completed_date: Optional[str] = None
    status: LoadingStatus = LoadingStatus.PENDING
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> str:
        return str(value)

    @field_validator("truck_id", "quotation_ref", "quantity", "carrier", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _required_date(cls, value: Any) -> str:
        iso = _iso_or_none(value)
        if iso is None:
            raise ValueError("date is required")
        return iso

    @field_validator("completed_date", mode="before")
    @classmethod
    def _optional_date(cls, value: Any) -> Optional[str]:
        return _iso_or_none(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> LoadingStatus:
        if value is None:
            return LoadingStatus.PENDING
        return LoadingStatus.parse(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> Optional[str]:
        return _blank_to_none(value)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _timestamps(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    def to_record(self) -> LoadingRecord:
        return LoadingRecord(
            id=self.id,
            truck_id=self.truck_id,
            quotation_ref=self.quotation_ref,
            quantity=self.quantity,
            carrier=self.carrier,
            start_date=self.start_date,
            end_date=self.end_date,
            status=self.status,
            completed_date=self.completed_date,
            notes=self.notes,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class LoadingFormModel(BaseModel):
    """Create/edit payload coming from the record form."""

    truck_id: str
    quotation_ref: str
    quantity: str
    carrier: str
    start_date: str
    end_date: str
    completed_date: Optional[str] = None
    status: LoadingStatus = LoadingStatus.PENDING
    notes: Optional[str] = None

    @field_validator("truck_id", "quotation_ref", "quantity", "carrier", mode="before")
    @classmethod
    def _required_text(cls, value: Any) -> str:
        text = _blank_to_none(value)
        if text is None:
            raise ValueError("field is required")
        return text

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> Optional[str]:
        return _blank_to_none(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _required_date(cls, value: Any) -> str:
        iso = _iso_or_none(value)
        if iso is None:
            raise ValueError("date is required")
        return iso

    @field_validator("completed_date", mode="before")
    @classmethod
    def _optional_date(cls, value: Any) -> Optional[str]:
        return _iso_or_none(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> LoadingStatus:
        return LoadingStatus.parse(value or LoadingStatus.PENDING)

    def to_store_payload(self, *, today: Optional[date] = None) -> Dict[str, Any]:
        """Column dict for insert/update; completed rows default completed_date to today."""
        completed_date = self.completed_date
        if self.status is LoadingStatus.COMPLETED and completed_date is None:
            completed_date = (today or date.today()).isoformat()
        return {
            "truck_id": self.truck_id,
            "cotacao": self.quotation_ref,
            "quantity": self.quantity,
            "carrier": self.carrier,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "completed_date": completed_date,
            "status": self.status.value,
            "is_completed": self.status is LoadingStatus.COMPLETED,
            "notes": self.notes,
        }


def parse_row(row: Mapping[str, Any]) -> LoadingRecord:
    try:
        return LoadingRowModel.model_validate(dict(row)).to_record()
    except ValidationError as exc:
        raise InvalidRecordError(f"Invalid loading row {row.get('id')!r}: {exc}") from exc


def parse_form(raw: Mapping[str, Any]) -> LoadingFormModel:
    try:
        return LoadingFormModel.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidRecordError(f"Invalid loading form: {exc}") from exc
