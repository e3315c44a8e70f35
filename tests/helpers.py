from truckload.records import LoadingRecord, LoadingStatus


def make_record(record_id="1", *, start="2024-01-01", end="2024-01-01", status=LoadingStatus.PENDING, **kwargs) -> LoadingRecord:
    fields = {
        "truck_id": f"TRK-{record_id}",
        "quotation_ref": "Soja",
        "quantity": "30 t",
        "carrier": "Transportes Solar",
    }
    fields.update(kwargs)
    return LoadingRecord(id=str(record_id), start_date=start, end_date=end, status=status, **fields)
