import sys
import unittest
from datetime import date

from truckload.errors import InvalidRecordError
from truckload.records import LoadingStatus, records_frame
from truckload.schemas import parse_form, parse_row

ROW = {
    "id": 7,
    "truck_id": "ABC-1234",
    "cotacao": "Soja",
    "quantity": "30 t",
    "carrier": "Transportes Solar",
    "start_date": "2024-01-01T00:00:00+00:00",
    "end_date": "2024-01-03",
    "completed_date": None,
    "is_completed": False,
    "status": "pending",
    "notes": "",
    "created_at": "2024-01-01T10:00:00+00:00",
}

FORM = {
    "truck_id": "ABC-1234",
    "quotation_ref": "Soja",
    "quantity": "30 t",
    "carrier": "Transportes Solar",
    "start_date": "2024-01-01",
    "end_date": "2024-01-02",
}


class TestParseRow(unittest.TestCase):
    def test_maps_store_columns(self):
        record = parse_row(ROW)
        self.assertEqual(record.id, "7")
        self.assertEqual(record.quotation_ref, "Soja")
        self.assertEqual(record.start_date, "2024-01-01")
        self.assertEqual(record.end_date, "2024-01-03")
        self.assertIsNone(record.notes)
        self.assertIs(record.status, LoadingStatus.PENDING)

    def test_completion_is_derived_from_status(self):
        record = parse_row({**ROW, "status": "pending", "is_completed": True})
        self.assertFalse(record.is_completed)
        record = parse_row({**ROW, "status": "completed", "is_completed": False})
        self.assertTrue(record.is_completed)

    def test_unknown_status_is_rejected(self):
        with self.assertRaises(InvalidRecordError):
            parse_row({**ROW, "status": "in_transit"})

    def test_missing_or_malformed_dates_are_rejected(self):
        with self.assertRaises(InvalidRecordError):
            parse_row({**ROW, "start_date": None})
        with self.assertRaises(InvalidRecordError):
            parse_row({**ROW, "end_date": "2024-13-40"})

    @unittest.skipIf(sys.version_info < (3, 11), "basic ISO dates need Python 3.11")
    def test_basic_format_dates_are_stored_extended(self):
        record = parse_row({**ROW, "start_date": "20240105", "end_date": "2024-01-06"})
        self.assertEqual(record.start_date, "2024-01-05")
        self.assertEqual(record.end_date, "2024-01-06")

    def test_date_objects_are_stored_as_iso_strings(self):
        record = parse_row({**ROW, "start_date": date(2024, 1, 5), "completed_date": date(2024, 1, 6)})
        self.assertEqual(record.start_date, "2024-01-05")
        self.assertEqual(record.completed_date, "2024-01-06")

    def test_records_frame(self):
        df = records_frame([parse_row(ROW), parse_row({**ROW, "id": 8, "status": "completed"})])
        self.assertEqual(len(df), 2)
        self.assertEqual(df["is_completed"].tolist(), [False, True])
        self.assertEqual(df["status"].tolist(), ["pending", "completed"])
        self.assertTrue(records_frame([]).empty)


class TestLoadingForm(unittest.TestCase):
    def test_completed_defaults_completed_date_to_today(self):
        form = parse_form({**FORM, "start_date": date(2024, 1, 1), "status": "completed"})
        payload = form.to_store_payload(today=date(2024, 1, 5))
        self.assertEqual(payload["completed_date"], "2024-01-05")
        self.assertTrue(payload["is_completed"])
        self.assertEqual(payload["status"], "completed")
        self.assertEqual(payload["start_date"], "2024-01-01")
        self.assertEqual(payload["cotacao"], "Soja")

    def test_empty_form_is_rejected(self):
        with self.assertRaises(InvalidRecordError):
            parse_form({"status": "pending"})

    def test_each_required_field_is_enforced(self):
        for name in ("truck_id", "quotation_ref", "quantity", "carrier", "start_date", "end_date"):
            with self.subTest(field=name):
                with self.assertRaises(InvalidRecordError):
                    parse_form({**FORM, name: "  "})
                missing = {k: v for k, v in FORM.items() if k != name}
                with self.assertRaises(InvalidRecordError):
                    parse_form(missing)

    def test_optional_fields_become_null(self):
        form = parse_form({**FORM, "completed_date": "", "notes": " ", "status": "pending"})
        payload = form.to_store_payload(today=date(2024, 1, 5))
        self.assertIsNone(payload["completed_date"])
        self.assertIsNone(payload["notes"])
        self.assertFalse(payload["is_completed"])

    def test_explicit_completed_date_is_kept(self):
        form = parse_form({**FORM, "status": "completed", "completed_date": "2024-01-03"})
        self.assertEqual(form.to_store_payload(today=date(2024, 1, 5))["completed_date"], "2024-01-03")

    def test_bad_status(self):
        with self.assertRaises(InvalidRecordError):
            parse_form({**FORM, "status": "done"})


if __name__ == "__main__":
    unittest.main(verbosity=2)
