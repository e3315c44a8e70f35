import unittest
from datetime import date
from types import SimpleNamespace

from truckload.data import LoadingRepository, load_dashboard_data
from truckload.errors import InvalidRecordError, StoreError
from truckload.records import LoadingStatus
from truckload.schemas import parse_form


class FakeQuery:
    """Minimal stand-in for the store's chained query builder."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = None
        self.payload = None
        self.filters = []
        self.order_by = None

    def select(self, *_columns):
        self.op = "select"
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def insert(self, rows):
        self.op, self.payload = "insert", rows
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def _matches(self, row):
        return all(str(row.get(col)) == str(val) for col, val in self.filters)

    def execute(self):
        self.client.calls.append(self)
        if self.client.fail:
            raise RuntimeError("connection reset")
        rows = self.client.rows
        if self.op == "select":
            data = [dict(r) for r in rows if self._matches(r)]
            if self.order_by:
                column, desc = self.order_by
                data.sort(key=lambda r: r[column], reverse=desc)
            return SimpleNamespace(data=data)
        if self.op == "insert":
            for row in self.payload:
                rows.append({"id": str(len(rows) + 100), **row})
            return SimpleNamespace(data=self.payload)
        if self.op == "update":
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
            return SimpleNamespace(data=[])
        if self.op == "delete":
            self.client.rows = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=[])
        raise AssertionError(f"unexpected op {self.op}")


class FakeClient:
    def __init__(self, rows=None, fail=False):
        self.rows = list(rows or [])
        self.fail = fail
        self.calls = []
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return FakeQuery(self, name)


def row(record_id, start, end, status="pending", **extra):
    out = {
        "id": record_id,
        "truck_id": f"TRK-{record_id}",
        "cotacao": "Soja",
        "quantity": "30 t",
        "carrier": "Transportes Solar",
        "start_date": start,
        "end_date": end,
        "completed_date": None,
        "is_completed": status == "completed",
        "status": status,
        "notes": None,
    }
    out.update(extra)
    return out


class TestLoadingRepository(unittest.TestCase):
    def setUp(self):
        self.client = FakeClient(
            [
                row("2", "2024-01-05", "2024-01-06"),
                row("1", "2024-01-01", "2024-01-02", status="completed", completed_date="2024-01-02"),
            ]
        )
        self.repo = LoadingRepository(self.client, table="truck_loadings")

    def test_list_all_orders_by_start_date(self):
        records = self.repo.list_all()
        self.assertEqual([r.id for r in records], ["1", "2"])
        self.assertEqual(self.client.calls[-1].order_by, ("start_date", False))
        self.assertEqual(self.client.tables, ["truck_loadings"])

    def test_get(self):
        self.assertEqual(self.repo.get("2").truck_id, "TRK-2")
        self.assertIsNone(self.repo.get("missing"))

    def test_insert_writes_store_columns(self):
        form = parse_form({"truck_id": "NEW-1", "quotation_ref": "Milho", "quantity": "12 t", "carrier": "Rota Sul", "start_date": "2024-02-01", "end_date": "2024-02-01", "status": "completed"})
        self.repo.insert(form, today=date(2024, 2, 3))
        written = self.client.calls[-1].payload[0]
        self.assertEqual(written["cotacao"], "Milho")
        self.assertTrue(written["is_completed"])
        self.assertEqual(written["completed_date"], "2024-02-03")
        self.assertEqual(len(self.client.rows), 3)

    def test_update(self):
        form = parse_form({"truck_id": "TRK-2b", "quotation_ref": "Milho", "quantity": "8 t", "carrier": "Rota Sul", "start_date": "2024-01-05", "end_date": "2024-01-07"})
        self.repo.update("2", form)
        self.assertEqual(self.repo.get("2").end_date, "2024-01-07")
        self.assertEqual(self.client.calls[-2].filters, [("id", "2")])

    def test_set_status_keeps_completion_fields_consistent(self):
        self.repo.set_status("2", LoadingStatus.COMPLETED, today=date(2024, 1, 6))
        stored = next(r for r in self.client.rows if r["id"] == "2")
        self.assertEqual((stored["status"], stored["is_completed"], stored["completed_date"]), ("completed", True, "2024-01-06"))

        self.repo.set_status("2", LoadingStatus.PENDING)
        stored = next(r for r in self.client.rows if r["id"] == "2")
        self.assertEqual((stored["status"], stored["is_completed"], stored["completed_date"]), ("pending", False, None))

    def test_delete(self):
        self.repo.delete("1")
        self.assertEqual([r["id"] for r in self.client.rows], ["2"])

    def test_store_failures_raise_store_error(self):
        repo = LoadingRepository(FakeClient(fail=True))
        with self.assertRaises(StoreError):
            repo.list_all()
        with self.assertRaises(StoreError):
            repo.delete("1")
        with self.assertRaises(StoreError):
            repo.set_status("1", LoadingStatus.CANCELLED)

    def test_list_all_propagates_invalid_rows(self):
        self.client.rows.append(row("3", "2024-01-01", "2024-01-01", status="lost"))
        with self.assertRaises(InvalidRecordError):
            self.repo.list_all()


class TestLoadDashboardData(unittest.TestCase):
    def test_rejects_bad_rows_and_keeps_the_rest(self):
        client = FakeClient([row("1", "2024-01-01", "2024-01-02"), row("2", "2024-01-01", "2024-01-01", status="lost")])
        with self.assertLogs("truckload.data", level="WARNING"):
            data_ctx = load_dashboard_data(LoadingRepository(client))
        self.assertEqual([r.id for r in data_ctx["records"]], ["1"])
        self.assertEqual(data_ctx["rejected"], 1)
        self.assertEqual(len(data_ctx["frame"]), 1)

    def test_store_error_propagates(self):
        with self.assertRaises(StoreError):
            load_dashboard_data(LoadingRepository(FakeClient(fail=True)))


if __name__ == "__main__":
    unittest.main(verbosity=2)
