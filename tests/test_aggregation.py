import unittest

from tests.helpers import make_record
from truckload.aggregation import (
    DailyCount,
    StatusCount,
    compute_daily_counts,
    compute_status_counts,
    compute_status_percentages,
)
from truckload.records import LoadingStatus


class TestDailyCounts(unittest.TestCase):
    def test_empty_input(self):
        self.assertEqual(compute_daily_counts([]), [])

    def test_single_record_spans_each_day(self):
        out = compute_daily_counts([make_record(start="2024-01-01", end="2024-01-03")])
        self.assertEqual(
            out,
            [DailyCount("2024-01-01", 1), DailyCount("2024-01-02", 1), DailyCount("2024-01-03", 1)],
        )

    def test_overlapping_records_add(self):
        out = compute_daily_counts(
            [
                make_record("1", start="2024-01-01", end="2024-01-02"),
                make_record("2", start="2024-01-02", end="2024-01-03"),
            ]
        )
        self.assertEqual({d.date: d.count for d in out}, {"2024-01-01": 1, "2024-01-02": 2, "2024-01-03": 1})

    def test_reversed_range_contributes_nothing(self):
        out = compute_daily_counts(
            [
                make_record("1", start="2024-01-05", end="2024-01-01"),
                make_record("2", start="2024-01-02", end="2024-01-02"),
            ]
        )
        self.assertEqual(out, [DailyCount("2024-01-02", 1)])

    def test_only_reversed_ranges(self):
        self.assertEqual(compute_daily_counts([make_record(start="2024-01-05", end="2024-01-01")]), [])

    def test_sorted_by_date_regardless_of_input_order(self):
        out = compute_daily_counts(
            [
                make_record("1", start="2024-02-01", end="2024-02-01"),
                make_record("2", start="2023-12-31", end="2024-01-01"),
            ]
        )
        self.assertEqual([d.date for d in out], ["2023-12-31", "2024-01-01", "2024-02-01"])


class TestStatus(unittest.TestCase):
    def test_status_counts(self):
        records = [
            make_record("1", status=LoadingStatus.PENDING),
            make_record("2", status=LoadingStatus.COMPLETED),
            make_record("3", status=LoadingStatus.CANCELLED),
            make_record("4", status=LoadingStatus.CANCELLED),
        ]
        self.assertEqual(compute_status_counts(records), StatusCount(pending=1, completed=1, cancelled=2))

    def test_percentages_zero_total(self):
        out = compute_status_percentages(StatusCount())
        self.assertEqual(len(out), 3)
        for entry in out:
            self.assertEqual(entry.count, 0)
            self.assertEqual(entry.percentage, 0)

    def test_percentages_sum_to_hundred(self):
        out = compute_status_percentages(StatusCount(pending=1, completed=1, cancelled=2))
        self.assertEqual([p.status for p in out], ["pending", "completed", "cancelled"])
        self.assertEqual([p.percentage for p in out], [25.0, 25.0, 50.0])
        self.assertEqual(sum(p.percentage for p in out), 100.0)
        self.assertEqual([p.label for p in out], ["Pendente", "Concluído", "Cancelado"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
