import unittest
from datetime import datetime
from types import SimpleNamespace

from shopdesk.core.buckets import bucket_label, bucketize, normalize_bucket
from shopdesk.core.errors import ValidationError


class BucketTest(unittest.TestCase):
    def test_labels(self):
        moment = datetime(2024, 3, 5, 14, 37, 12)
        self.assertEqual(bucket_label(moment, "minute"), "2024-03-05 14:35")
        self.assertEqual(bucket_label(moment, "hour"), "2024-03-05 14")
        self.assertEqual(bucket_label(moment, "day"), "2024-03-05")
        self.assertEqual(bucket_label(moment, "week"), "2024-10")
        self.assertEqual(bucket_label(moment, "month"), "2024-03")

    def test_aliases_and_unknown_bucket(self):
        self.assertEqual(normalize_bucket("Daily"), "day")
        self.assertEqual(normalize_bucket("minutes"), "minute")
        self.assertEqual(normalize_bucket(None), "day")
        with self.assertRaises(ValidationError):
            normalize_bucket("fortnight")

    def test_bucketize_sums_and_orders(self):
        rows = [
            SimpleNamespace(at=datetime(2024, 3, 6, 9), value=3),
            SimpleNamespace(at=datetime(2024, 3, 5, 8), value=10),
            SimpleNamespace(at=datetime(2024, 3, 5, 18), value=-4),
        ]
        series = bucketize(rows, "day", timestamp=lambda row: row.at, value=lambda row: row.value)
        self.assertEqual(series, [("2024-03-05", 6), ("2024-03-06", 3)])

    def test_empty_input_gives_no_buckets(self):
        self.assertEqual(bucketize([], "hour", timestamp=lambda row: row, value=lambda row: 1), [])


if __name__ == "__main__":
    unittest.main()
