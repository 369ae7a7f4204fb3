import unittest
from decimal import Decimal
from types import SimpleNamespace

from shopdesk.core.money import format_amount, to_decimal
from shopdesk.core.stock_rules import refresh_derived_fields, stock_status, stock_value


class StockStatusTest(unittest.TestCase):
    def test_status_boundaries_with_reorder_point_ten(self):
        self.assertEqual(stock_status(0, 10), "out_of_stock")
        self.assertEqual(stock_status(10, 10), "low_stock")
        self.assertEqual(stock_status(11, 10), "medium_stock")
        self.assertEqual(stock_status(20, 10), "medium_stock")
        self.assertEqual(stock_status(21, 10), "high_stock")

    def test_zero_reorder_point(self):
        self.assertEqual(stock_status(0, 0), "out_of_stock")
        self.assertEqual(stock_status(1, 0), "high_stock")

    def test_refresh_keeps_total_value_in_sync(self):
        item = SimpleNamespace(quantity=7, unit_cost=Decimal("12.50"), reorder_point=10)
        refresh_derived_fields(item)
        self.assertEqual(item.total_value, Decimal("87.50"))
        self.assertEqual(item.status, "low_stock")
        self.assertEqual(item.total_value, stock_value(item.quantity, item.unit_cost))


class MoneyTest(unittest.TestCase):
    def test_to_decimal_rounds_to_cents(self):
        self.assertEqual(to_decimal("10.005"), Decimal("10.01"))
        self.assertEqual(to_decimal(None), Decimal("0.00"))
        with self.assertRaises(ValueError):
            to_decimal("ten")

    def test_format_amount_by_locale(self):
        self.assertEqual(format_amount(Decimal("4000"), "XAF", "fr-FR"), "4 000 XAF")
        self.assertEqual(format_amount(Decimal("4000"), "XAF", "en-US"), "XAF 4,000")
        self.assertEqual(format_amount(Decimal("1234.5"), "EUR", "de-DE"), "1.234,50 EUR")
        self.assertEqual(format_amount(Decimal("-15"), "USD", "en-US"), "-USD 15.00")


if __name__ == "__main__":
    unittest.main()
