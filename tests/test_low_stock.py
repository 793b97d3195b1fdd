import unittest
from types import SimpleNamespace

from stockkeeper.services.low_stock import coerce_number, derive_low_stock, is_low_stock


class LowStockTest(unittest.TestCase):
    def test_boundary_is_inclusive(self):
        self.assertTrue(is_low_stock({"current_stock": 5, "min_quantity": 5}))
        self.assertTrue(is_low_stock({"current_stock": 4, "min_quantity": 5}))
        self.assertFalse(is_low_stock({"current_stock": 6, "min_quantity": 5}))

    def test_preserves_input_order(self):
        items = [
            {"id": 3, "current_stock": 0, "min_quantity": 1},
            {"id": 1, "current_stock": 50, "min_quantity": 1},
            {"id": 2, "current_stock": 2, "min_quantity": 2},
        ]
        self.assertEqual([item["id"] for item in derive_low_stock(items)], [3, 2])

    def test_reads_legacy_and_object_fields(self):
        legacy = {"quantity": 1, "minQuantity": 4}
        orm_like = SimpleNamespace(id=9, current_stock=10, min_quantity=2)
        self.assertEqual(derive_low_stock([legacy, orm_like]), [legacy])

    def test_malformed_records_count_as_zero(self):
        cases = [
            ({}, True),
            ({"current_stock": None, "min_quantity": 0}, True),
            ({"current_stock": "abc", "min_quantity": "3"}, True),
            ({"current_stock": float("nan"), "min_quantity": -1}, False),
            ({"current_stock": "1,200", "min_quantity": 1000}, False),
        ]
        for record, expected in cases:
            with self.subTest(record=record):
                self.assertEqual(is_low_stock(record), expected)

    def test_idempotent(self):
        items = [
            {"current_stock": 1, "min_quantity": 2},
            {"current_stock": 3, "min_quantity": 2},
        ]
        once = derive_low_stock(items)
        self.assertEqual(derive_low_stock(once), once)
        self.assertEqual(derive_low_stock([]), [])

    def test_coerce_number(self):
        self.assertEqual(coerce_number(True), 0)
        self.assertEqual(coerce_number(" 7 "), 7.0)
        self.assertEqual(coerce_number(float("inf")), 0)


if __name__ == "__main__":
    unittest.main()
