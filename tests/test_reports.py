import unittest
from unittest.mock import patch
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from stockkeeper.core.dates import local_day_bounds, resolve_timezone
from stockkeeper.exceptions import ValidationError
from stockkeeper.services.item_service import create_item
from stockkeeper.services.report_service import (
    ReportService,
    compute_inventory_summary,
    compute_sales_summary,
)
from stockkeeper.services.stock_service import StockMovementEngine
from stockkeeper.store import SqlInventoryStore


def _sale(day, total, quantity=1, hour=12, kind="OUT"):
    return {
        "type": kind,
        "date": datetime(2024, 5, day, hour, tzinfo=timezone.utc),
        "total": total,
        "quantity": quantity,
    }


class SalesSummaryTest(unittest.TestCase):
    def test_buckets_out_entries_by_day(self):
        transactions = [
            _sale(1, 10.0, quantity=1),
            _sale(1, 5.5, quantity=2),
            _sale(3, 20.0, quantity=4),
            _sale(2, 99.0, kind="IN"),
            _sale(9, 50.0),
        ]
        summary = compute_sales_summary(transactions, date(2024, 5, 1), date(2024, 5, 3))
        self.assertEqual(summary.daily_sales, {"2024-05-01": 15.5, "2024-05-03": 20.0})
        self.assertEqual(list(summary.daily_sales), ["2024-05-01", "2024-05-03"])
        self.assertEqual(summary.total_revenue, 35.5)
        self.assertEqual(summary.total_items, 7)
        self.assertEqual(summary.average_daily, 35.5 / 2)

    def test_sum_does_not_depend_on_order(self):
        transactions = [_sale(1, value) for value in (0.1, 1e16, 0.2, -1e16, 0.3)]
        forward = compute_sales_summary(transactions, "2024-05-01", "2024-05-01")
        backward = compute_sales_summary(list(reversed(transactions)), "2024-05-01", "2024-05-01")
        self.assertEqual(forward.total_revenue, backward.total_revenue)
        self.assertEqual(forward.daily_sales, backward.daily_sales)

    def test_empty_range_has_zero_average(self):
        summary = compute_sales_summary([], date(2024, 5, 1), date(2024, 5, 31))
        self.assertEqual(summary.total_revenue, 0.0)
        self.assertEqual(summary.average_daily, 0.0)
        self.assertEqual(summary.daily_sales, {})

    def test_end_day_is_inclusive(self):
        late = _sale(3, 8.0, hour=23)
        summary = compute_sales_summary([late], date(2024, 5, 3), date(2024, 5, 3))
        self.assertEqual(summary.total_revenue, 8.0)

    def test_local_timezone_shifts_day(self):
        tz = ZoneInfo("America/New_York")
        # 02:00 UTC on the 2nd is still the evening of the 1st in New York.
        entry = _sale(2, 12.0, hour=2)
        summary = compute_sales_summary([entry], date(2024, 5, 1), date(2024, 5, 1), tz)
        self.assertEqual(summary.daily_sales, {"2024-05-01": 12.0})

    def test_invalid_range(self):
        for start, end in (("2024-05-03", "2024-05-01"), ("yesterday", "2024-05-01")):
            with self.subTest(start=start, end=end):
                with self.assertRaises(ValidationError):
                    compute_sales_summary([], start, end)


class InventorySummaryTest(unittest.TestCase):
    def test_category_breakdown(self):
        summary = compute_inventory_summary([{"category": "Paint"}, {"category": "Paint"}, {}])
        self.assertEqual(summary.category_breakdown, {"Paint": 2, "Uncategorized": 1})
        self.assertEqual(summary.total_items, 3)

    def test_value_and_low_stock(self):
        items = [
            {"id": 1, "name": "Brush", "current_stock": 4, "min_quantity": 5, "price": 2.5},
            {"id": 2, "name": "Drill", "current_stock": 3, "min_quantity": 1, "price": 80},
        ]
        summary = compute_inventory_summary(items)
        self.assertEqual(summary.total_value, 250.0)
        self.assertEqual(summary.low_stock_count, 1)
        self.assertEqual(summary.low_stock_items[0].item_id, 1)
        self.assertEqual(summary.low_stock_items[0].quantity, 4)

    def test_empty_inventory(self):
        summary = compute_inventory_summary([])
        self.assertEqual(summary.total_items, 0)
        self.assertEqual(summary.total_value, 0.0)
        self.assertEqual(summary.category_breakdown, {})


class ReportServiceTest(unittest.TestCase):
    def setUp(self):
        self.store = SqlInventoryStore.from_url("sqlite:///:memory:")
        self.now = datetime(2024, 5, 10, 9, tzinfo=timezone.utc)
        self.engine = StockMovementEngine(self.store, clock=lambda: self.now)
        self.item = create_item(
            self.store,
            {
                "product_code": "TLS-1",
                "name": "Saw",
                "category": "tools",
                "current_stock": 10,
                "min_quantity": 2,
                "price": 12.0,
                "cost_price": 7.0,
            },
        )
        self.reports = ReportService(self.store)

    def test_sales_summary_reads_store(self):
        self.engine.apply_movement(self.item.id, "OUT", 2)
        self.now = self.now + timedelta(days=1)
        self.engine.apply_movement(self.item.id, "OUT", 1)
        self.engine.apply_movement(self.item.id, "IN", 5)

        summary = self.reports.sales_summary(date(2024, 5, 1), date(2024, 5, 31))
        self.assertEqual(summary.daily_sales, {"2024-05-10": 24.0, "2024-05-11": 12.0})
        self.assertEqual(summary.total_items, 3)

    def test_dashboard_stats(self):
        self.engine.apply_movement(self.item.id, "OUT", 9)
        stats = self.reports.dashboard_stats(today=date(2024, 5, 20))
        self.assertEqual(stats.total_items, 1)
        self.assertEqual(stats.low_stock, 1)
        self.assertEqual(stats.total_value, 12.0)
        self.assertEqual(stats.monthly_transactions, 1)

        next_month = self.reports.dashboard_stats(today=date(2024, 6, 2))
        self.assertEqual(next_month.monthly_transactions, 0)

    def test_recent_transactions_and_activity(self):
        self.engine.apply_movement(self.item.id, "IN", 1)
        self.now = self.now + timedelta(minutes=5)
        self.engine.apply_movement(self.item.id, "OUT", 1)

        recent = self.reports.recent_transactions(10)
        self.assertEqual([entry.type for entry in recent], ["OUT", "IN"])
        self.assertEqual(len(self.reports.recent_transactions(10, type_filter="IN")), 1)

        entries, total = self.reports.activity_page(1)
        self.assertEqual(total, 2)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].action, "STOCK_OUT")


class DatesTest(unittest.TestCase):
    def test_resolve_timezone(self):
        self.assertIs(resolve_timezone("UTC"), timezone.utc)
        self.assertEqual(resolve_timezone("Europe/Berlin"), ZoneInfo("Europe/Berlin"))
        self.assertIsNotNone(resolve_timezone("local"))
        with self.assertRaises(ValueError):
            resolve_timezone("Nowhere/Special")

    def test_local_zone_keeps_dst_rules(self):
        new_york = ZoneInfo("America/New_York")
        with patch("stockkeeper.core.dates.get_localzone", return_value=new_york):
            tz = resolve_timezone("local")
        self.assertEqual(tz, new_york)

        # 23:30 local on both dates: EST (-05:00) in January, EDT (-04:00) in July.
        winter = {
            "type": "OUT",
            "date": datetime(2026, 1, 16, 4, 30, tzinfo=timezone.utc),
            "total": 10.0,
            "quantity": 1,
        }
        summer = dict(winter, date=datetime(2026, 7, 16, 3, 30, tzinfo=timezone.utc), total=4.0)
        summary = compute_sales_summary([winter, summer], date(2026, 1, 1), date(2026, 7, 31), tz)
        self.assertEqual(summary.daily_sales, {"2026-01-15": 10.0, "2026-07-15": 4.0})

        start, end = local_day_bounds(date(2026, 1, 15), date(2026, 7, 15), tz)
        self.assertEqual(start, datetime(2026, 1, 15, 5, tzinfo=timezone.utc))
        self.assertEqual(end, datetime(2026, 7, 16, 3, 59, 59, 999999, tzinfo=timezone.utc))

    def test_local_day_bounds(self):
        start, end = local_day_bounds(date(2024, 5, 1), date(2024, 5, 2), timezone.utc)
        self.assertEqual(start, datetime(2024, 5, 1, tzinfo=timezone.utc))
        self.assertEqual(end, datetime(2024, 5, 2, 23, 59, 59, 999999, tzinfo=timezone.utc))


if __name__ == "__main__":
    unittest.main()
