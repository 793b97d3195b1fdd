import unittest
from datetime import datetime, timezone

from stockkeeper.exceptions import NotFoundError, ValidationError
from stockkeeper.store import SqlInventoryStore


def _item_fields(code="ELC-1", **overrides):
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    fields = {
        "product_code": code,
        "name": f"Item {code}",
        "current_stock": 5,
        "min_quantity": 1,
        "created_at": now,
        "last_updated": now,
    }
    fields.update(overrides)
    return fields


class SqlInventoryStoreTest(unittest.TestCase):
    def setUp(self):
        self.store = SqlInventoryStore.from_url("sqlite:///:memory:")

    def test_item_crud(self):
        item = self.store.add_item(_item_fields())
        self.assertEqual(self.store.get_item(item.id).name, "Item ELC-1")
        self.assertEqual(self.store.find_item_by_code("ELC-1").id, item.id)
        self.assertIsNone(self.store.find_item_by_code("missing"))

        self.store.update_item(item.id, {"location": "Bin 4"})
        self.assertEqual(self.store.get_item(item.id).location, "Bin 4")

        self.store.delete_item(item.id)
        with self.assertRaises(NotFoundError):
            self.store.get_item(item.id)
        with self.assertRaises(NotFoundError):
            self.store.update_item(item.id, {"location": "Bin 5"})

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            self.store.add_item(_item_fields(colour="red"))

    def test_negative_stock_rejected_by_store(self):
        item = self.store.add_item(_item_fields())
        with self.assertRaises(ValidationError):
            self.store.update_item(item.id, {"current_stock": -1})
        self.assertEqual(self.store.get_item(item.id).current_stock, 5)

    def test_unknown_activity_action_rejected(self):
        with self.assertRaises(ValidationError):
            self.store.append_activity_log({"action": "DANCE", "details": "x"})
        self.store.append_activity_log({"action": "LOGIN", "details": "clerk signed in"})
        self.assertEqual(self.store.count_activity_logs(), 1)

    def test_query_items_with_predicate(self):
        self.store.add_item(_item_fields("A", current_stock=0))
        self.store.add_item(_item_fields("B", current_stock=9))
        codes = [item.product_code for item in self.store.query_items(lambda item: item.current_stock > 0)]
        self.assertEqual(codes, ["B"])

    def test_atomic_rolls_back_every_write(self):
        item = self.store.add_item(_item_fields())
        with self.assertRaises(RuntimeError):
            with self.store.atomic():
                self.store.update_item(item.id, {"current_stock": 1})
                self.store.append_activity_log({"action": "UPDATE", "details": "x"})
                raise RuntimeError("boom")
        self.assertEqual(self.store.get_item(item.id).current_stock, 5)
        self.assertEqual(self.store.count_activity_logs(), 0)

    def test_transaction_filters(self):
        item = self.store.add_item(_item_fields())
        for day, kind in ((1, "IN"), (2, "OUT"), (3, "OUT")):
            self.store.append_transaction(
                {
                    "type": kind,
                    "item_id": item.id,
                    "item_name": item.name,
                    "item_code": item.product_code,
                    "quantity": 1,
                    "unit_value": 2.0,
                    "total": 2.0,
                    "previous_stock": 5,
                    "new_stock": 4,
                    "date": datetime(2024, 2, day, 8, tzinfo=timezone.utc),
                }
            )
        outs = self.store.query_transactions(type_filter="OUT")
        self.assertEqual([entry.date.day for entry in outs], [3, 2])

        window = (
            datetime(2024, 2, 2, tzinfo=timezone.utc),
            datetime(2024, 2, 2, 23, 59, tzinfo=timezone.utc),
        )
        self.assertEqual(len(self.store.query_transactions(date_range=window)), 1)
        self.assertEqual(len(self.store.query_transactions(limit=2)), 2)
        self.assertEqual(self.store.count_transactions_for_item(item.id), 3)


class SubscriptionTest(unittest.TestCase):
    def setUp(self):
        self.store = SqlInventoryStore.from_url("sqlite:///:memory:")

    def test_items_snapshot_after_each_write(self):
        snapshots = []
        subscription = self.store.subscribe_items(snapshots.append)
        self.assertEqual(snapshots, [[]])

        item = self.store.add_item(_item_fields())
        self.store.update_item(item.id, {"current_stock": 7})
        self.assertEqual(len(snapshots), 3)
        self.assertEqual(snapshots[-1][0].current_stock, 7)

        subscription.cancel()
        self.assertFalse(subscription.active)
        self.store.delete_item(item.id)
        self.assertEqual(len(snapshots), 3)

    def test_atomic_block_publishes_once_after_commit(self):
        item = self.store.add_item(_item_fields())
        snapshots = []
        self.store.subscribe_items(snapshots.append)
        with self.store.atomic():
            self.store.update_item(item.id, {"current_stock": 1})
            self.store.update_item(item.id, {"current_stock": 2})
            self.assertEqual(len(snapshots), 1)
        self.assertEqual(len(snapshots), 2)
        self.assertEqual(snapshots[-1][0].current_stock, 2)

    def test_rolled_back_block_publishes_nothing(self):
        item = self.store.add_item(_item_fields())
        snapshots = []
        self.store.subscribe_items(snapshots.append)
        with self.assertRaises(NotFoundError):
            with self.store.atomic():
                self.store.update_item(item.id, {"current_stock": 1})
                self.store.get_item(404)
        self.assertEqual(len(snapshots), 1)

    def test_transaction_feed_is_filtered(self):
        item = self.store.add_item(_item_fields())
        feed = []
        self.store.subscribe_transactions(feed.append, type_filter="IN", limit=5)
        record = {
            "type": "OUT",
            "item_id": item.id,
            "item_name": item.name,
            "item_code": item.product_code,
            "quantity": 1,
            "unit_value": 1.0,
            "total": 1.0,
            "previous_stock": 5,
            "new_stock": 4,
            "date": datetime(2024, 2, 1, tzinfo=timezone.utc),
        }
        self.store.append_transaction(record)
        self.store.append_transaction(dict(record, type="IN", new_stock=6))
        self.assertEqual([len(snapshot) for snapshot in feed], [0, 0, 1])

    def test_failing_listener_does_not_break_writes(self):
        def broken(_snapshot):
            if broken.calls:
                raise RuntimeError("listener failed")
            broken.calls += 1

        broken.calls = 0
        healthy = []
        self.store.subscribe_items(broken)
        self.store.subscribe_items(healthy.append)
        with self.assertLogs("stockkeeper.store.events", level="ERROR"):
            self.store.add_item(_item_fields())
        self.assertEqual(len(healthy), 2)
        self.assertEqual(self.store._hub.subscriber_count(), 2)


if __name__ == "__main__":
    unittest.main()
