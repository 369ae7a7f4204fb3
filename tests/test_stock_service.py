import os
import tempfile
import threading
import unittest
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from sqlalchemy import func, select

from shopdesk.core.errors import InvalidAdjustment, NotFound
from shopdesk.models import InventoryItem, StockMovement
from shopdesk.services.inventory_service import update_item
from shopdesk.services.stock_service import adjust_stock, list_movements, record_physical_count
from tests.fixtures import add_item, add_product, make_engine, make_session_factory, seed_shop


class StockAdjustmentTest(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.Session = make_session_factory(self.engine)
        self.db = self.Session()
        _owner, _business, self.shop = seed_shop(self.db)
        self.product = add_product(self.db, self.shop)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _movement_count(self, inventory_id):
        return self.db.execute(
            select(func.count(StockMovement.id)).where(StockMovement.inventory_id == inventory_id)
        ).scalar_one()

    def test_inbound_then_outbound_restores_quantity(self):
        item = add_item(self.db, self.shop, self.product, quantity=20, unit_cost="2.50")

        added = adjust_stock(self.db, item.id, 10, reason="Delivery", performed_by_id=1)
        self.assertEqual(added.new_quantity, 30)
        self.assertEqual(added.new_total_value, Decimal("75.00"))
        self.assertEqual(added.new_status, "high_stock")
        self.assertEqual(added.movement.direction, "inbound")
        self.assertEqual(added.movement.movement_type, "Added")
        self.assertEqual(added.movement.quantity, 10)
        self.assertEqual(added.movement.total_cost, Decimal("25.00"))

        removed = adjust_stock(self.db, item.id, -10, reason="Damage")
        self.assertEqual(removed.new_quantity, 20)
        self.assertEqual(removed.movement.direction, "outbound")
        self.assertEqual(removed.movement.movement_type, "Adjustment")
        self.assertEqual(self._movement_count(item.id), 2)

        stored = self.db.get(InventoryItem, item.id)
        self.assertEqual(stored.total_value, Decimal("50.00"))

    def test_physical_count_records_variance(self):
        item = add_item(self.db, self.shop, self.product, quantity=50)

        result = record_physical_count(self.db, item.id, 42, system_count=50, reason="Stocktake")

        self.assertEqual(result.new_quantity, 42)
        self.assertEqual(result.movement.movement_type, "Adjustment")
        self.assertEqual(result.movement.direction, "outbound")
        self.assertEqual(result.movement.quantity, 8)
        self.assertEqual(result.movement.system_count, 50)
        self.assertEqual(result.movement.physical_count, 42)

    def test_matching_count_leaves_item_unchanged(self):
        item = add_item(self.db, self.shop, self.product, quantity=15)

        result = record_physical_count(self.db, item.id, 15)

        self.assertEqual(result.new_quantity, 15)
        self.assertEqual(result.movement.quantity, 0)
        self.assertEqual(self._movement_count(item.id), 1)

    def test_overdraw_is_rejected_without_movement(self):
        item = add_item(self.db, self.shop, self.product, quantity=3)

        with self.assertRaises(InvalidAdjustment):
            adjust_stock(self.db, item.id, -5)

        self.assertEqual(self.db.get(InventoryItem, item.id).quantity, 3)
        self.assertEqual(self._movement_count(item.id), 0)

    def test_zero_and_misdirected_adjustments_are_rejected(self):
        item = add_item(self.db, self.shop, self.product, quantity=3)
        with self.assertRaises(InvalidAdjustment):
            adjust_stock(self.db, item.id, 0)
        with self.assertRaises(InvalidAdjustment):
            adjust_stock(self.db, item.id, 2, movement_type="Sold")
        with self.assertRaises(InvalidAdjustment):
            adjust_stock(self.db, item.id, -1, movement_type="Returned")
        with self.assertRaises(InvalidAdjustment):
            record_physical_count(self.db, item.id, -1)
        self.assertEqual(self._movement_count(item.id), 0)

    def test_unknown_item(self):
        with self.assertRaises(NotFound):
            adjust_stock(self.db, 999, 1)

    def test_list_movements_paginates_newest_first(self):
        item = add_item(self.db, self.shop, self.product, quantity=0)
        for delta in (5, 4, 3):
            adjust_stock(self.db, item.id, delta)

        page, total, pages = list_movements(self.db, item.id, page=1, limit=2)

        self.assertEqual(total, 3)
        self.assertEqual(pages, 2)
        self.assertEqual([movement.quantity for movement in page], [3, 4])


class ConcurrentAdjustmentTest(unittest.TestCase):
    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix=".db")
        os.close(handle)
        self.engine = make_engine("sqlite:///{}".format(self.path))
        self.Session = make_session_factory(self.engine)
        with self.Session() as db:
            _owner, _business, shop = seed_shop(db)
            product = add_product(db, shop)
            self.item_id = add_item(db, shop, product, quantity=20).id

    def tearDown(self):
        self.engine.dispose()
        for suffix in ("", "-wal", "-shm"):
            if os.path.exists(self.path + suffix):
                os.remove(self.path + suffix)

    def test_parallel_adjustments_are_serialized(self):
        start = threading.Barrier(2)

        def apply(delta):
            with self.Session() as db:
                start.wait()
                return adjust_stock(db, self.item_id, delta).new_quantity

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(apply, (5, -3)))

        with self.Session() as db:
            item = db.get(InventoryItem, self.item_id)
            movements = db.execute(
                select(func.count(StockMovement.id)).where(StockMovement.inventory_id == self.item_id)
            ).scalar_one()
        self.assertEqual(item.quantity, 22)
        self.assertEqual(movements, 2)
        self.assertIn(22, results)

    def test_price_edit_after_concurrent_adjustment_uses_current_quantity(self):
        with self.Session() as editor:
            loaded = editor.get(InventoryItem, self.item_id)
            self.assertEqual(loaded.quantity, 20)

            with self.Session() as counter:
                adjust_stock(counter, self.item_id, 5, reason="Delivery")

            update_item(editor, self.item_id, {"unitCost": "2"})

        with self.Session() as db:
            item = db.get(InventoryItem, self.item_id)
        self.assertEqual(item.quantity, 25)
        self.assertEqual(item.unit_cost, Decimal("2.00"))
        self.assertEqual(item.total_value, Decimal("50.00"))
        self.assertEqual(item.total_value, item.quantity * item.unit_cost)


if __name__ == "__main__":
    unittest.main()
