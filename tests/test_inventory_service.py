import unittest
from decimal import Decimal

from sqlalchemy import func, select

from shopdesk.core.errors import NotFound, ValidationError
from shopdesk.models import InventoryItem, StockMovement
from shopdesk.services import inventory_service
from shopdesk.services.stock_service import adjust_stock
from tests.fixtures import add_item, add_product, make_engine, make_session_factory, seed_shop


class InventoryServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.Session = make_session_factory(self.engine)
        self.db = self.Session()
        _owner, _business, self.shop = seed_shop(self.db)
        self.product = add_product(self.db, self.shop)
        self.item = add_item(self.db, self.shop, self.product, quantity=4, unit_cost="100")

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_price_and_reorder_edit_recomputes_value_and_status(self):
        self.assertEqual(self.item.status, "low_stock")

        updated = inventory_service.update_item(
            self.db, self.item.id, {"unitCost": "250", "reorderPoint": 2}
        )

        self.assertEqual(updated.quantity, 4)
        self.assertEqual(updated.unit_cost, Decimal("250.00"))
        self.assertEqual(updated.total_value, Decimal("1000.00"))
        self.assertEqual(updated.status, "medium_stock")
        with self.Session() as fresh:
            stored = fresh.get(InventoryItem, self.item.id)
            self.assertEqual(stored.total_value, Decimal("1000.00"))
            self.assertEqual(stored.reorder_point, 2)

    def test_quantity_cannot_be_edited_directly(self):
        with self.assertRaises(ValidationError):
            inventory_service.update_item(self.db, self.item.id, {"quantity": 40})

        self.assertEqual(self.db.get(InventoryItem, self.item.id).quantity, 4)

    def test_update_unknown_item(self):
        with self.assertRaises(NotFound):
            inventory_service.update_item(self.db, 999, {"sellingPrice": "10"})

    def test_delete_keeps_movement_history(self):
        adjust_stock(self.db, self.item.id, 6, reason="Delivery")
        adjust_stock(self.db, self.item.id, -2, reason="Breakage")

        inventory_service.delete_item(self.db, self.item.id)

        with self.assertRaises(NotFound):
            inventory_service.get_item(self.db, self.item.id)
        movements = self.db.execute(
            select(func.count(StockMovement.id)).where(StockMovement.inventory_id == self.item.id)
        ).scalar_one()
        self.assertEqual(movements, 2)


if __name__ == "__main__":
    unittest.main()
