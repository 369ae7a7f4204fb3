import tempfile
import unittest
from pathlib import Path

from openpyxl import load_workbook

from shopdesk.schemas.finance import IncomeCreate, IncomeQuery
from shopdesk.services import export_service, finance_service
from shopdesk.services.stock_service import adjust_stock
from tests.fixtures import add_item, add_product, make_engine, make_session_factory, seed_shop


class ExportServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()
        _owner, _business, self.shop = seed_shop(self.db)
        product = add_product(self.db, self.shop, name="Rice 5kg", sku="RIC-5")
        self.item = add_item(self.db, self.shop, product, quantity=4, unit_cost="3000")
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()
        self.db.close()
        self.engine.dispose()

    def test_inventory_workbook(self):
        path = export_service.export_inventory(self.db, shop_ids=[self.shop.id], directory=self.tmp.name)

        self.assertEqual(Path(path).parent, Path(self.tmp.name))
        sheet = load_workbook(path).active
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(rows[0][:4], ("ID", "Shop", "Product", "SKU"))
        self.assertEqual(rows[1][2:5], ("Rice 5kg", "RIC-5", 4))
        self.assertEqual(rows[1][7], 12000)

    def test_movement_workbook(self):
        adjust_stock(self.db, self.item.id, 2, reason="Delivery")
        adjust_stock(self.db, self.item.id, -1, reason="Breakage")

        path = export_service.export_movements(self.db, inventory_id=self.item.id, directory=self.tmp.name)

        rows = list(load_workbook(path).active.iter_rows(values_only=True))
        self.assertEqual(len(rows), 3)
        self.assertEqual([row[4] for row in rows[1:]], ["inbound", "outbound"])
        self.assertEqual([row[11] for row in rows[1:]], ["Delivery", "Breakage"])

    def test_income_workbook(self):
        finance_service.seed_standard_codes(self.db)
        self.db.commit()
        code = finance_service.codes_by_type(self.db, "income")[0]
        finance_service.create_income(
            self.db,
            IncomeCreate(
                date="2024-03-10",
                description="Counter sales",
                amount="15000",
                paymentMethod="cash",
                ohadaCodeId=code.id,
                shopId=self.shop.id,
            ),
        )

        path = export_service.export_incomes(
            self.db, IncomeQuery(shopId=self.shop.id), directory=self.tmp.name
        )

        rows = list(load_workbook(path).active.iter_rows(values_only=True))
        self.assertEqual(rows[0], ("ID", "Date", "Description", "OHADA Code", "Payment Method", "Amount", "Shop"))
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1][2:6], ("Counter sales", "701", "cash", 15000))
        self.assertEqual(rows[1][6], self.shop.id)


if __name__ == "__main__":
    unittest.main()
