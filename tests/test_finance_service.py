import unittest
from datetime import datetime
from decimal import Decimal

from shopdesk.core.errors import Conflict, NotFound
from shopdesk.schemas.finance import IncomeCreate, IncomeQuery, IncomeUpdate, OhadaCodeCreate
from shopdesk.services import finance_service
from tests.fixtures import make_engine, make_session_factory, seed_shop


class FinanceServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()
        _owner, self.business, self.shop = seed_shop(self.db)
        finance_service.seed_standard_codes(self.db)
        self.db.commit()
        self.sales_code = finance_service.codes_by_type(self.db, "income")[0]

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_seeding_is_idempotent(self):
        self.assertEqual(len(finance_service.codes_by_type(self.db, "income")), 9)
        self.assertEqual(finance_service.seed_standard_codes(self.db), 0)
        self.assertEqual(self.sales_code.code, "701")
        self.assertEqual(self.sales_code.classification, "Standard")

    def test_custom_code_conflict(self):
        created = finance_service.create_code(
            self.db, OhadaCodeCreate(code="7071", name="Commissions", type="income")
        )
        self.assertEqual(created.classification, "Custom")
        with self.assertRaises(Conflict):
            finance_service.create_code(self.db, OhadaCodeCreate(code="7071", name="Commissions"))

    def test_income_lifecycle_and_filters(self):
        march = finance_service.create_income(
            self.db,
            IncomeCreate(
                date="2024-03-10",
                description="Counter sales",
                amount="15000",
                paymentMethod="cash",
                ohadaCodeId=self.sales_code.id,
                shopId=self.shop.id,
            ),
        )
        finance_service.create_income(
            self.db,
            IncomeCreate(
                date=datetime(2024, 4, 2),
                description="Rent",
                amount=Decimal("50000"),
                payment_method="transfer",
                ohada_code_id=self.sales_code.id,
                shop_id=self.shop.id,
            ),
        )

        in_march = finance_service.list_incomes(
            self.db, IncomeQuery(businessId=self.business.id, startDate="2024-03-01", endDate="2024-03-31")
        )
        self.assertEqual([income.id for income in in_march], [march.id])

        updated = finance_service.update_income(self.db, march.id, IncomeUpdate(amount="17500.5"))
        self.assertEqual(updated.amount, Decimal("17500.50"))

        finance_service.delete_income(self.db, march.id)
        with self.assertRaises(NotFound):
            finance_service.get_income(self.db, march.id)

    def test_income_requires_known_code(self):
        with self.assertRaises(NotFound):
            finance_service.create_income(
                self.db,
                IncomeCreate(
                    date="2024-03-10",
                    description="Orphan",
                    amount="1",
                    payment_method="cash",
                    ohada_code_id=999,
                ),
            )


if __name__ == "__main__":
    unittest.main()
