import unittest
from decimal import Decimal

from sqlalchemy import func, select

from shopdesk.core.errors import Conflict, NotFound
from shopdesk.models import Employee, Sales, User
from shopdesk.schemas.entities import EmployeeCreate, EmployeeUpdate
from shopdesk.services import employee_service
from tests.fixtures import make_engine, make_session_factory, seed_shop


class EmployeeServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()
        self.owner, self.business, self.shop = seed_shop(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _payload(self, **overrides):
        values = dict(
            firstName="Awa",
            lastName="Ngono",
            email="awa@example.com",
            username="awa",
            password="cashier1",
            role="cashier",
            businessId=self.business.id,
            shopId=self.shop.id,
            salary="85000",
        )
        values.update(overrides)
        return EmployeeCreate.model_validate(values)

    def _counts(self):
        users = self.db.execute(select(func.count(User.id))).scalar_one()
        employees = self.db.execute(select(func.count(Employee.id))).scalar_one()
        return users, employees

    def test_create_links_user_and_shop(self):
        employee = employee_service.create_employee(self.db, self._payload())

        self.assertEqual(employee.user.username, "awa")
        self.assertEqual(employee.user.shop_id, self.shop.id)
        self.assertEqual(employee.shop.name, "Main")
        self.assertEqual(employee.salary, Decimal("85000.00"))
        self.assertEqual(employee.status, "active")

    def test_conflicting_user_rolls_back_everything(self):
        before = self._counts()

        with self.assertRaises(Conflict):
            employee_service.create_employee(self.db, self._payload(email="owner@example.com"))

        self.assertEqual(self._counts(), before)

    def test_update_propagates_to_user(self):
        employee = employee_service.create_employee(self.db, self._payload())

        updated = employee_service.update_employee(
            self.db, employee.id, EmployeeUpdate(email="Awa.N@example.com", role="manager")
        )

        self.assertEqual(updated.email, "awa.n@example.com")
        self.assertEqual(updated.user.email, "awa.n@example.com")
        self.assertEqual(updated.user.role, "manager")

    def test_delete_removes_user(self):
        employee = employee_service.create_employee(self.db, self._payload())
        before = self._counts()

        employee_service.delete_employee(self.db, employee.id)

        self.assertEqual(self._counts(), (before[0] - 1, before[1] - 1))
        with self.assertRaises(NotFound):
            employee_service.get_employee(self.db, employee.id)

    def test_sales_for_employee(self):
        employee = employee_service.create_employee(self.db, self._payload())
        self.db.add_all(
            [
                Sales(shop_id=self.shop.id, employee_id=employee.id, total=Decimal("10"), net_amount=Decimal("9")),
                Sales(shop_id=self.shop.id, employee_id=None, total=Decimal("5"), net_amount=Decimal("5")),
            ]
        )
        self.db.commit()

        sales = employee_service.employee_sales(self.db, employee.id)

        self.assertEqual(len(sales), 1)
        self.assertEqual(sales[0].net_amount, Decimal("9.00"))


if __name__ == "__main__":
    unittest.main()
