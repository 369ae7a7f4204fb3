import unittest

from fastapi.testclient import TestClient

from shopdesk.database.session import get_db
from shopdesk.main import app
from tests.fixtures import make_engine, make_session_factory, seed_shop


class RouteTest(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.Session = make_session_factory(self.engine)
        with self.Session() as db:
            _owner, self.business, self.shop = seed_shop(db)

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "ok")

    def test_operation_listing(self):
        response = self.client.get("/rpc")
        self.assertEqual(response.status_code, 200)
        self.assertIn("auth:login", response.json()["operations"])

    def test_errors_stay_in_the_envelope(self):
        response = self.client.post("/rpc/dashboard:sales:get", json={"shopId": 999})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["error"], "ScopeRequired")

    def test_malformed_body_is_an_envelope(self):
        response = self.client.post(
            "/rpc/inventory:create",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["success"], False)
        self.assertEqual(body["error"], "ValidationError")

    def test_register_then_check_with_bearer_token(self):
        registered = self.client.post(
            "/rpc/auth:register",
            json={"email": "cashier@example.com", "username": "cashier", "password": "secret1"},
        ).json()
        self.assertTrue(registered["success"], registered)

        checked = self.client.post(
            "/rpc/auth:check",
            json={},
            headers={"Authorization": "Bearer {}".format(registered["token"])},
        ).json()
        self.assertEqual(checked, {"success": True, "isAuthenticated": True, "userId": registered["user"]["id"]})

    def test_create_category_and_list(self):
        created = self.client.post(
            "/rpc/inventory:category:create",
            json={"data": {"businessId": self.business.id, "name": "Drinks"}},
        ).json()
        self.assertTrue(created["success"], created)

        listed = self.client.post("/rpc/inventory:category:get-all", json={"businessId": self.business.id}).json()
        self.assertEqual([category["name"] for category in listed["categories"]], ["Drinks"])


if __name__ == "__main__":
    unittest.main()
