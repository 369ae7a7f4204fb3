import unittest

from sqlalchemy import func, select

from shopdesk.core.errors import Conflict, Unauthorized
from shopdesk.core.security import decode_token, hash_password, verify_password
from shopdesk.models import SecurityLog, User
from shopdesk.schemas.auth import BusinessSetup, LoginRequest, RegisterRequest, SetupAccountRequest, ShopSetup
from shopdesk.services import auth_service, setup_service
from tests.fixtures import make_engine, make_session_factory


class AuthServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _register(self, email="Owner@Example.com", username="owner"):
        return auth_service.register(
            self.db, RegisterRequest(email=email, username=username, password="secret1")
        )

    def test_password_hash_round_trip(self):
        encoded = hash_password("s3cret", rounds=1000)
        self.assertTrue(encoded.startswith("pbkdf2_sha256$1000$"))
        self.assertTrue(verify_password("s3cret", encoded))
        self.assertFalse(verify_password("wrong", encoded))
        self.assertFalse(verify_password("s3cret", "garbage"))

    def test_register_normalizes_identity(self):
        user = self._register()
        self.assertEqual(user.email, "owner@example.com")
        self.assertEqual(user.role, "shop_owner")

    def test_duplicate_email_is_a_conflict(self):
        self._register()

        with self.assertRaises(Conflict):
            self._register(email="owner@example.com", username="someone-else")

        count = self.db.execute(select(func.count(User.id))).scalar_one()
        self.assertEqual(count, 1)

    def test_login_issues_token_and_logs_events(self):
        user = self._register()

        with self.assertRaises(Unauthorized):
            auth_service.login(self.db, LoginRequest(email="owner@example.com", password="nope"))
        logged_in = auth_service.login(
            self.db, LoginRequest(email="OWNER@example.com", password="secret1"), ip_address="127.0.0.1"
        )
        self.assertEqual(logged_in.id, user.id)

        body = auth_service.session_payload(self.db, logged_in)
        self.assertFalse(body["isSetupComplete"])
        session = decode_token(body["token"])
        self.assertEqual(session.user_id, user.id)
        self.assertTrue(session.is_admin)

        events = [entry.event_type for entry in auth_service.activities(self.db, user.id)]
        self.assertEqual(sorted(events), ["failed_login", "login", "register"])
        failures = self.db.execute(
            select(func.count(SecurityLog.id)).where(SecurityLog.status == "failure")
        ).scalar_one()
        self.assertEqual(failures, 1)

    def test_invalid_token(self):
        with self.assertRaises(Unauthorized):
            decode_token("not-a-token")

    def test_setup_creates_business_once(self):
        user = self._register()
        request = SetupAccountRequest(
            user_id=user.id,
            business=BusinessSetup(full_business_name="Test Traders"),
            shops=[ShopSetup(name="Main"), ShopSetup(name="Annex")],
        )

        business = setup_service.create_account(self.db, request)

        self.assertEqual([shop.name for shop in business.shops], ["Main", "Annex"])
        self.assertTrue(setup_service.is_setup_complete(self.db, user.id))
        self.assertEqual(self.db.get(User, user.id).shop_id, business.shops[0].id)
        with self.assertRaises(Conflict):
            setup_service.create_account(self.db, request)


if __name__ == "__main__":
    unittest.main()
