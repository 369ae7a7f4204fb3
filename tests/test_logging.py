import json
import logging
import unittest

from shopdesk.core.logging import JsonFormatter, OperationFilter
from shopdesk.rpc import invoke
from tests.fixtures import make_engine, make_session_factory


def _record(**extra):
    record = logging.LogRecord("shopdesk.rpc", logging.WARNING, __file__, 1, "%s failed", ("inventory:get",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class LoggingFormatTest(unittest.TestCase):
    def test_json_carries_dispatch_fields(self):
        line = JsonFormatter().format(_record(operation="inventory:get", error_code="NotFound", user_id=None))
        payload = json.loads(line)

        self.assertEqual(payload["message"], "inventory:get failed")
        self.assertEqual(payload["operation"], "inventory:get")
        self.assertEqual(payload["error_code"], "NotFound")
        self.assertNotIn("user_id", payload)

    def test_filter_fills_operation_placeholder(self):
        plain = _record()
        tagged = _record(operation="auth:login")
        log_filter = OperationFilter()

        self.assertTrue(log_filter.filter(plain))
        self.assertTrue(log_filter.filter(tagged))
        self.assertEqual(plain.op, "-")
        self.assertEqual(tagged.op, "auth:login")

    def test_failed_dispatch_is_tagged(self):
        engine = make_engine()
        try:
            with self.assertLogs("shopdesk.rpc", level="WARNING") as captured:
                response = invoke("inventory:get", {"id": 404}, session_factory=make_session_factory(engine))
        finally:
            engine.dispose()

        self.assertEqual(response["error"], "NotFound")
        record = captured.records[0]
        self.assertEqual(record.operation, "inventory:get")
        self.assertEqual(record.error_code, "NotFound")
        self.assertIsNone(record.user_id)


if __name__ == "__main__":
    unittest.main()
