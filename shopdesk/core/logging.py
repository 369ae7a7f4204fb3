import json
import logging
from datetime import datetime, timezone

from shopdesk.config import get_settings

# Attributes the operation dispatcher attaches through ``extra``.
DISPATCH_FIELDS = ("operation", "error_code", "user_id")


class OperationFilter(logging.Filter):
    """Give every record an ``op`` attribute so the text format can always show it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.op = getattr(record, "operation", None) or "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in DISPATCH_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def build_handler(json_output: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.addFilter(OperationFilter())
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s [%(op)s] %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
    return handler


def setup_logging() -> None:
    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(build_handler(settings.LOG_JSON))

    # SQLAlchemy echoes every statement at INFO.
    if level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
