"""Named-operation registry and dispatcher.

Handlers are plain functions ``handler(ctx, payload) -> dict`` registered with
:func:`operation`. :func:`dispatch` is the only place where exceptions become
``{"success": False, ...}`` envelopes.
"""

import importlib
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopdesk.config import get_settings
from shopdesk.core.errors import NotFound, ShopdeskError, StoreError, Unauthorized, ValidationError
from shopdesk.core.security import AuthSession, decode_token
from shopdesk.database.session import SessionLocal
from shopdesk.schemas.common import validation_message

logger = logging.getLogger(__name__)


@dataclass
class Operation:
    name: str
    handler: Callable
    public: bool = False


@dataclass
class RequestContext:
    db: Session
    auth: Optional[AuthSession] = None
    token: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @property
    def user_id(self) -> Optional[int]:
        return self.auth.user_id if self.auth is not None else None


_REGISTRY: Dict[str, Operation] = {}


def operation(name: str, *, public: bool = False):
    def decorator(func):
        if name in _REGISTRY:
            raise RuntimeError("Operation {} registered twice".format(name))
        _REGISTRY[name] = Operation(name=name, handler=func, public=public)
        return func

    return decorator


def load_handlers() -> None:
    importlib.import_module("shopdesk.handlers")


def registered_operations():
    load_handlers()
    return sorted(_REGISTRY)


def unwrap(payload: dict, *keys: str) -> dict:
    """Return the nested object under the first present wrapper key, else ``payload``."""
    for key in keys:
        inner = payload.get(key)
        if isinstance(inner, dict):
            return inner
    return payload


def _log_fields(name: str, ctx: RequestContext, error_code: str) -> dict:
    return {"operation": name, "error_code": error_code, "user_id": ctx.user_id}


def dispatch(name: str, payload, ctx: RequestContext) -> dict:
    load_handlers()
    try:
        entry = _REGISTRY.get(name)
        if entry is None:
            raise NotFound("Unknown operation: {}".format(name))
        if ctx.token and ctx.auth is None:
            ctx.auth = decode_token(ctx.token)
        if get_settings().AUTH_REQUIRED and not entry.public and ctx.auth is None:
            raise Unauthorized("Authentication required")
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Payload must be an object")
        result = entry.handler(ctx, payload) or {}
        return {"success": True, **result}
    except ShopdeskError as exc:
        ctx.db.rollback()
        logger.warning("%s failed: %s %s", name, exc.code, exc.message, extra=_log_fields(name, ctx, exc.code))
        return exc.to_envelope()
    except PydanticValidationError as exc:
        ctx.db.rollback()
        message = validation_message(exc)
        logger.warning("%s failed: ValidationError %s", name, message, extra=_log_fields(name, ctx, "ValidationError"))
        return ValidationError(message).to_envelope()
    except SQLAlchemyError as exc:
        ctx.db.rollback()
        logger.exception("%s failed with a store error", name, extra=_log_fields(name, ctx, StoreError.code))
        return StoreError(str(exc)).to_envelope()
    except Exception as exc:
        ctx.db.rollback()
        logger.exception("%s failed unexpectedly", name, extra=_log_fields(name, ctx, "InternalError"))
        return {"success": False, "error": "InternalError", "message": str(exc) or exc.__class__.__name__}


def invoke(name: str, payload=None, token: Optional[str] = None, *, ip_address=None, user_agent=None, session_factory=None) -> dict:
    """Run one operation in-process with its own session."""
    factory = session_factory or SessionLocal
    db = factory()
    try:
        ctx = RequestContext(db=db, token=token, ip_address=ip_address, user_agent=user_agent)
        return dispatch(name, payload, ctx)
    finally:
        db.close()


__all__ = [
    "Operation",
    "RequestContext",
    "dispatch",
    "invoke",
    "operation",
    "registered_operations",
    "unwrap",
]
