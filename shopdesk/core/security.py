from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt

from shopdesk.config import get_settings
from shopdesk.core.constants import PRIVILEGED_ROLES
from shopdesk.core.errors import Unauthorized

_HASH_SCHEME = "pbkdf2_sha256"


def _pbkdf2(password: str, salt: str, rounds: int) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        rounds,
    )
    return digest.hex()


def hash_password(password: str, *, rounds: Optional[int] = None) -> str:
    rounds = rounds or get_settings().PASSWORD_PBKDF2_ROUNDS
    salt = secrets.token_hex(16)
    return "{}${}${}${}".format(_HASH_SCHEME, rounds, salt, _pbkdf2(password, salt, rounds))


def verify_password(password: str, encoded: Optional[str]) -> bool:
    if not encoded or not password:
        return False
    try:
        scheme, rounds, salt, expected = encoded.split("$", 3)
        rounds = int(rounds)
    except ValueError:
        return False
    if scheme != _HASH_SCHEME:
        return False
    return hmac.compare_digest(_pbkdf2(password, salt, rounds), expected)


@lru_cache
def _fallback_secret() -> str:
    return secrets.token_urlsafe(32)


def _signing_secret() -> str:
    return get_settings().JWT_SECRET or _fallback_secret()


@dataclass(frozen=True)
class AuthSession:
    """The caller's identity, decoded from a session token for one request."""

    user_id: int
    role: str
    username: str = ""
    shop_id: Optional[int] = None
    business_id: Optional[int] = None
    claims: dict = field(default_factory=dict, compare=False)

    @property
    def is_admin(self) -> bool:
        return self.role in PRIVILEGED_ROLES


def issue_token(
    *,
    user_id: int,
    role: str,
    username: str = "",
    shop_id: Optional[int] = None,
    business_id: Optional[int] = None,
) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "username": username,
        "shop_id": shop_id,
        "business_id": business_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.SESSION_TTL_MINUTES),
    }
    if settings.JWT_ISSUER:
        payload["iss"] = settings.JWT_ISSUER
    return jwt.encode(payload, _signing_secret(), algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> AuthSession:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            _signing_secret(),
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
        )
    except jwt.PyJWTError as exc:
        raise Unauthorized("Invalid or expired session") from exc
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise Unauthorized("Invalid or expired session") from exc
    return AuthSession(
        user_id=user_id,
        role=payload.get("role") or "",
        username=payload.get("username") or "",
        shop_id=payload.get("shop_id"),
        business_id=payload.get("business_id"),
        claims=payload,
    )


def get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None
