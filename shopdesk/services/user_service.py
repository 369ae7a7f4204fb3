from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shopdesk.core.errors import Conflict, NotFound
from shopdesk.core.security import hash_password
from shopdesk.models.user import User


def normalize_identity(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def find_by_login(db: Session, login: str) -> Optional[User]:
    """Look a user up by email or username."""
    login = normalize_identity(login)
    return db.execute(
        select(User).where((func.lower(User.email) == login) | (func.lower(User.username) == login))
    ).scalars().first()


def ensure_unique(db: Session, *, email: Optional[str] = None, username: Optional[str] = None, exclude_id=None):
    if email:
        stmt = select(User.id).where(func.lower(User.email) == normalize_identity(email))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if db.execute(stmt).first() is not None:
            raise Conflict("A user with email {} already exists".format(normalize_identity(email)))
    if username:
        stmt = select(User.id).where(func.lower(User.username) == normalize_identity(username))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if db.execute(stmt).first() is not None:
            raise Conflict("Username {} is already taken".format(normalize_identity(username)))


def stage_user(
    db: Session,
    *,
    email: str,
    username: str,
    password: str,
    role: str,
    shop_id: Optional[int] = None,
    is_staff: bool = False,
) -> User:
    """Add a new user to the caller's transaction after the uniqueness checks."""
    ensure_unique(db, email=email, username=username)
    user = User(
        email=normalize_identity(email),
        username=normalize_identity(username),
        password_hash=hash_password(password),
        role=role,
        shop_id=shop_id,
        is_staff=is_staff,
    )
    db.add(user)
    db.flush()
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User {} not found".format(user_id))
    return user
