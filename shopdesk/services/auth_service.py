"""Registration, login and the security audit trail.

Sessions are stateless JWTs; logout only records the event; clients drop the token.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shopdesk.core.constants import ROLE_ADMIN, ROLE_SHOP_OWNER
from shopdesk.core.errors import Conflict, NotFound, Unauthorized, missing_fields_error
from shopdesk.core.security import issue_token, verify_password
from shopdesk.database.transaction import atomic
from shopdesk.models.business import Business
from shopdesk.models.employee import Employee
from shopdesk.models.security_log import SecurityLog
from shopdesk.models.shop import Shop
from shopdesk.models.user import User
from shopdesk.schemas.auth import LoginRequest, RegisterRequest
from shopdesk.schemas.entities import BusinessRead, ShopRead, UserRead
from shopdesk.services.user_service import find_by_login, stage_user

logger = logging.getLogger(__name__)

ACTIVITY_LIMIT = 50


def record_event(
    db: Session,
    *,
    event_type: str,
    status: str,
    description: str,
    severity: str = "low",
    user_id: Optional[int] = None,
    shop_id: Optional[int] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> SecurityLog:
    entry = SecurityLog(
        user_id=user_id,
        shop_id=shop_id,
        event_type=event_type,
        status=status,
        description=description,
        severity=severity,
        ip_address=ip_address or "unknown",
        user_agent=user_agent,
    )
    db.add(entry)
    return entry


def owned_business(db: Session, user_id: int) -> Optional[Business]:
    return db.execute(
        select(Business).options(selectinload(Business.shops)).where(Business.owner_id == user_id)
    ).scalars().first()


def _employee_business(db: Session, user_id: int):
    employee = db.execute(select(Employee).where(Employee.user_id == user_id)).scalars().first()
    if employee is None:
        return None, None
    business = db.execute(
        select(Business).options(selectinload(Business.shops)).where(Business.id == employee.business_id)
    ).scalars().first()
    return employee, business


def session_payload(db: Session, user: User) -> dict:
    """Build the login/register response body for ``user``, including a fresh token."""
    business = None
    shops = []
    shop_id = user.shop_id
    is_setup_complete = True

    if user.role == ROLE_ADMIN:
        shops = db.execute(select(Shop).order_by(Shop.id)).scalars().all()
    elif user.role == ROLE_SHOP_OWNER:
        business = owned_business(db, user.id)
        is_setup_complete = business is not None
        shops = business.shops if business is not None else []
    else:
        employee, business = _employee_business(db, user.id)
        if employee is not None:
            shop_id = employee.shop_id
        shops = business.shops if business is not None else []

    token = issue_token(
        user_id=user.id,
        role=user.role,
        username=user.username,
        shop_id=shop_id,
        business_id=business.id if business is not None else None,
    )
    return {
        "user": UserRead.model_validate(user).to_payload(),
        "business": BusinessRead.model_validate(business).to_payload() if business is not None else None,
        "shops": [ShopRead.model_validate(shop).to_payload() for shop in shops],
        "shopId": shop_id,
        "isSetupComplete": is_setup_complete,
        "token": token,
    }


def register(db: Session, payload: RegisterRequest, *, ip_address=None, user_agent=None) -> User:
    """Create a user; non-owner roles also get an employee record in the same transaction."""
    is_employee = payload.role not in (ROLE_SHOP_OWNER, ROLE_ADMIN)
    if is_employee:
        missing = [name for name, value in (("shopId", payload.shop_id), ("businessId", payload.business_id)) if value is None]
        if missing:
            raise missing_fields_error(missing)
        if db.get(Shop, payload.shop_id) is None:
            raise NotFound("Shop {} not found".format(payload.shop_id))

    try:
        with atomic(db):
            user = stage_user(
                db,
                email=payload.email,
                username=payload.username,
                password=payload.password,
                role=payload.role,
                shop_id=payload.shop_id if is_employee else None,
                is_staff=is_employee,
            )
            if is_employee:
                db.add(
                    Employee(
                        user_id=user.id,
                        business_id=payload.business_id,
                        shop_id=payload.shop_id,
                        first_name=payload.first_name,
                        last_name=payload.last_name,
                        email=user.email,
                        phone=payload.phone,
                        role=payload.role,
                        status="active",
                    )
                )
            record_event(
                db,
                event_type="register",
                status="success",
                description="User registered",
                user_id=user.id,
                shop_id=user.shop_id,
                ip_address=ip_address,
                user_agent=user_agent,
            )
    except IntegrityError as exc:
        raise Conflict("An account with this email or username already exists") from exc

    logger.info("Registered user %s with role %s.", user.id, user.role)
    return user


def login(db: Session, payload: LoginRequest, *, ip_address=None, user_agent=None) -> User:
    user = find_by_login(db, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        with atomic(db):
            record_event(
                db,
                event_type="failed_login",
                status="failure",
                description="Login with unknown account" if user is None else "Incorrect password",
                severity="medium",
                user_id=user.id if user is not None else None,
                shop_id=user.shop_id if user is not None else None,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        logger.warning("Failed login for %s.", payload.email)
        raise Unauthorized("Invalid email or password")

    with atomic(db):
        record_event(
            db,
            event_type="login",
            status="success",
            description="User logged in",
            user_id=user.id,
            shop_id=user.shop_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    return user


def logout(db: Session, user_id: int, *, ip_address=None, user_agent=None) -> None:
    with atomic(db):
        record_event(
            db,
            event_type="logout",
            status="success",
            description="User logged out",
            user_id=user_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )


def is_active_user(db: Session, user_id: int) -> bool:
    return db.get(User, user_id) is not None


def activities(db: Session, user_id: int, *, limit: int = ACTIVITY_LIMIT) -> List[SecurityLog]:
    return list(
        db.execute(
            select(SecurityLog)
            .where(SecurityLog.user_id == user_id)
            .order_by(SecurityLog.created_at.desc(), SecurityLog.id.desc())
            .limit(limit)
        )
        .scalars()
        .all()
    )
