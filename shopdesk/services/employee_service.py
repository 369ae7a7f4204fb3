import logging
from datetime import date
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shopdesk.core.errors import Conflict, NotFound
from shopdesk.core.money import to_decimal
from shopdesk.database.transaction import atomic
from shopdesk.models.business import Business
from shopdesk.models.employee import Employee
from shopdesk.models.sales import Sales
from shopdesk.models.shop import Shop
from shopdesk.schemas.entities import EmployeeCreate, EmployeeUpdate
from shopdesk.services.user_service import ensure_unique, normalize_identity, stage_user

logger = logging.getLogger(__name__)


def get_employee(db: Session, employee_id: int) -> Employee:
    employee = db.execute(
        select(Employee)
        .options(selectinload(Employee.user), selectinload(Employee.shop))
        .where(Employee.id == employee_id)
    ).scalars().first()
    if employee is None:
        raise NotFound("Employee {} not found".format(employee_id))
    return employee


def create_employee(db: Session, payload: EmployeeCreate) -> Employee:
    """Create the login user and the employee record together, or neither."""
    if db.get(Business, payload.business_id) is None:
        raise NotFound("Business {} not found".format(payload.business_id))
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
                shop_id=payload.shop_id,
                is_staff=True,
            )
            employee = Employee(
                user_id=user.id,
                business_id=payload.business_id,
                shop_id=payload.shop_id,
                first_name=payload.first_name,
                last_name=payload.last_name,
                email=user.email,
                phone=payload.phone,
                role=payload.role,
                salary=to_decimal(payload.salary),
                employment_status=payload.employment_status,
                hire_date=date.today(),
                status="active",
            )
            db.add(employee)
    except IntegrityError as exc:
        raise Conflict("Employee email or username already exists") from exc

    logger.info("Created employee %s (user %s).", employee.id, user.id)
    return get_employee(db, employee.id)


def list_employees(db: Session, business_id: int) -> List[Employee]:
    return list(
        db.execute(
            select(Employee)
            .options(selectinload(Employee.user), selectinload(Employee.shop))
            .where(Employee.business_id == business_id)
            .order_by(Employee.created_at.desc(), Employee.id.desc())
        )
        .scalars()
        .all()
    )


def update_employee(db: Session, employee_id: int, payload: EmployeeUpdate) -> Employee:
    employee = get_employee(db, employee_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("shop_id") is not None and db.get(Shop, changes["shop_id"]) is None:
        raise NotFound("Shop {} not found".format(changes["shop_id"]))
    user = employee.user
    if changes.get("email") and user is not None:
        ensure_unique(db, email=changes["email"], exclude_id=user.id)

    try:
        with atomic(db):
            for name, value in changes.items():
                if value is None:
                    continue
                if name == "salary":
                    value = to_decimal(value)
                if name == "email":
                    value = normalize_identity(value)
                setattr(employee, name, value)
            if user is not None:
                if changes.get("email"):
                    user.email = employee.email
                if changes.get("shop_id") is not None:
                    user.shop_id = employee.shop_id
                if changes.get("role"):
                    user.role = employee.role
    except IntegrityError as exc:
        raise Conflict("Employee email already exists") from exc
    return get_employee(db, employee_id)


def delete_employee(db: Session, employee_id: int) -> None:
    """Remove the employee and its login user in one transaction."""
    employee = get_employee(db, employee_id)
    user = employee.user
    with atomic(db):
        db.delete(employee)
        db.flush()
        if user is not None:
            db.delete(user)
    logger.info("Deleted employee %s.", employee_id)


def employee_sales(db: Session, employee_id: int, *, start=None, end=None) -> List[Sales]:
    get_employee(db, employee_id)
    stmt = select(Sales).where(Sales.employee_id == employee_id)
    if start is not None:
        stmt = stmt.where(Sales.created_at >= start)
    if end is not None:
        stmt = stmt.where(Sales.created_at <= end)
    return list(db.execute(stmt.order_by(Sales.created_at, Sales.id)).scalars().all())
