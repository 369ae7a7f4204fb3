import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shopdesk.core.constants import OHADA_STANDARD, STANDARD_INCOME_CODES
from shopdesk.core.errors import Conflict, NotFound, ScopeRequired
from shopdesk.core.money import format_amount, to_decimal
from shopdesk.database.transaction import atomic
from shopdesk.models.income import Income
from shopdesk.models.ohada_code import OhadaCode
from shopdesk.models.shop import Shop
from shopdesk.schemas.finance import IncomeCreate, IncomeQuery, IncomeUpdate, OhadaCodeCreate

logger = logging.getLogger(__name__)


def seed_standard_codes(db: Session) -> int:
    """Insert any missing standard income codes; returns how many were added."""
    existing = {
        (code, name)
        for code, name in db.execute(
            select(OhadaCode.code, OhadaCode.name).where(OhadaCode.type == "income")
        ).all()
    }
    created = 0
    for code, name, description in STANDARD_INCOME_CODES:
        if (code, name) in existing:
            continue
        db.add(
            OhadaCode(
                code=code,
                name=name,
                description=description,
                type="income",
                classification=OHADA_STANDARD,
            )
        )
        created += 1
    if created:
        db.flush()
    return created


def codes_by_type(db: Session, code_type: str) -> List[OhadaCode]:
    return list(
        db.execute(
            select(OhadaCode).where(OhadaCode.type == code_type).order_by(OhadaCode.code, OhadaCode.id)
        )
        .scalars()
        .all()
    )


def create_code(db: Session, payload: OhadaCodeCreate) -> OhadaCode:
    duplicate = db.execute(
        select(OhadaCode.id).where(
            OhadaCode.code == payload.code,
            OhadaCode.name == payload.name,
            OhadaCode.type == payload.type,
        )
    ).first()
    if duplicate is not None:
        raise Conflict(
            "OHADA code {} '{}' already exists for {}".format(payload.code, payload.name, payload.type)
        )
    code = OhadaCode(
        code=payload.code,
        name=payload.name,
        description=payload.description,
        type=payload.type,
        classification=payload.classification,
    )
    try:
        with atomic(db):
            db.add(code)
    except IntegrityError as exc:
        raise Conflict("OHADA code {} '{}' already exists".format(payload.code, payload.name)) from exc
    return code


def _require_code(db: Session, ohada_code_id: int) -> OhadaCode:
    code = db.get(OhadaCode, ohada_code_id)
    if code is None:
        raise NotFound("OHADA code {} not found".format(ohada_code_id))
    return code


def get_income(db: Session, income_id: int) -> Income:
    income = db.get(Income, income_id)
    if income is None:
        raise NotFound("Income {} not found".format(income_id))
    return income


def _scope_shop_ids(db: Session, query: IncomeQuery) -> Optional[List[int]]:
    if query.shop_id is not None:
        return [query.shop_id]
    if query.business_id is not None:
        return list(
            db.execute(select(Shop.id).where(Shop.business_id == query.business_id)).scalars().all()
        )
    return None


def list_incomes(db: Session, query: IncomeQuery) -> List[Income]:
    stmt = select(Income).options(selectinload(Income.ohada_code))
    shop_ids = _scope_shop_ids(db, query)
    if shop_ids is not None:
        stmt = stmt.where(Income.shop_id.in_(shop_ids))
    if query.ohada_code_id is not None:
        stmt = stmt.where(Income.ohada_code_id == query.ohada_code_id)
    if query.start_date is not None:
        stmt = stmt.where(Income.date >= query.start_date)
    if query.end_date is not None:
        stmt = stmt.where(Income.date <= query.end_date)
    stmt = stmt.order_by(Income.date.desc(), Income.id.desc())
    return list(db.execute(stmt).scalars().all())


def create_income(db: Session, payload: IncomeCreate, *, user_id: Optional[int] = None) -> Income:
    _require_code(db, payload.ohada_code_id)
    if payload.shop_id is not None and db.get(Shop, payload.shop_id) is None:
        raise ScopeRequired("Shop {} does not exist".format(payload.shop_id))
    income = Income(
        date=payload.date,
        description=payload.description,
        amount=to_decimal(payload.amount),
        payment_method=payload.payment_method,
        ohada_code_id=payload.ohada_code_id,
        shop_id=payload.shop_id,
        user_id=payload.user_id if payload.user_id is not None else user_id,
    )
    with atomic(db):
        db.add(income)
    logger.info("Recorded income %s of %s.", income.id, format_amount(income.amount))
    return income


def update_income(db: Session, income_id: int, payload: IncomeUpdate) -> Income:
    income = get_income(db, income_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("ohada_code_id") is not None:
        _require_code(db, changes["ohada_code_id"])
    with atomic(db):
        for name, value in changes.items():
            if value is None and name != "shop_id":
                continue
            if name == "amount":
                value = to_decimal(value)
            setattr(income, name, value)
    return income


def delete_income(db: Session, income_id: int) -> None:
    income = get_income(db, income_id)
    with atomic(db):
        db.delete(income)
