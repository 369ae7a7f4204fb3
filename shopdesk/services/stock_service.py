"""Stock adjustment engine.

Every quantity change on an inventory item goes through :func:`adjust_stock` or
:func:`record_physical_count`. Each call writes exactly one item update and one
ledger row in a single transaction, while holding the item's lock from the
first read until the commit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopdesk.core.constants import (
    DIRECTION_INBOUND,
    DIRECTION_OUTBOUND,
    MOVEMENT_ADDED,
    MOVEMENT_ADJUSTMENT,
    MOVEMENT_DIRECTIONS,
    MOVEMENT_TYPES,
)
from shopdesk.core.dates import utcnow
from shopdesk.core.errors import InvalidAdjustment, NotFound, StoreError
from shopdesk.core.locks import inventory_locks
from shopdesk.core.money import to_decimal
from shopdesk.core.stock_rules import refresh_derived_fields
from shopdesk.models.inventory import InventoryItem
from shopdesk.models.stock_movement import StockMovement
from shopdesk.schemas.common import page_count

logger = logging.getLogger(__name__)


@dataclass
class AdjustmentResult:
    item: InventoryItem
    movement: StockMovement

    @property
    def new_quantity(self) -> int:
        return self.item.quantity

    @property
    def new_total_value(self) -> Decimal:
        return self.item.total_value

    @property
    def new_status(self) -> str:
        return self.item.status


def _load_item(db: Session, inventory_id: int) -> InventoryItem:
    item = db.get(InventoryItem, inventory_id, populate_existing=True)
    if item is None:
        raise NotFound("Inventory item {} not found".format(inventory_id))
    return item


def _resolve_movement_type(movement_type: Optional[str], direction: str) -> str:
    if movement_type is None:
        return MOVEMENT_ADDED if direction == DIRECTION_INBOUND else MOVEMENT_ADJUSTMENT
    if movement_type not in MOVEMENT_TYPES:
        raise InvalidAdjustment("Unknown movement type '{}'".format(movement_type))
    expected = MOVEMENT_DIRECTIONS.get(movement_type)
    if expected is not None and expected != direction:
        raise InvalidAdjustment(
            "{} movements must be {}, got {}".format(movement_type, expected, direction)
        )
    return movement_type


def _build_movement(
    item: InventoryItem,
    *,
    quantity: int,
    direction: str,
    movement_type: str,
    reason: Optional[str],
    performed_by_id: Optional[int],
    cost_per_unit,
    system_count: Optional[int] = None,
    physical_count: Optional[int] = None,
) -> StockMovement:
    cost = to_decimal(item.unit_cost if cost_per_unit is None else cost_per_unit, field="cost_per_unit")
    now = utcnow()
    return StockMovement(
        product_id=item.product_id,
        inventory_id=item.id,
        shop_id=item.shop_id,
        quantity=quantity,
        direction=direction,
        movement_type=movement_type,
        reason=reason,
        performed_by_id=performed_by_id,
        cost_per_unit=cost,
        total_cost=to_decimal(cost * quantity),
        system_count=system_count,
        physical_count=physical_count,
        date=now,
        created_at=now,
    )


def _commit(db: Session, item: InventoryItem, movement: StockMovement) -> AdjustmentResult:
    db.add(movement)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError(str(exc)) from exc
    return AdjustmentResult(item=item, movement=movement)


def adjust_stock(
    db: Session,
    inventory_id: int,
    delta: int,
    *,
    reason: Optional[str] = None,
    performed_by_id: Optional[int] = None,
    movement_type: Optional[str] = None,
    cost_per_unit=None,
) -> AdjustmentResult:
    """Apply a signed quantity change and append the matching ledger row."""
    delta = int(delta)
    if delta == 0:
        raise InvalidAdjustment("Adjustment quantity must be non-zero")
    direction = DIRECTION_INBOUND if delta > 0 else DIRECTION_OUTBOUND
    movement_type = _resolve_movement_type(movement_type, direction)

    with inventory_locks.hold(inventory_id):
        try:
            item = _load_item(db, inventory_id)
            new_quantity = item.quantity + delta
            if new_quantity < 0:
                raise InvalidAdjustment(
                    "Insufficient stock: {} on hand, requested {}".format(item.quantity, delta)
                )
            movement = _build_movement(
                item,
                quantity=abs(delta),
                direction=direction,
                movement_type=movement_type,
                reason=reason,
                performed_by_id=performed_by_id,
                cost_per_unit=cost_per_unit,
            )
            item.quantity = new_quantity
            refresh_derived_fields(item)
            result = _commit(db, item, movement)
        except BaseException:
            db.rollback()
            raise

    logger.info(
        "Inventory %s adjusted by %+d to %d (%s).",
        inventory_id,
        delta,
        result.new_quantity,
        movement_type,
    )
    return result


def record_physical_count(
    db: Session,
    inventory_id: int,
    physical_count: int,
    *,
    system_count: Optional[int] = None,
    product_id: Optional[int] = None,
    reason: Optional[str] = None,
    performed_by_id: Optional[int] = None,
) -> AdjustmentResult:
    """Set the quantity to a counted value, recording the variance as an Adjustment."""
    physical_count = int(physical_count)
    if physical_count < 0:
        raise InvalidAdjustment("Physical count cannot be negative")

    with inventory_locks.hold(inventory_id):
        try:
            item = _load_item(db, inventory_id)
            stored = item.quantity
            if product_id is not None and product_id != item.product_id:
                raise InvalidAdjustment(
                    "Inventory item {} does not hold product {}".format(inventory_id, product_id)
                )
            if system_count is not None and int(system_count) != stored:
                logger.warning(
                    "Inventory %s: caller reported system count %s but %s is stored.",
                    inventory_id,
                    system_count,
                    stored,
                )
            delta = physical_count - stored
            direction = DIRECTION_INBOUND if delta >= 0 else DIRECTION_OUTBOUND
            movement = _build_movement(
                item,
                quantity=abs(delta),
                direction=direction,
                movement_type=MOVEMENT_ADJUSTMENT,
                reason=reason or "Physical count",
                performed_by_id=performed_by_id,
                cost_per_unit=None,
                system_count=stored,
                physical_count=physical_count,
            )
            if delta:
                item.quantity = physical_count
                refresh_derived_fields(item)
            result = _commit(db, item, movement)
        except BaseException:
            db.rollback()
            raise

    logger.info(
        "Inventory %s counted: system %d, physical %d.",
        inventory_id,
        stored,
        physical_count,
    )
    return result


def record_opening_stock(
    db: Session,
    item: InventoryItem,
    *,
    performed_by_id: Optional[int] = None,
    reason: str = "Opening stock",
) -> Optional[StockMovement]:
    """Stage the Added movement for a freshly created item; the caller commits."""
    if not item.quantity or item.quantity <= 0:
        return None
    if item.id is None:
        db.flush()
    movement = _build_movement(
        item,
        quantity=item.quantity,
        direction=DIRECTION_INBOUND,
        movement_type=MOVEMENT_ADDED,
        reason=reason,
        performed_by_id=performed_by_id,
        cost_per_unit=None,
    )
    db.add(movement)
    return movement


def list_movements(
    db: Session,
    inventory_id: int,
    *,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    product_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
):
    """Return ``(movements, total, pages)`` newest first."""
    conditions = [StockMovement.inventory_id == inventory_id]
    if product_id is not None:
        conditions.append(StockMovement.product_id == product_id)
    if start is not None:
        conditions.append(StockMovement.date >= start)
    if end is not None:
        conditions.append(StockMovement.date <= end)

    total = db.execute(select(func.count(StockMovement.id)).where(*conditions)).scalar_one()
    movements = (
        db.execute(
            select(StockMovement)
            .where(*conditions)
            .order_by(StockMovement.date.desc(), StockMovement.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(movements), total, page_count(total, limit)


def movements_for_export(db: Session, *, shop_ids=None, inventory_id: Optional[int] = None):
    stmt = select(StockMovement).order_by(StockMovement.date, StockMovement.id)
    if inventory_id is not None:
        stmt = stmt.where(StockMovement.inventory_id == inventory_id)
    if shop_ids is not None:
        stmt = stmt.where(StockMovement.shop_id.in_(shop_ids))
    return list(db.execute(stmt).scalars().all())
