import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shopdesk.config import get_settings
from shopdesk.core.errors import NotFound, ValidationError, missing_fields_error
from shopdesk.core.locks import inventory_locks
from shopdesk.core.money import to_decimal
from shopdesk.core.stock_rules import refresh_derived_fields
from shopdesk.database.transaction import atomic
from shopdesk.models.inventory import InventoryItem
from shopdesk.models.product import Product
from shopdesk.models.shop import Shop
from shopdesk.schemas.common import page_count
from shopdesk.schemas.inventory import InventoryCreate, InventoryItemRead, InventoryUpdate
from shopdesk.services.stock_service import record_opening_stock

logger = logging.getLogger(__name__)


def get_item(db: Session, inventory_id: int) -> InventoryItem:
    item = db.get(InventoryItem, inventory_id)
    if item is None:
        raise NotFound("Inventory item {} not found".format(inventory_id))
    return item


def _require_shop(db: Session, shop_id: int) -> Shop:
    shop = db.get(Shop, shop_id)
    if shop is None:
        raise NotFound("Shop {} not found".format(shop_id))
    return shop


def _require_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFound("Product {} not found".format(product_id))
    return product


def read_item(db: Session, item: InventoryItem) -> InventoryItemRead:
    record = InventoryItemRead.model_validate(item)
    product = db.get(Product, item.product_id)
    if product is not None:
        record.product_name = product.name
        record.sku = product.sku
    return record


def build_item(
    db: Session,
    *,
    shop_id: int,
    product: Product,
    quantity: int = 0,
    unit_cost=None,
    selling_price=None,
    reorder_point: Optional[int] = None,
    supplier_id: Optional[int] = None,
    performed_by_id: Optional[int] = None,
) -> InventoryItem:
    """Stage a new item plus its opening movement inside the caller's transaction."""
    if reorder_point is None:
        reorder_point = product.reorder_point
    if reorder_point is None:
        reorder_point = get_settings().DEFAULT_REORDER_POINT
    item = InventoryItem(
        shop_id=shop_id,
        product_id=product.id,
        supplier_id=supplier_id,
        quantity=quantity,
        unit_cost=to_decimal(product.purchase_price if unit_cost is None else unit_cost),
        selling_price=to_decimal(product.selling_price if selling_price is None else selling_price),
        reorder_point=reorder_point,
    )
    refresh_derived_fields(item)
    db.add(item)
    db.flush()
    record_opening_stock(db, item, performed_by_id=performed_by_id)
    return item


def create_item(db: Session, payload: InventoryCreate) -> InventoryItem:
    _require_shop(db, payload.shop_id)
    product = _require_product(db, payload.product_id)
    with atomic(db):
        item = build_item(
            db,
            shop_id=payload.shop_id,
            product=product,
            quantity=payload.quantity,
            unit_cost=payload.unit_cost,
            selling_price=payload.selling_price,
            reorder_point=payload.reorder_point,
            supplier_id=payload.supplier_id,
            performed_by_id=payload.performed_by_id,
        )
    logger.info("Created inventory item %s for product %s.", item.id, product.id)
    return item


def update_item(db: Session, inventory_id: int, changes: dict) -> InventoryItem:
    if "quantity" in changes:
        raise ValidationError("Quantity changes must go through stock adjustments")
    payload = InventoryUpdate.model_validate(changes)
    fields = payload.model_dump(exclude_unset=True)
    # total_value and status depend on quantity; reload it under the adjustment lock.
    with inventory_locks.hold(inventory_id):
        with atomic(db):
            item = db.get(InventoryItem, inventory_id, populate_existing=True)
            if item is None:
                raise NotFound("Inventory item {} not found".format(inventory_id))
            for name, value in fields.items():
                if name in ("unit_cost", "selling_price") and value is not None:
                    value = to_decimal(value)
                setattr(item, name, value)
            refresh_derived_fields(item)
    return item


def list_by_shop(
    db: Session,
    *,
    shop_id: Optional[int],
    is_admin: bool,
    page: int,
    limit: int,
):
    """Page through a shop's items; admins without a shop see every item."""
    limit = min(limit, get_settings().MAX_PAGE_SIZE)
    conditions = []
    if shop_id is not None:
        conditions.append(InventoryItem.shop_id == shop_id)
    elif not is_admin:
        raise missing_fields_error(["shopId"])

    total = db.execute(select(func.count(InventoryItem.id)).where(*conditions)).scalar_one()
    rows = (
        db.execute(
            select(InventoryItem, Product)
            .join(Product, Product.id == InventoryItem.product_id)
            .where(*conditions)
            .order_by(Product.name, InventoryItem.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        .all()
    )
    items = []
    for item, product in rows:
        record = InventoryItemRead.model_validate(item)
        record.product_name = product.name
        record.sku = product.sku
        items.append(record)
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": page_count(total, limit),
    }
    return items, pagination


def delete_item(db: Session, inventory_id: int) -> None:
    item = get_item(db, inventory_id)
    with atomic(db):
        db.delete(item)
    logger.info("Deleted inventory item %s; its movements are kept.", inventory_id)


def items_for_export(db: Session, *, shop_ids=None):
    stmt = (
        select(InventoryItem, Product)
        .join(Product, Product.id == InventoryItem.product_id)
        .order_by(InventoryItem.shop_id, Product.name, InventoryItem.id)
    )
    if shop_ids is not None:
        stmt = stmt.where(InventoryItem.shop_id.in_(shop_ids))
    return db.execute(stmt).all()
