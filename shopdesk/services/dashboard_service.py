"""Time-bucketed sums and top-N rollups for the dashboard operations.

All aggregation runs over the rows of the resolved shop scope and is computed
fresh on every call.
"""

from collections import defaultdict
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shopdesk.config import get_settings
from shopdesk.core.buckets import bucket_label, bucketize, normalize_bucket
from shopdesk.core.constants import DIRECTION_INBOUND
from shopdesk.core.dates import utcnow
from shopdesk.core.errors import ScopeRequired
from shopdesk.core.money import to_decimal
from shopdesk.models.business import Business
from shopdesk.models.category import Category
from shopdesk.models.inventory import InventoryItem
from shopdesk.models.product import Product
from shopdesk.models.sales import Sales
from shopdesk.models.shop import Shop
from shopdesk.models.stock_movement import StockMovement
from shopdesk.models.supplier import Supplier
from shopdesk.schemas.dashboard import (
    AmountPoint,
    InventoryStats,
    NetChangePoint,
    TopCategory,
    TopProduct,
    TopSupplier,
)

_SHORT_VIEWS = ("minute", "hour")
_TREND_DEFAULT_DAYS = 7


def resolve_scope(db: Session, *, business_id: Optional[int] = None, shop_id: Optional[int] = None) -> List[int]:
    """Return the shop ids a dashboard query covers; ``shop_id`` wins over ``business_id``."""
    if shop_id is not None:
        if db.get(Shop, shop_id) is None:
            raise ScopeRequired("Shop {} does not exist".format(shop_id))
        return [shop_id]
    if business_id is not None:
        if db.get(Business, business_id) is None:
            raise ScopeRequired("Business {} does not exist".format(business_id))
        shop_ids = db.execute(
            select(Shop.id).where(Shop.business_id == business_id).order_by(Shop.id)
        ).scalars().all()
        return list(shop_ids)
    raise ScopeRequired("A businessId or shopId is required")


def default_range(bucket, start, end, *, fallback_days=None, now=None):
    """Fill an open range: 24 hours for minute/hour views, else ``fallback_days`` or all time."""
    if start is not None or end is not None:
        return start, end
    now = now or utcnow()
    if bucket in _SHORT_VIEWS:
        return now - timedelta(hours=24), now
    if fallback_days:
        return now - timedelta(days=fallback_days), now
    return None, None


def _in_range(column, start, end):
    conditions = []
    if start is not None:
        conditions.append(column >= start)
    if end is not None:
        conditions.append(column <= end)
    return conditions


def inventory_stats(db: Session, shop_ids) -> InventoryStats:
    items = db.execute(
        select(InventoryItem).where(InventoryItem.shop_id.in_(shop_ids))
    ).scalars().all()
    total_value = Decimal("0")
    total_quantity = 0
    low_stock = 0
    for item in items:
        total_quantity += item.quantity
        total_value += Decimal(item.quantity) * to_decimal(item.unit_cost)
        if item.quantity <= item.reorder_point:
            low_stock += 1
    return InventoryStats(
        total_quantity=total_quantity,
        total_value=to_decimal(total_value),
        total_items=len(items),
        low_stock=low_stock,
    )


def inventory_trends(db: Session, shop_ids, *, view=None, start=None, end=None) -> List[NetChangePoint]:
    """Net inbound minus outbound quantity per bucket of movement date."""
    bucket = normalize_bucket(view)
    start, end = default_range(bucket, start, end, fallback_days=_TREND_DEFAULT_DAYS)
    movements = db.execute(
        select(StockMovement).where(
            StockMovement.shop_id.in_(shop_ids),
            *_in_range(StockMovement.date, start, end),
        )
    ).scalars().all()
    series = bucketize(
        movements,
        bucket,
        timestamp=lambda row: row.date,
        value=lambda row: row.quantity if row.direction == DIRECTION_INBOUND else -row.quantity,
    )
    return [NetChangePoint(period=label, net_change=total) for label, total in series]


def _sales_in_scope(db: Session, shop_ids, start, end):
    return db.execute(
        select(Sales).where(
            Sales.shop_id.in_(shop_ids),
            *_in_range(Sales.created_at, start, end),
        )
    ).scalars().all()


def _amount_series(rows, bucket, attribute) -> List[AmountPoint]:
    series = bucketize(
        rows,
        bucket,
        timestamp=lambda row: row.created_at,
        value=lambda row: to_decimal(getattr(row, attribute)),
    )
    return [AmountPoint(period=label, amount=to_decimal(total)) for label, total in series]


def sales_dashboard(db: Session, shop_ids, *, view=None, start=None, end=None) -> dict:
    bucket = normalize_bucket(view)
    start, end = default_range(bucket, start, end)
    sales = _sales_in_scope(db, shop_ids, start, end)
    revenue = sum((to_decimal(sale.net_amount) for sale in sales), Decimal("0"))
    return {
        "weeklyStats": {
            "totalItems": len(sales),
            "totalRevenue": str(to_decimal(revenue)),
        },
        "trends": [point.to_payload() for point in _amount_series(sales, bucket, "net_amount")],
    }


def finance_dashboard(db: Session, shop_ids, *, view=None, start=None, end=None) -> dict:
    """Net income and gross sales per bucket."""
    bucket = normalize_bucket(view)
    start, end = default_range(bucket, start, end)
    sales = _sales_in_scope(db, shop_ids, start, end)
    return {
        "monthlyData": [point.to_payload() for point in _amount_series(sales, bucket, "net_amount")],
        "salesTrends": [point.to_payload() for point in _amount_series(sales, bucket, "total")],
    }


def _rank(records, limit):
    """Order by value descending; ties by name then id."""
    records.sort(key=lambda record: (-record.value, record.name, record.id))
    return records[:limit]


def top_suppliers(db: Session, shop_ids, *, limit=None) -> List[TopSupplier]:
    limit = limit or get_settings().TOP_SUPPLIERS_LIMIT
    rows = db.execute(
        select(Supplier, InventoryItem)
        .join(InventoryItem, InventoryItem.supplier_id == Supplier.id)
        .where(InventoryItem.shop_id.in_(shop_ids))
    ).all()
    totals = {}
    for supplier, item in rows:
        record = totals.get(supplier.id)
        if record is None:
            record = TopSupplier(id=supplier.id, name=supplier.name, items=0, value=Decimal("0"))
            totals[supplier.id] = record
        record.items += 1
        record.value += Decimal(item.quantity) * to_decimal(item.unit_cost)
    ranked = _rank(list(totals.values()), limit)
    for record in ranked:
        record.value = to_decimal(record.value)
    return ranked


def top_products(db: Session, shop_ids, *, limit=None) -> List[TopProduct]:
    limit = limit or get_settings().TOP_PRODUCTS_LIMIT
    rows = db.execute(
        select(Product, InventoryItem)
        .join(InventoryItem, InventoryItem.product_id == Product.id)
        .where(InventoryItem.shop_id.in_(shop_ids))
    ).all()
    totals = {}
    for product, item in rows:
        record = totals.get(product.id)
        if record is None:
            record = TopProduct(
                id=product.id,
                name=product.name,
                sku=product.sku,
                featured_image=product.featured_image,
                in_stock=0,
                value=Decimal("0"),
            )
            totals[product.id] = record
        record.in_stock += item.quantity
        record.value += Decimal(item.quantity) * to_decimal(item.selling_price)
    ranked = _rank(list(totals.values()), limit)
    for record in ranked:
        record.value = to_decimal(record.value)
    return ranked


def top_categories(db: Session, shop_ids, *, view=None, start=None, end=None, limit=None) -> List[TopCategory]:
    """Categories by stock value, one entry per (category, period of product creation)."""
    limit = limit or get_settings().TOP_CATEGORIES_LIMIT
    bucket = normalize_bucket(view)
    start, end = default_range(bucket, start, end)

    products = db.execute(
        select(Product, Category)
        .join(Category, Category.id == Product.category_id)
        .where(
            Product.shop_id.in_(shop_ids),
            *_in_range(Product.created_at, start, end),
        )
    ).all()
    if not products:
        return []

    product_ids = [product.id for product, _category in products]
    stock = defaultdict(lambda: [0, Decimal("0")])
    for item in db.execute(
        select(InventoryItem).where(
            InventoryItem.product_id.in_(product_ids),
            InventoryItem.shop_id.in_(shop_ids),
        )
    ).scalars():
        entry = stock[item.product_id]
        entry[0] += item.quantity
        entry[1] += Decimal(item.quantity) * to_decimal(item.selling_price)

    groups = {}
    for product, category in products:
        period = bucket_label(product.created_at, bucket)
        key = (category.id, period)
        record = groups.get(key)
        if record is None:
            record = TopCategory(
                id=category.id,
                name=category.name,
                period=period,
                product_count=0,
                total_items=0,
                total_value=Decimal("0"),
            )
            groups[key] = record
        quantity, value = stock.get(product.id, (0, Decimal("0")))
        record.product_count += 1
        record.total_items += quantity
        record.total_value += value

    records = list(groups.values())
    records.sort(key=lambda record: (-record.total_value, record.name, record.id, record.period))
    ranked = records[:limit]
    for record in ranked:
        record.total_value = to_decimal(record.total_value)
    return ranked


def inventory_dashboard(db: Session, shop_ids, *, view=None, start=None, end=None) -> dict:
    return {
        "stats": inventory_stats(db, shop_ids).to_payload(),
        "trends": [point.to_payload() for point in inventory_trends(db, shop_ids, view=view, start=start, end=end)],
        "topSuppliers": [record.to_payload() for record in top_suppliers(db, shop_ids)],
        "topProducts": [record.to_payload() for record in top_products(db, shop_ids)],
    }
