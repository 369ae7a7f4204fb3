from decimal import Decimal

from shopdesk.core.constants import STOCK_STATUSES
from shopdesk.core.money import to_decimal

OUT_OF_STOCK, LOW_STOCK, MEDIUM_STOCK, HIGH_STOCK = STOCK_STATUSES


def stock_status(quantity, reorder_point):
    quantity = int(quantity or 0)
    reorder_point = int(reorder_point or 0)
    if quantity <= 0:
        return OUT_OF_STOCK
    if quantity <= reorder_point:
        return LOW_STOCK
    if quantity <= reorder_point * 2:
        return MEDIUM_STOCK
    return HIGH_STOCK


def stock_value(quantity, unit_cost) -> Decimal:
    return to_decimal(Decimal(int(quantity or 0)) * to_decimal(unit_cost))


def refresh_derived_fields(item) -> None:
    """Recompute ``total_value`` and ``status`` from quantity, unit cost and reorder point."""
    item.total_value = stock_value(item.quantity, item.unit_cost)
    item.status = stock_status(item.quantity, item.reorder_point)
