from sqlalchemy import Column, DateTime, Index, Integer, Numeric, String

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class StockMovement(Base):
    """Append-only ledger row; never updated or deleted once written."""

    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True)

    # Plain references so removing an item or product leaves the ledger intact.
    product_id = Column(Integer, nullable=False)
    inventory_id = Column(Integer, nullable=False)
    shop_id = Column(Integer)

    quantity = Column(Integer, nullable=False)
    direction = Column(String(10), nullable=False)
    movement_type = Column(String(20), nullable=False)
    reason = Column(String)
    performed_by_id = Column(Integer)

    cost_per_unit = Column(Numeric(15, 2), nullable=False, default=0)
    total_cost = Column(Numeric(15, 2), nullable=False, default=0)

    system_count = Column(Integer)
    physical_count = Column(Integer)

    date = Column(DateTime, nullable=False, default=utcnow)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_movements_inventory_date", "inventory_id", "date"),
        Index("idx_movements_shop_created", "shop_id", "created_at"),
    )


__all__ = ["StockMovement"]
