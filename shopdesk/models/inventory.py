from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)

    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"))

    quantity = Column(Integer, nullable=False, default=0)
    unit_cost = Column(Numeric(15, 2), nullable=False, default=0)
    selling_price = Column(Numeric(15, 2), nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=10)

    # Derived from quantity, unit_cost and reorder_point; see core.stock_rules.
    total_value = Column(Numeric(15, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="out_of_stock")

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_inventory_shop_product", "shop_id", "product_id"),
    )


__all__ = ["InventoryItem"]
