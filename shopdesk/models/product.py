from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base
from shopdesk.models.supplier import supplier_products


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"))

    name = Column(String, nullable=False)
    sku = Column(String, nullable=False)
    description = Column(String)
    unit_type = Column(String)
    featured_image = Column(String)

    selling_price = Column(Numeric(15, 2), nullable=False, default=0)
    purchase_price = Column(Numeric(15, 2), nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=10)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    category = relationship("Category")
    shop = relationship("Shop")
    suppliers = relationship("Supplier", secondary=supplier_products, order_by="Supplier.name")

    __table_args__ = (
        UniqueConstraint("shop_id", "sku", name="uq_products_shop_sku"),
        Index("idx_products_shop_category", "shop_id", "category_id"),
    )


__all__ = ["Product"]
