from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, UniqueConstraint

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base

supplier_products = Table(
    "supplier_products",
    Base.metadata,
    Column("supplier_id", Integer, ForeignKey("suppliers.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
)


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    contact_email = Column(String)
    phone = Column(String)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("business_id", "name", name="uq_suppliers_business_name"),
    )


__all__ = ["Supplier", "supplier_products"]
