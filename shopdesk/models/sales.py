from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class Sales(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False)
    employee_id = Column(Integer, index=True)

    total = Column(Numeric(15, 2), nullable=False, default=0)
    net_amount = Column(Numeric(15, 2), nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_sales_shop_created", "shop_id", "created_at"),
    )


__all__ = ["Sales"]
