from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class Income(Base):
    __tablename__ = "incomes"

    id = Column(Integer, primary_key=True)
    date = Column(DateTime, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    payment_method = Column(String, nullable=False)

    ohada_code_id = Column(Integer, ForeignKey("ohada_codes.id"), nullable=False)
    shop_id = Column(Integer, ForeignKey("shops.id"))
    user_id = Column(Integer)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    ohada_code = relationship("OhadaCode")

    __table_args__ = (
        Index("idx_incomes_shop_date", "shop_id", "date"),
    )


__all__ = ["Income"]
