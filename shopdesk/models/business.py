from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    full_business_name = Column(String, nullable=False)
    business_type = Column(String)
    address = Column(String)
    tax_id_number = Column(String)
    shop_logo = Column(String)
    number_of_employees = Column(Integer)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    shops = relationship("Shop", back_populates="business", order_by="Shop.id")


__all__ = ["Business"]
