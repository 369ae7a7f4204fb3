from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    type = Column(String)
    status = Column(String, nullable=False, default="active")
    contact_info = Column(String)
    address = Column(String)
    city = Column(String)
    country = Column(String)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    business = relationship("Business", back_populates="shops")


__all__ = ["Shop"]
