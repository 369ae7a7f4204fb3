from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), index=True)

    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    email = Column(String)
    phone = Column(String)
    role = Column(String, nullable=False)
    salary = Column(Numeric(15, 2), nullable=False, default=0)
    employment_status = Column(String, nullable=False, default="full-time")
    hire_date = Column(Date)
    status = Column(String, nullable=False, default="active")

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User")
    shop = relationship("Shop")


__all__ = ["Employee"]
