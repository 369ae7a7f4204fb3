from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("business_id", "name", name="uq_categories_business_name"),
    )


__all__ = ["Category"]
