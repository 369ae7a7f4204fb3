from sqlalchemy import Boolean, Column, DateTime, Integer, String

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    username = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="shop_owner")
    is_staff = Column(Boolean, nullable=False, default=False)

    # Plain column: shops reference businesses, which reference their owning user.
    shop_id = Column(Integer, index=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


__all__ = ["User"]
