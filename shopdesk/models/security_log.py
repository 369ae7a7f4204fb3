from sqlalchemy import Column, DateTime, Index, Integer, String

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class SecurityLog(Base):
    __tablename__ = "security_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer)
    shop_id = Column(Integer)

    event_type = Column(String(30), nullable=False)
    status = Column(String(10), nullable=False)
    description = Column(String)
    severity = Column(String(10), nullable=False, default="low")

    ip_address = Column(String)
    user_agent = Column(String)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_security_logs_user_created", "user_id", "created_at"),
    )


__all__ = ["SecurityLog"]
