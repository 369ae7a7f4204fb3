from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from shopdesk.core.dates import utcnow
from shopdesk.database.base import Base


class OhadaCode(Base):
    __tablename__ = "ohada_codes"

    id = Column(Integer, primary_key=True)
    code = Column(String(10), nullable=False)
    name = Column(String, nullable=False)
    description = Column(String)
    type = Column(String(10), nullable=False)
    classification = Column(String(10), nullable=False, default="Standard")

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("code", "name", "type", name="uq_ohada_code_name_type"),
    )


__all__ = ["OhadaCode"]
