from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from shopdesk.core.dates import normalize_datetime


class ApiModel(BaseModel):
    """Accepts camelCase or snake_case keys; dumps camelCase with ``by_alias``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Pagination(ApiModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)


def coerce_datetime(value, *, end_of_day=False):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = normalize_datetime(value, end_of_day=end_of_day)
    if parsed is None:
        raise ValueError("must be an ISO date or datetime")
    return parsed


class DateRange(ApiModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @field_validator("start", mode="before")
    @classmethod
    def parse_start(cls, value):
        return coerce_datetime(value)

    @field_validator("end", mode="before")
    @classmethod
    def parse_end(cls, value):
        return coerce_datetime(value, end_of_day=True)


class IdPayload(ApiModel):
    id: int


class BusinessScopedQuery(ApiModel):
    business_id: int


def validation_message(exc: ValidationError) -> str:
    missing = []
    invalid = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        if error.get("type") == "missing":
            missing.append(location)
        else:
            invalid.append("{}: {}".format(location or "payload", error.get("msg")))
    parts = []
    if missing:
        parts.append("Missing required fields: {}".format(", ".join(missing)))
    if invalid:
        parts.append("Invalid fields: {}".format("; ".join(invalid)))
    return ". ".join(parts) or "Invalid payload"


def page_count(total: int, limit: int) -> int:
    if total <= 0:
        return 1
    return (total + limit - 1) // limit


__all__ = [
    "ApiModel",
    "BusinessScopedQuery",
    "DateRange",
    "IdPayload",
    "Pagination",
    "coerce_datetime",
    "page_count",
    "validation_message",
]
