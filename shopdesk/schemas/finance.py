from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from shopdesk.core.constants import OHADA_CUSTOM, OHADA_STANDARD, OHADA_TYPES
from shopdesk.schemas.common import ApiModel, coerce_datetime


def _check_type(value):
    value = value.strip().lower()
    if value not in OHADA_TYPES:
        raise ValueError("must be one of {}".format(", ".join(OHADA_TYPES)))
    return value


class OhadaCodeRead(ApiModel):
    id: int
    code: str
    name: str
    description: Optional[str] = None
    type: str
    classification: str


class OhadaCodeQuery(ApiModel):
    type: str

    @field_validator("type")
    @classmethod
    def normalize_type(cls, value):
        return _check_type(value)


class OhadaCodeCreate(ApiModel):
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    type: str = "income"
    classification: str = OHADA_CUSTOM

    @field_validator("type")
    @classmethod
    def normalize_type(cls, value):
        return _check_type(value)

    @field_validator("classification")
    @classmethod
    def check_classification(cls, value):
        for known in (OHADA_STANDARD, OHADA_CUSTOM):
            if value.strip().lower() == known.lower():
                return known
        raise ValueError("must be Standard or Custom")


class IncomeRead(ApiModel):
    id: int
    date: datetime
    description: str
    amount: Decimal
    payment_method: str
    ohada_code_id: int
    shop_id: Optional[int] = None
    user_id: Optional[int] = None
    ohada_code: Optional[OhadaCodeRead] = None
    created_at: datetime
    updated_at: datetime


class IncomeCreate(ApiModel):
    date: datetime
    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    payment_method: str = Field(min_length=1)
    ohada_code_id: int
    shop_id: Optional[int] = None
    user_id: Optional[int] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        return coerce_datetime(value)


class IncomeUpdate(ApiModel):
    date: Optional[datetime] = None
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, gt=0)
    payment_method: Optional[str] = Field(None, min_length=1)
    ohada_code_id: Optional[int] = None
    shop_id: Optional[int] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        return coerce_datetime(value)


class IncomeQuery(ApiModel):
    shop_id: Optional[int] = None
    business_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    ohada_code_id: Optional[int] = None

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start(cls, value):
        return coerce_datetime(value)

    @field_validator("end_date", mode="before")
    @classmethod
    def parse_end(cls, value):
        return coerce_datetime(value, end_of_day=True)
