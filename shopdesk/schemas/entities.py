from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from shopdesk.schemas.common import ApiModel, coerce_datetime


class UserRead(ApiModel):
    id: int
    username: str
    email: str
    role: str
    shop_id: Optional[int] = None


class UserSummary(ApiModel):
    username: str
    email: str
    role: str


class ShopRead(ApiModel):
    id: int
    business_id: int
    name: str
    type: Optional[str] = None
    status: str
    contact_info: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class ShopSummary(ApiModel):
    id: int
    name: str


class BusinessRead(ApiModel):
    id: int
    owner_id: int
    full_business_name: str
    business_type: Optional[str] = None
    address: Optional[str] = None
    tax_id_number: Optional[str] = None
    shop_logo: Optional[str] = None
    number_of_employees: Optional[int] = None
    shops: List[ShopRead] = Field(default_factory=list)


class EmployeeRead(ApiModel):
    id: int
    user_id: Optional[int] = None
    business_id: int
    shop_id: Optional[int] = None
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    salary: Decimal
    employment_status: str
    hire_date: Optional[date] = None
    status: str
    user: Optional[UserSummary] = None
    shop: Optional[ShopSummary] = None


class EmployeeCreate(ApiModel):
    first_name: str = Field(min_length=1)
    last_name: str = ""
    email: str = Field(min_length=3)
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: str = Field(min_length=1)
    business_id: int
    shop_id: int
    phone: Optional[str] = None
    salary: Decimal = Field(Decimal("0"), ge=0)
    employment_status: str = "full-time"


class EmployeeUpdate(ApiModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    shop_id: Optional[int] = None
    salary: Optional[Decimal] = Field(None, ge=0)
    employment_status: Optional[str] = None
    status: Optional[str] = None


class EmployeeSalesQuery(ApiModel):
    id: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start(cls, value):
        return coerce_datetime(value)

    @field_validator("end_date", mode="before")
    @classmethod
    def parse_end(cls, value):
        return coerce_datetime(value, end_of_day=True)


class SalesRead(ApiModel):
    id: int
    shop_id: int
    employee_id: Optional[int] = None
    total: Decimal
    net_amount: Decimal
    created_at: datetime
