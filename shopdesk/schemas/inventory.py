from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from shopdesk.core.constants import DIRECTIONS, MOVEMENT_TYPES
from shopdesk.schemas.common import ApiModel, Pagination, coerce_datetime


class InventoryItemRead(ApiModel):
    id: int
    shop_id: int
    product_id: int
    supplier_id: Optional[int] = None
    quantity: int
    unit_cost: Decimal
    selling_price: Decimal
    reorder_point: int
    total_value: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    product_name: Optional[str] = None
    sku: Optional[str] = None


class InventoryCreate(ApiModel):
    shop_id: int
    product_id: int
    supplier_id: Optional[int] = None
    quantity: int = Field(0, ge=0)
    unit_cost: Decimal = Field(ge=0)
    selling_price: Decimal = Field(Decimal("0"), ge=0)
    reorder_point: Optional[int] = Field(None, ge=0)
    performed_by_id: Optional[int] = None


class InventoryUpdate(ApiModel):
    supplier_id: Optional[int] = None
    unit_cost: Optional[Decimal] = Field(None, ge=0)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    reorder_point: Optional[int] = Field(None, ge=0)


class InventoryByShopQuery(ApiModel):
    shop_id: Optional[int] = None
    is_admin: bool = False
    pagination: Pagination = Field(default_factory=Pagination)


class StockMovementRead(ApiModel):
    id: int
    product_id: int
    inventory_id: int
    shop_id: Optional[int] = None
    quantity: int
    direction: str
    movement_type: str
    reason: Optional[str] = None
    performed_by_id: Optional[int] = None
    cost_per_unit: Decimal
    total_cost: Decimal
    system_count: Optional[int] = None
    physical_count: Optional[int] = None
    date: datetime
    created_at: datetime


class StockMovementQuery(ApiModel):
    inventory_id: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    product_id: Optional[int] = None
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start(cls, value):
        return coerce_datetime(value)

    @field_validator("end_date", mode="before")
    @classmethod
    def parse_end(cls, value):
        return coerce_datetime(value, end_of_day=True)


class StockMovementCreate(ApiModel):
    """A quantity change; ``quantity`` is signed unless ``direction`` is given."""

    inventory_id: int
    quantity: int
    direction: Optional[str] = None
    movement_type: Optional[str] = None
    reason: Optional[str] = None
    performed_by_id: Optional[int] = None
    cost_per_unit: Optional[Decimal] = Field(None, ge=0)

    @field_validator("direction")
    @classmethod
    def check_direction(cls, value):
        if value is None:
            return value
        value = value.strip().lower()
        if value not in DIRECTIONS:
            raise ValueError("must be one of {}".format(", ".join(DIRECTIONS)))
        return value

    @field_validator("movement_type")
    @classmethod
    def check_movement_type(cls, value):
        if value is None:
            return value
        for known in MOVEMENT_TYPES:
            if value.strip().lower() == known.lower():
                return known
        raise ValueError("must be one of {}".format(", ".join(MOVEMENT_TYPES)))

    @model_validator(mode="after")
    def apply_direction(self):
        if self.direction is not None:
            magnitude = abs(self.quantity)
            self.quantity = magnitude if self.direction == "inbound" else -magnitude
        return self


class PhysicalCountCreate(ApiModel):
    inventory_id: int
    physical_count: int
    product_id: Optional[int] = None
    system_count: Optional[int] = None
    reason: Optional[str] = None
    performed_by_id: Optional[int] = None


class StockMovementPage(ApiModel):
    movements: List[StockMovementRead]
    total: int
    pages: int
