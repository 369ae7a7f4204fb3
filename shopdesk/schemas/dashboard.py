from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from shopdesk.schemas.common import ApiModel, DateRange


class DashboardQuery(ApiModel):
    business_id: Optional[int] = None
    shop_id: Optional[int] = None
    date_range: Optional[DateRange] = None
    view: Optional[str] = None
    limit: Optional[int] = Field(None, ge=1, le=100)

    @property
    def start(self) -> Optional[datetime]:
        return self.date_range.start if self.date_range else None

    @property
    def end(self) -> Optional[datetime]:
        return self.date_range.end if self.date_range else None


class InventoryStats(ApiModel):
    total_quantity: int
    total_value: Decimal
    total_items: int
    low_stock: int


class NetChangePoint(ApiModel):
    period: str
    net_change: int


class AmountPoint(ApiModel):
    period: str
    amount: Decimal


class TopSupplier(ApiModel):
    id: int
    name: str
    items: int
    value: Decimal


class TopProduct(ApiModel):
    id: int
    name: str
    sku: str
    featured_image: Optional[str] = None
    in_stock: int
    value: Decimal


class TopCategory(ApiModel):
    id: int
    name: str
    period: str
    product_count: int
    total_items: int
    total_value: Decimal
