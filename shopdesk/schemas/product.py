from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from shopdesk.schemas.common import ApiModel


class CategoryRead(ApiModel):
    id: int
    business_id: int
    name: str
    description: Optional[str] = None


class CategoryCreate(ApiModel):
    business_id: int
    name: str = Field(min_length=1)
    description: Optional[str] = None


class SupplierRead(ApiModel):
    id: int
    business_id: int
    name: str
    contact_email: Optional[str] = None
    phone: Optional[str] = None


class SupplierCreate(ApiModel):
    business_id: int
    name: str = Field(min_length=1)
    contact_email: Optional[str] = None
    phone: Optional[str] = None


class ProductRead(ApiModel):
    id: int
    business_id: int
    shop_id: int
    category_id: Optional[int] = None
    name: str
    sku: str
    description: Optional[str] = None
    unit_type: Optional[str] = None
    featured_image: Optional[str] = None
    selling_price: Decimal
    purchase_price: Decimal
    reorder_point: int
    created_at: datetime
    category: Optional[CategoryRead] = None
    suppliers: List[SupplierRead] = Field(default_factory=list)


class ProductCreate(ApiModel):
    business_id: int
    shop_id: int
    name: str = Field(min_length=1)
    sku: str = Field(min_length=1)
    category_id: Optional[int] = None
    description: Optional[str] = None
    unit_type: Optional[str] = None
    featured_image: Optional[str] = None
    selling_price: Decimal = Field(Decimal("0"), ge=0)
    purchase_price: Decimal = Field(Decimal("0"), ge=0)
    reorder_point: Optional[int] = Field(None, ge=0)
    suppliers: List[int] = Field(default_factory=list)
    quantity: Optional[int] = Field(None, ge=0)
    performed_by_id: Optional[int] = None


class ProductUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    sku: Optional[str] = Field(None, min_length=1)
    category_id: Optional[int] = None
    description: Optional[str] = None
    unit_type: Optional[str] = None
    featured_image: Optional[str] = None
    selling_price: Optional[Decimal] = Field(None, ge=0)
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    reorder_point: Optional[int] = Field(None, ge=0)
    suppliers: Optional[List[int]] = None


class ProductQuery(ApiModel):
    shop_id: Optional[int] = None
    shop_ids: List[int] = Field(default_factory=list)


class ProductsByCategoryQuery(ApiModel):
    category_id: int
    shop_id: int
