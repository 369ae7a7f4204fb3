from typing import List, Optional

from pydantic import Field

from shopdesk.schemas.common import ApiModel


class LoginRequest(ApiModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterRequest(ApiModel):
    email: str = Field(min_length=3)
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: str = "shop_owner"
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    shop_id: Optional[int] = None
    business_id: Optional[int] = None


class ShopSetup(ApiModel):
    name: str = Field(min_length=1)
    type: Optional[str] = None
    contact_info: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class BusinessSetup(ApiModel):
    full_business_name: str = Field(min_length=1)
    business_type: Optional[str] = None
    address: Optional[str] = None
    tax_id_number: Optional[str] = None
    shop_logo: Optional[str] = None
    number_of_employees: Optional[int] = Field(None, ge=0)


class SetupAccountRequest(ApiModel):
    user_id: int
    business: BusinessSetup
    shops: List[ShopSetup] = Field(min_length=1)


class UserIdPayload(ApiModel):
    user_id: int
