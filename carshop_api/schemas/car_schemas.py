from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from carshop_api.schemas.customer_schemas import CustomerRead
from carshop_api.schemas.user_schemas import UserReadSchema

FIRST_MANUFACTURE_YEAR = 1960
# Day the shop opened; no car can have been sold before it.
SHOP_OPENING_DATE = date(2020, 3, 20)

# --- Car Schemas ---

class CarInput(BaseModel):
    """Car fields accepted from the client. Provenance fields are not part of it."""
    brand: str = Field(..., min_length=1, max_length=25)
    model: str = Field(..., min_length=1, max_length=25)
    color: str = Field(..., min_length=4, max_length=20)
    year_manufacture: int = Field(..., ge=FIRST_MANUFACTURE_YEAR)
    imported: bool
    plates: str = Field(..., min_length=8, max_length=8)
    selling_date: Optional[date] = None
    selling_price: Optional[Decimal] = Field(None, ge=1000, le=5000000)
    customer_id: Optional[int] = None

    class Config:
        extra = "forbid"

    @field_validator("year_manufacture")
    @classmethod
    def year_not_in_future(cls, value: int) -> int:
        current_year = date.today().year
        if value > current_year:
            raise ValueError(f"Year of manufacture cannot be after {current_year}")
        return value

    @field_validator("selling_date")
    @classmethod
    def selling_date_in_range(cls, value: Optional[date]) -> Optional[date]:
        if value is None:
            return value
        if value < SHOP_OPENING_DATE:
            raise ValueError(f"Selling date cannot be before {SHOP_OPENING_DATE.isoformat()}")
        if value > date.today():
            raise ValueError("Selling date cannot be in the future")
        return value

class CarCreateRecord(CarInput):
    """What gets stored on creation: validated input plus the caller as creator and updater."""
    created_user_id: int
    updated_user_id: int

class CarUpdateRecord(CarInput):
    """What gets stored on update. The creator is never touched."""
    updated_user_id: int

class CarRead(BaseModel):
    id: int
    brand: str
    model: str
    color: str
    year_manufacture: int
    imported: bool
    plates: str
    selling_date: Optional[date] = None
    selling_price: Optional[Decimal] = None
    customer_id: Optional[int] = None
    created_user_id: Optional[int] = None
    updated_user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CarDetail(CarRead):
    """
    A car with the relations the caller asked for.
    Relations that were not requested are left unset and dropped from the response.
    """
    customer: Optional[CustomerRead] = None
    created_user: Optional[UserReadSchema] = None
    updated_user: Optional[UserReadSchema] = None
