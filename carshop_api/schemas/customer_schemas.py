from pydantic import BaseModel
from typing import Optional
from datetime import date

class CustomerRead(BaseModel):
    """Schema for a customer attached to a car."""
    id: int
    name: str
    ident_document: str
    birth_date: Optional[date] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True
