from pydantic import BaseModel, EmailStr
from typing import Optional

# --- User Schemas ---

class UserCreateSchema(BaseModel):
    username: str
    email: EmailStr
    password: str
    full_name: Optional[str] = None

class UserReadSchema(BaseModel):
    id: int
    username: str
    email: EmailStr
    full_name: Optional[str] = None
    is_active: bool
    role: str

    class Config:
        from_attributes = True
