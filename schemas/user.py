from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from models.user import UserRole

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserBase(BaseModel):
    email: EmailStr
    full_name: str = ""

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.ADMIN

class UserResponse(UserBase):
    id: int
    role: UserRole
    created_at: datetime

    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str
    role: UserRole
    dashboard: str

class TokenData(BaseModel):
    email: Optional[str] = None
    role: Optional[UserRole] = None
