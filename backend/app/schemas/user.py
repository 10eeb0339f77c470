from typing import Optional
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, UUID4

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


class UserBase(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    username: Optional[str] = Field(
        None, min_length=3, max_length=30, pattern=USERNAME_PATTERN
    )
    email: Optional[EmailStr] = None
    avatar: Optional[str] = Field(None, max_length=2048)

    class Config:
        str_strip_whitespace = True


class UserCreate(UserBase):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class UserUpdate(UserBase):
    pass


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=128)


class UserSummary(BaseModel):
    id: UUID4
    first_name: str
    last_name: str
    username: str
    avatar: Optional[str] = None

    class Config:
        from_attributes = True


class User(UserSummary):
    email: EmailStr
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserResponse(BaseModel):
    user: User
