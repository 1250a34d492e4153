# coursehub/schemas/user.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field

from coursehub.schemas.base import CamelModel

UserRole = Literal["student", "instructor", "admin"]


class UserResponse(CamelModel):
    id: int
    uid: str
    email: str
    full_name: str
    photo_url: Optional[str] = None
    phone_number: Optional[str] = None
    email_verified: bool
    provider: str
    role: str
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None


class ProfileUpdate(CamelModel):
    """Fields a user may change on their own profile."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=150)
    photo_url: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)


class AdminUserUpdate(CamelModel):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    full_name: Optional[str] = Field(None, min_length=1, max_length=150)


class UserListResponse(CamelModel):
    users: List[UserResponse]
    total: int
    page: int
    size: int
    total_pages: int


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=150)
    phone_number: Optional[str] = Field(None, max_length=20)
