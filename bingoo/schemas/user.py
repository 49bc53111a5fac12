from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr

from bingoo.models.user import UserRole


class User(BaseModel):
    id: int
    email: EmailStr
    name: Optional[str] = None
    country: Optional[str] = None
    region_id: Optional[str] = None
    points: int = 0
    balance: Decimal = Decimal("0")
    role: UserRole = UserRole.USER
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(self.role)


class UserListResponse(BaseModel):
    users: List[User]
    total_count: int
    has_next: bool
