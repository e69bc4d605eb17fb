from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class UserStatus(str, Enum):
    active = "active"
    blocked = "blocked"


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    fullName: Optional[str] = None
    avatarUrl: Optional[str] = None
    role: UserRole
    status: UserStatus
    createdAt: datetime
    
    class Config:
        from_attributes = True
