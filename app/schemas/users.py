from __future__ import annotations

from datetime import datetime

from app.models.enums import UserRole
from app.schemas.common import ApiModel


class UserCounts(ApiModel):
    reviews: int
    favorites: int
    photos: int


class AdminUserItem(ApiModel):
    id: int
    name: str
    email: str
    role: str
    created_at: datetime
    counts: UserCounts


class AdminUserListResponse(ApiModel):
    data: list[AdminUserItem]


class RoleUpdateRequest(ApiModel):
    role: UserRole


class AdminUserResponse(ApiModel):
    id: int
    name: str
    email: str
    role: str
