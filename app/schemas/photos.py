from __future__ import annotations

from datetime import datetime

from app.schemas.common import ApiModel, RouteBrief, UserBrief


class PhotoResponse(ApiModel):
    id: int
    route_id: int
    user_id: int
    url: str
    created_at: datetime


class RoutePhotoItem(ApiModel):
    id: int
    url: str
    created_at: datetime
    user: UserBrief


class RoutePhotoListResponse(ApiModel):
    data: list[RoutePhotoItem]


class AdminPhotoItem(RoutePhotoItem):
    route: RouteBrief


class AdminPhotoListResponse(ApiModel):
    data: list[AdminPhotoItem]
