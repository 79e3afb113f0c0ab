from __future__ import annotations

from datetime import datetime

from app.schemas.common import ApiModel


class FavoriteToggleResponse(ApiModel):
    is_favorite: bool
    favorite_id: int | None = None


class FavoriteDeleteResponse(ApiModel):
    deleted: int


class FavoriteRoute(ApiModel):
    id: int
    title: str
    slug: str
    description: str | None
    distance_km: float | None
    ascent_m: int | None
    difficulty: str
    source: str


class FavoriteItem(ApiModel):
    id: int
    created_at: datetime
    route: FavoriteRoute


class FavoriteListResponse(ApiModel):
    data: list[FavoriteItem]
