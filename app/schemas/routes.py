from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.models.enums import Difficulty
from app.schemas.common import ApiModel, PaginationResponse


class RouteSummaryResponse(ApiModel):
    id: int
    title: str
    slug: str
    description: str | None
    distance_km: float | None
    ascent_m: int | None
    difficulty: str
    source: str
    created_at: datetime


class RouteListResponse(ApiModel):
    data: list[RouteSummaryResponse]
    pagination: PaginationResponse


class RouteResponse(RouteSummaryResponse):
    updated_at: datetime
    start_lat: float | None
    start_lng: float | None
    end_lat: float | None
    end_lng: float | None


class WaypointResponse(ApiModel):
    id: int
    order: int
    lat: float
    lng: float
    elevation: int | None


class RouteDetailResponse(RouteResponse):
    waypoints: list[WaypointResponse]
    avg_rating: float | None
    reviews_count: int


class RouteImportRequest(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    difficulty: Difficulty
    start_lat: float = Field(ge=-90, le=90)
    start_lng: float = Field(ge=-180, le=180)
    end_lat: float = Field(ge=-90, le=90)
    end_lng: float = Field(ge=-180, le=180)


class RouteImportResponse(ApiModel):
    created: bool
    route: RouteResponse
    waypoints_created: int


class RouteCreateRequest(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    difficulty: Difficulty
    distance_km: float | None = Field(default=None, ge=0)
    ascent_m: float | None = Field(default=None, ge=0)
    start_lat: float | None = Field(default=None, ge=-90, le=90)
    start_lng: float | None = Field(default=None, ge=-180, le=180)
    end_lat: float | None = Field(default=None, ge=-90, le=90)
    end_lng: float | None = Field(default=None, ge=-180, le=180)


class RouteUpdateRequest(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    difficulty: Difficulty | None = None
    distance_km: float | None = Field(default=None, ge=0)
    ascent_m: float | None = Field(default=None, ge=0)
    start_lat: float | None = Field(default=None, ge=-90, le=90)
    start_lng: float | None = Field(default=None, ge=-180, le=180)
    end_lat: float | None = Field(default=None, ge=-90, le=90)
    end_lng: float | None = Field(default=None, ge=-180, le=180)


class AdminRouteListResponse(ApiModel):
    data: list[RouteResponse]
