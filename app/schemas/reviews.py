from __future__ import annotations

from datetime import date, datetime
from typing import Union

from pydantic import Field, StrictFloat, StrictInt

from app.schemas.common import ApiModel, PaginationResponse, RouteBrief, UserBrief


# No coercion here; the review service decides what a valid rating is.
Rating = Union[StrictInt, StrictFloat]


class ReviewCreate(ApiModel):
    rating: Rating
    comment: str | None = Field(default=None, max_length=2000)


class ReviewUpdate(ApiModel):
    rating: Rating | None = None
    comment: str | None = Field(default=None, max_length=2000)


class ReviewResponse(ApiModel):
    id: int
    route_id: int
    user_id: int
    rating: int
    comment: str | None
    created_at: datetime


class RouteReviewItem(ApiModel):
    id: int
    rating: int
    comment: str | None
    created_at: datetime
    user: UserBrief


class RouteReviewListResponse(ApiModel):
    data: list[RouteReviewItem]
    pagination: PaginationResponse


class MyReviewItem(ApiModel):
    id: int
    rating: int
    comment: str | None
    created_at: datetime
    route: RouteBrief


class MyReviewListResponse(ApiModel):
    data: list[MyReviewItem]


class ActivityDay(ApiModel):
    day: date
    count: int


class ActivityResponse(ApiModel):
    year: int
    month: int
    days: list[ActivityDay]


class ReviewAuthor(UserBrief):
    email: str


class AdminReviewItem(ApiModel):
    id: int
    rating: int
    comment: str | None
    created_at: datetime
    user: ReviewAuthor
    route: RouteBrief


class AdminReviewListResponse(ApiModel):
    data: list[AdminReviewItem]
