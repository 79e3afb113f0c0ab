from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user
from app.db.session import get_db
from app.models.reviews import Review
from app.models.users import User
from app.schemas.common import MessageResponse, PaginationResponse, UserBrief
from app.schemas.reviews import (
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    RouteReviewItem,
    RouteReviewListResponse,
)
from app.services import reviews as reviews_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reviews"])


def _to_review_response(r: Review) -> ReviewResponse:
    return ReviewResponse(
        id=r.id,
        route_id=r.route_id,
        user_id=r.user_id,
        rating=r.rating,
        comment=r.comment,
        created_at=r.created_at,
    )


@router.post("/routes/{route_id}/reviews", response_model=ReviewResponse, status_code=201)
def create_review(
    route_id: int,
    payload: ReviewCreate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewResponse:
    review = reviews_service.create_review(
        db,
        route_id=route_id,
        user_id=current.id,
        rating=payload.rating,
        comment=payload.comment,
    )
    return _to_review_response(review)


@router.get("/routes/{route_id}/reviews", response_model=RouteReviewListResponse)
def list_route_reviews(
    route_id: int,
    db: Session = Depends(get_db),
    page: str | None = Query(default=None),
) -> RouteReviewListResponse:
    reviews, pagination = reviews_service.get_route_reviews(db, route_id, page)
    return RouteReviewListResponse(
        data=[
            RouteReviewItem(
                id=r.id,
                rating=r.rating,
                comment=r.comment,
                created_at=r.created_at,
                user=UserBrief(id=r.user.id, name=r.user.name),
            )
            for r in reviews
        ],
        pagination=PaginationResponse.from_pagination(pagination),
    )


@router.patch("/reviews/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewResponse:
    review = reviews_service.update_review(db, review_id, current, payload.model_dump(exclude_unset=True))
    return _to_review_response(review)


@router.delete("/reviews/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    reviews_service.delete_review(db, review_id, current)
    return MessageResponse(message="Review deleted")
