from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user
from app.db.session import get_db
from app.models.users import User
from app.schemas.auth import UserMeResponse
from app.schemas.common import RouteBrief
from app.schemas.reviews import ActivityDay, ActivityResponse, MyReviewItem, MyReviewListResponse
from app.services import reviews as reviews_service

router = APIRouter(prefix="/api/me", tags=["me"])


@router.get("", response_model=UserMeResponse)
def me(current: User = Depends(get_current_user)) -> UserMeResponse:
    return UserMeResponse(id=current.id, name=current.name, email=current.email, role=current.role)


@router.get("/reviews", response_model=MyReviewListResponse)
def my_reviews(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MyReviewListResponse:
    reviews = reviews_service.list_user_reviews(db, current.id)
    return MyReviewListResponse(
        data=[
            MyReviewItem(
                id=r.id,
                rating=r.rating,
                comment=r.comment,
                created_at=r.created_at,
                route=RouteBrief(id=r.route.id, title=r.route.title, slug=r.route.slug),
            )
            for r in reviews
        ]
    )


@router.get("/activity", response_model=ActivityResponse)
def my_activity(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    year: int | None = Query(default=None, ge=1, le=9998),
    month: int | None = Query(default=None, ge=1, le=12),
) -> ActivityResponse:
    activity = reviews_service.activity_calendar(db, current.id, year=year, month=month)
    return ActivityResponse(
        year=activity.year,
        month=activity.month,
        days=[ActivityDay(day=d.day, count=d.count) for d in activity.days],
    )
