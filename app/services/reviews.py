from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.db import crud
from app.models.enums import UserRole
from app.models.reviews import Review
from app.models.users import User
from app.services.pagination import PAGE_SIZE, Pagination, build_pagination, offset_for, parse_page
from app.services.routes import get_route_or_404

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class DayActivity:
    day: date
    count: int


@dataclass(frozen=True)
class MonthActivity:
    year: int
    month: int
    days: list[DayActivity]


def validate_rating(value: Any) -> int:
    """Return the rating as int; only whole numbers 1..5 are accepted."""

    rating: int | None = None
    if isinstance(value, bool):
        rating = None
    elif isinstance(value, int):
        rating = value
    elif isinstance(value, float) and value.is_integer():
        rating = int(value)

    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"rating must be an integer between {MIN_RATING} and {MAX_RATING}", field="rating")
    return rating


def _clean_comment(comment: str | None) -> str | None:
    return (comment or "").strip() or None


def _get_review_or_404(db: Session, review_id: int) -> Review:
    review = crud.get_review(db, review_id)
    if not review:
        raise NotFoundError("Review", review_id)
    return review


def _ensure_owner_or_admin(review: Review, acting_user: User) -> None:
    if review.user_id != acting_user.id and acting_user.role != UserRole.admin.value:
        raise ForbiddenError("Only the author or an admin can change this review")


def create_review(
    db: Session,
    *,
    route_id: int,
    user_id: int,
    rating: Any,
    comment: str | None = None,
) -> Review:
    rating_value = validate_rating(rating)
    get_route_or_404(db, route_id)

    review = crud.create_review(
        db,
        route_id=route_id,
        user_id=user_id,
        rating=rating_value,
        comment=_clean_comment(comment),
    )
    logger.info("Review %s created on route %s by user %s", review.id, route_id, user_id)
    return review


def get_route_reviews(db: Session, route_id: int, page: Any = None) -> tuple[list[Review], Pagination]:
    get_route_or_404(db, route_id)
    page_number = parse_page(page)
    total, items = crud.list_route_reviews(db, route_id, offset=offset_for(page_number), limit=PAGE_SIZE)
    return items, build_pagination(page_number, total)


def update_review(db: Session, review_id: int, acting_user: User, patch: dict[str, Any]) -> Review:
    review = _get_review_or_404(db, review_id)
    _ensure_owner_or_admin(review, acting_user)

    fields: dict[str, Any] = {}
    if "rating" in patch:
        fields["rating"] = validate_rating(patch["rating"])
    if "comment" in patch:
        fields["comment"] = _clean_comment(patch["comment"])

    if not fields:
        return review
    return crud.update_review(db, review, fields)


def delete_review(db: Session, review_id: int, acting_user: User) -> None:
    review = _get_review_or_404(db, review_id)
    _ensure_owner_or_admin(review, acting_user)
    crud.delete_review(db, review)
    logger.info("Review %s deleted by user %s", review_id, acting_user.id)


def list_user_reviews(db: Session, user_id: int) -> list[Review]:
    return crud.list_user_reviews(db, user_id)


def list_all_reviews(db: Session) -> list[Review]:
    return crud.list_all_reviews(db)


def activity_calendar(
    db: Session,
    user_id: int,
    *,
    year: int | None = None,
    month: int | None = None,
) -> MonthActivity:
    """Number of reviews the user posted per day of one calendar month (UTC)."""

    today = datetime.utcnow()
    year = today.year if year is None else year
    month = today.month if month is None else month
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12", field="month")
    if not 1 <= year <= 9998:
        raise ValidationError("year is out of range", field="year")

    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)

    per_day = Counter(ts.date() for ts in crud.list_user_review_times(db, user_id, start=start, end=end))
    return MonthActivity(
        year=year,
        month=month,
        days=[DayActivity(day=d, count=c) for d, c in sorted(per_day.items())],
    )
