"""Persistence helpers.

Thin, constrained queries and transactions per entity. Business rules live in
``app.services``; the only ordering enforced here is children-before-parent
on cascading deletes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import Select, delete, func, insert, or_, select
from sqlalchemy.orm import Session, joinedload

from app.models.enums import UserRole
from app.models.favorites import Favorite
from app.models.photos import Photo
from app.models.reviews import Review
from app.models.routes import Route, Waypoint
from app.models.users import User


def _count(db: Session, stmt: Select) -> int:
    return int(db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0)


def _save(db: Session, obj: Any) -> Any:
    db.add(obj)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(obj)
    return obj


def _update(db: Session, obj: Any, fields: dict[str, Any]) -> Any:
    for key, value in fields.items():
        setattr(obj, key, value)
    return _save(db, obj)


# Users


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(func.lower(User.email) == email.strip().lower()))


def create_user(db: Session, *, name: str, email: str, password_hash: str, role: str = UserRole.user.value) -> User:
    return _save(db, User(name=name, email=email.strip().lower(), password_hash=password_hash, role=role))


def update_user(db: Session, user: User, fields: dict[str, Any]) -> User:
    return _update(db, user, fields)


def list_users_with_counts(db: Session) -> list[tuple[User, int, int, int]]:
    reviews_cnt = select(func.count(Review.id)).where(Review.user_id == User.id).correlate(User).scalar_subquery()
    favorites_cnt = select(func.count(Favorite.id)).where(Favorite.user_id == User.id).correlate(User).scalar_subquery()
    photos_cnt = select(func.count(Photo.id)).where(Photo.user_id == User.id).correlate(User).scalar_subquery()

    stmt = select(User, reviews_cnt, favorites_cnt, photos_cnt).order_by(User.created_at.desc(), User.id.desc())
    return [(u, int(r or 0), int(f or 0), int(p or 0)) for u, r, f, p in db.execute(stmt).all()]


def delete_user_cascade(db: Session, user_id: int) -> None:
    try:
        db.execute(delete(Review).where(Review.user_id == user_id))
        db.execute(delete(Favorite).where(Favorite.user_id == user_id))
        db.execute(delete(Photo).where(Photo.user_id == user_id))
        db.execute(delete(User).where(User.id == user_id))
        db.commit()
    except Exception:
        db.rollback()
        raise


# Routes


def get_route(db: Session, route_id: int) -> Route | None:
    return db.get(Route, route_id)


def get_route_by_slug(db: Session, slug: str) -> Route | None:
    return db.scalar(select(Route).where(Route.slug == slug))


def search_routes(
    db: Session,
    *,
    q: str | None,
    difficulty: str | None,
    offset: int,
    limit: int,
) -> tuple[int, list[Route]]:
    stmt = select(Route)

    if q:
        needle = q.lower()
        stmt = stmt.where(
            or_(
                func.lower(Route.title).contains(needle, autoescape=True),
                func.lower(Route.description).contains(needle, autoescape=True),
            )
        )
    if difficulty:
        stmt = stmt.where(Route.difficulty == difficulty)

    total = _count(db, stmt)
    if offset >= total:
        return total, []
    items = list(
        db.scalars(
            stmt.order_by(Route.created_at.desc(), Route.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    return total, items


def list_routes(db: Session) -> list[Route]:
    return list(db.scalars(select(Route).order_by(Route.created_at.desc(), Route.id.desc())).all())


def create_route(db: Session, **fields: Any) -> Route:
    return _save(db, Route(**fields))


def update_route(db: Session, route: Route, fields: dict[str, Any]) -> Route:
    return _update(db, route, fields)


def insert_waypoints(db: Session, rows: Sequence[dict[str, Any]]) -> None:
    if rows:
        db.execute(insert(Waypoint), list(rows))


def create_route_with_waypoints(db: Session, route: Route, waypoints: Sequence[dict[str, Any]]) -> int:
    """Persist a route and its waypoint batch in a single transaction.

    Each waypoint dict holds ``order``, ``lat``, ``lng`` and ``elevation``.
    On any failure both the route row and the waypoints are rolled back.
    """

    try:
        db.add(route)
        db.flush()
        insert_waypoints(db, [{"route_id": route.id, **wp} for wp in waypoints])
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(route)
    return len(waypoints)


def list_waypoints(db: Session, route_id: int) -> list[Waypoint]:
    stmt = select(Waypoint).where(Waypoint.route_id == route_id).order_by(Waypoint.order.asc())
    return list(db.scalars(stmt).all())


def delete_route_cascade(db: Session, route_id: int) -> None:
    try:
        db.execute(delete(Favorite).where(Favorite.route_id == route_id))
        db.execute(delete(Review).where(Review.route_id == route_id))
        db.execute(delete(Photo).where(Photo.route_id == route_id))
        db.execute(delete(Waypoint).where(Waypoint.route_id == route_id))
        db.execute(delete(Route).where(Route.id == route_id))
        db.commit()
    except Exception:
        db.rollback()
        raise


# Reviews


def get_review(db: Session, review_id: int) -> Review | None:
    return db.get(Review, review_id)


def create_review(db: Session, *, route_id: int, user_id: int, rating: int, comment: str | None) -> Review:
    return _save(db, Review(route_id=route_id, user_id=user_id, rating=rating, comment=comment))


def update_review(db: Session, review: Review, fields: dict[str, Any]) -> Review:
    return _update(db, review, fields)


def delete_review(db: Session, review: Review) -> None:
    db.delete(review)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def route_rating_stats(db: Session, route_id: int) -> tuple[int, float | None]:
    stmt = select(func.count(Review.id), func.avg(Review.rating)).where(Review.route_id == route_id)
    cnt, avg = db.execute(stmt).one()
    return int(cnt or 0), (float(avg) if avg is not None else None)


def list_route_reviews(db: Session, route_id: int, *, offset: int, limit: int) -> tuple[int, list[Review]]:
    stmt = select(Review).where(Review.route_id == route_id)
    total = _count(db, stmt)
    if offset >= total:
        return total, []
    items = list(
        db.scalars(
            stmt.options(joinedload(Review.user))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )
    return total, items


def list_user_reviews(db: Session, user_id: int) -> list[Review]:
    stmt = (
        select(Review)
        .where(Review.user_id == user_id)
        .options(joinedload(Review.route))
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(db.scalars(stmt).all())


def list_user_review_times(db: Session, user_id: int, *, start: datetime, end: datetime) -> list[datetime]:
    stmt = select(Review.created_at).where(
        Review.user_id == user_id,
        Review.created_at >= start,
        Review.created_at < end,
    )
    return list(db.scalars(stmt).all())


def list_all_reviews(db: Session) -> list[Review]:
    stmt = (
        select(Review)
        .options(joinedload(Review.user), joinedload(Review.route))
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(db.scalars(stmt).all())


# Favorites


def delete_favorites(db: Session, *, user_id: int, route_id: int) -> int:
    try:
        res = db.execute(delete(Favorite).where(Favorite.user_id == user_id, Favorite.route_id == route_id))
        db.commit()
    except Exception:
        db.rollback()
        raise
    return int(res.rowcount or 0)


def create_favorite(db: Session, *, user_id: int, route_id: int) -> Favorite:
    return _save(db, Favorite(user_id=user_id, route_id=route_id))


def list_user_favorites(db: Session, user_id: int) -> list[Favorite]:
    stmt = (
        select(Favorite)
        .where(Favorite.user_id == user_id)
        .options(joinedload(Favorite.route))
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
    )
    return list(db.scalars(stmt).all())


# Photos


def get_photo(db: Session, photo_id: int) -> Photo | None:
    return db.get(Photo, photo_id)


def create_photo(db: Session, *, route_id: int, user_id: int, url: str) -> Photo:
    return _save(db, Photo(route_id=route_id, user_id=user_id, url=url))


def delete_photo(db: Session, photo: Photo) -> None:
    db.delete(photo)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def list_route_photos(db: Session, route_id: int) -> list[Photo]:
    stmt = (
        select(Photo)
        .where(Photo.route_id == route_id)
        .options(joinedload(Photo.user))
        .order_by(Photo.created_at.desc(), Photo.id.desc())
    )
    return list(db.scalars(stmt).all())


def list_all_photos(db: Session) -> list[Photo]:
    stmt = (
        select(Photo)
        .options(joinedload(Photo.user), joinedload(Photo.route))
        .order_by(Photo.created_at.desc(), Photo.id.desc())
    )
    return list(db.scalars(stmt).all())
