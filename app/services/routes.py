from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db import crud
from app.models.enums import Difficulty, RouteSource
from app.models.routes import Route, Waypoint
from app.services.pagination import PAGE_SIZE, Pagination, build_pagination, offset_for, parse_page
from app.services.slug import slugify

logger = logging.getLogger(__name__)

ALLOWED_DIFFICULTIES = [d.value for d in Difficulty]

# Optional numeric columns an admin may set or clear by hand.
_NUMERIC_FIELDS = ("distance_km", "ascent_m", "start_lat", "start_lng", "end_lat", "end_lng")


@dataclass
class RouteDetail:
    route: Route
    waypoints: list[Waypoint]
    avg_rating: float | None
    reviews_count: int


def validate_difficulty(value: Any) -> str:
    if isinstance(value, Difficulty):
        return value.value
    if not isinstance(value, str) or value not in ALLOWED_DIFFICULTIES:
        raise ValidationError(
            f"difficulty must be one of: {', '.join(ALLOWED_DIFFICULTIES)}",
            field="difficulty",
        )
    return value


def title_to_slug(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("title is required", field="title")
    slug = slugify(title)
    if not slug:
        raise ValidationError("title must contain at least one letter or digit", field="title")
    return slug


def _clean_text(value: str | None) -> str | None:
    return (value or "").strip() or None


def _clean_numeric(name: str, value: float | None) -> float | int | None:
    if value is None:
        return None
    if name == "ascent_m":
        return int(round(value))
    return float(value)


def list_routes(
    db: Session,
    *,
    q: str | None = None,
    difficulty: str | None = None,
    page: Any = None,
) -> tuple[list[Route], Pagination]:
    difficulty_value = validate_difficulty(difficulty) if difficulty else None
    page_number = parse_page(page)

    total, items = crud.search_routes(
        db,
        q=(q or "").strip() or None,
        difficulty=difficulty_value,
        offset=offset_for(page_number),
        limit=PAGE_SIZE,
    )
    return items, build_pagination(page_number, total)


def get_route_by_slug(db: Session, slug: str) -> RouteDetail:
    route = crud.get_route_by_slug(db, slug)
    if not route:
        raise NotFoundError("Route", slug)

    waypoints = crud.list_waypoints(db, route.id)
    reviews_count, avg_rating = crud.route_rating_stats(db, route.id)

    return RouteDetail(
        route=route,
        waypoints=waypoints,
        avg_rating=avg_rating if reviews_count else None,
        reviews_count=reviews_count,
    )


def get_route_or_404(db: Session, route_id: int) -> Route:
    route = crud.get_route(db, route_id)
    if not route:
        raise NotFoundError("Route", route_id)
    return route


def list_all_routes(db: Session) -> list[Route]:
    return crud.list_routes(db)


def create_route(
    db: Session,
    *,
    title: str,
    difficulty: str | Difficulty,
    description: str | None = None,
    **numeric: float | None,
) -> Route:
    unknown = set(numeric) - set(_NUMERIC_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown route fields: {', '.join(sorted(unknown))}")

    slug = title_to_slug(title)
    difficulty_value = validate_difficulty(difficulty)

    if crud.get_route_by_slug(db, slug):
        raise ConflictError(f"A route with slug '{slug}' already exists")

    try:
        route = crud.create_route(
            db,
            title=title.strip(),
            slug=slug,
            description=_clean_text(description),
            difficulty=difficulty_value,
            source=RouteSource.manual.value,
            **{name: _clean_numeric(name, numeric.get(name)) for name in _NUMERIC_FIELDS},
        )
    except IntegrityError:
        raise ConflictError(f"A route with slug '{slug}' already exists")

    logger.info("Route created manually: id=%s slug=%s", route.id, route.slug)
    return route


def update_route(db: Session, route_id: int, patch: dict[str, Any]) -> Route:
    route = get_route_or_404(db, route_id)

    fields: dict[str, Any] = {}

    if patch.get("title") is not None:
        slug = title_to_slug(patch["title"])
        clash = crud.get_route_by_slug(db, slug)
        if clash and clash.id != route.id:
            raise ConflictError("The new title maps to the slug of another route")
        fields["title"] = patch["title"].strip()
        fields["slug"] = slug

    if "description" in patch:
        fields["description"] = _clean_text(patch["description"])

    if patch.get("difficulty") is not None:
        fields["difficulty"] = validate_difficulty(patch["difficulty"])

    for name in _NUMERIC_FIELDS:
        if name in patch:
            fields[name] = _clean_numeric(name, patch[name])

    if not fields:
        raise ValidationError("Nothing to update")

    try:
        route = crud.update_route(db, route, fields)
    except IntegrityError:
        raise ConflictError("The new title maps to the slug of another route")

    logger.info("Route %s updated: %s", route.id, sorted(fields))
    return route


def delete_route(db: Session, route_id: int) -> None:
    slug = get_route_or_404(db, route_id).slug
    crud.delete_route_cascade(db, route_id)
    logger.info("Route %s (%s) deleted with its reviews, favorites, photos and waypoints", route_id, slug)
