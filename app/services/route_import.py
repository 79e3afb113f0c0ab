from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import anyio
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AppError, InternalError, ValidationError
from app.db import crud
from app.models.enums import Difficulty, RouteSource
from app.models.routes import Route
from app.parsers.ors_directions import is_number, parse_directions
from app.services.routes import title_to_slug, validate_difficulty

logger = logging.getLogger(__name__)

_COORDINATE_LIMITS = {
    "start_lat": 90.0,
    "start_lng": 180.0,
    "end_lat": 90.0,
    "end_lng": 180.0,
}


class DirectionsClient(Protocol):
    async def fetch_directions(
        self, *, start_lat: float, start_lng: float, end_lat: float, end_lng: float
    ) -> dict[str, Any]: ...


@dataclass
class RouteImportSpec:
    title: str
    difficulty: str | Difficulty
    start_lat: Any
    start_lng: Any
    end_lat: Any
    end_lng: Any
    description: str | None = None


@dataclass
class ImportResult:
    created: bool
    route: Route
    waypoints_created: int


def _validate_coordinates(spec: RouteImportSpec) -> dict[str, float]:
    coords: dict[str, float] = {}
    for name, limit in _COORDINATE_LIMITS.items():
        value = getattr(spec, name)
        if not is_number(value):
            raise ValidationError(f"{name} must be a number", field=name)
        if abs(value) > limit:
            raise ValidationError(f"{name} must be between -{limit:g} and {limit:g}", field=name)
        coords[name] = float(value)
    return coords


async def import_route_from_ors(db: Session, spec: RouteImportSpec, client: DirectionsClient) -> ImportResult:
    """Create a route and its waypoints from an ORS directions request.

    Input is validated before anything else. A route whose slug already
    exists is returned as-is without calling the provider. Provider failures
    propagate as ``UpstreamError`` / ``InvalidUpstreamResponse`` and nothing
    is written. The route row and every waypoint are stored in one
    transaction; start/end coordinates are the provider's snapped path
    endpoints, not the requested ones. Session work runs in worker threads.
    """

    slug = title_to_slug(spec.title)
    difficulty = validate_difficulty(spec.difficulty)
    coords = _validate_coordinates(spec)

    existing = await anyio.to_thread.run_sync(crud.get_route_by_slug, db, slug)
    if existing:
        logger.info("Import skipped: route '%s' already exists (id=%s)", slug, existing.id)
        return ImportResult(created=False, route=existing, waypoints_created=0)

    try:
        payload = await client.fetch_directions(**coords)
        parsed = parse_directions(payload)
    except AppError as e:
        logger.warning("ORS import of '%s' failed: %s", slug, e.message)
        raise

    route = Route(
        title=spec.title.strip(),
        slug=slug,
        description=(spec.description or "").strip() or None,
        difficulty=difficulty,
        source=RouteSource.ors.value,
        distance_km=parsed.distance_km,
        ascent_m=parsed.ascent_m,
        start_lat=parsed.start.lat,
        start_lng=parsed.start.lng,
        end_lat=parsed.end.lat,
        end_lng=parsed.end.lng,
    )

    try:
        waypoints_created = await anyio.to_thread.run_sync(
            crud.create_route_with_waypoints, db, route, [wp.as_row() for wp in parsed.waypoints]
        )
    except IntegrityError:
        # A concurrent import may have taken the slug between the check and the insert.
        winner = await anyio.to_thread.run_sync(crud.get_route_by_slug, db, slug)
        if winner is None:
            raise
        logger.info("Import of '%s' lost a concurrent race; returning route id=%s", slug, winner.id)
        return ImportResult(created=False, route=winner, waypoints_created=0)
    except SQLAlchemyError:
        logger.exception("Storing imported route '%s' failed; nothing was written", slug)
        raise InternalError("Could not store the imported route")

    logger.info("Route '%s' imported from ORS (id=%s, %s waypoints)", slug, route.id, waypoints_created)
    return ImportResult(created=True, route=route, waypoints_created=waypoints_created)
