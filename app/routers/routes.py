from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.deps import require_role
from app.db.session import get_db
from app.models.enums import UserRole
from app.models.routes import Route
from app.parsers.ors_directions import OrsDirectionsClient, get_ors_client
from app.schemas.common import PaginationResponse
from app.schemas.routes import (
    RouteDetailResponse,
    RouteImportRequest,
    RouteImportResponse,
    RouteListResponse,
    RouteResponse,
    RouteSummaryResponse,
    WaypointResponse,
)
from app.services import route_import, routes as routes_service
from app.services.routes import RouteDetail

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routes", tags=["routes"])


def _to_route_summary(route: Route) -> RouteSummaryResponse:
    return RouteSummaryResponse(
        id=route.id,
        title=route.title,
        slug=route.slug,
        description=route.description,
        distance_km=route.distance_km,
        ascent_m=route.ascent_m,
        difficulty=route.difficulty,
        source=route.source,
        created_at=route.created_at,
    )


def _route_fields(route: Route) -> dict:
    return dict(
        _to_route_summary(route).model_dump(),
        updated_at=route.updated_at,
        start_lat=route.start_lat,
        start_lng=route.start_lng,
        end_lat=route.end_lat,
        end_lng=route.end_lng,
    )


def _to_route_response(route: Route) -> RouteResponse:
    return RouteResponse(**_route_fields(route))


def _to_route_detail(detail: RouteDetail) -> RouteDetailResponse:
    return RouteDetailResponse(
        **_route_fields(detail.route),
        waypoints=[
            WaypointResponse(id=w.id, order=w.order, lat=w.lat, lng=w.lng, elevation=w.elevation)
            for w in detail.waypoints
        ],
        avg_rating=detail.avg_rating,
        reviews_count=detail.reviews_count,
    )


@router.get("", response_model=RouteListResponse)
def list_routes(
    db: Session = Depends(get_db),
    q: str | None = Query(default=None, max_length=200),
    difficulty: str | None = Query(default=None),
    # Kept as a string: junk or non-positive values fall back to page 1.
    page: str | None = Query(default=None),
) -> RouteListResponse:
    items, pagination = routes_service.list_routes(db, q=q, difficulty=difficulty, page=page)
    return RouteListResponse(
        data=[_to_route_summary(r) for r in items],
        pagination=PaginationResponse.from_pagination(pagination),
    )


@router.post(
    "/import/ors",
    response_model=RouteImportResponse,
    dependencies=[Depends(require_role(UserRole.admin))],
)
async def import_from_ors(
    payload: RouteImportRequest,
    response: Response,
    db: Session = Depends(get_db),
    client: OrsDirectionsClient = Depends(get_ors_client),
) -> RouteImportResponse:
    spec = route_import.RouteImportSpec(
        title=payload.title,
        description=payload.description,
        difficulty=payload.difficulty,
        start_lat=payload.start_lat,
        start_lng=payload.start_lng,
        end_lat=payload.end_lat,
        end_lng=payload.end_lng,
    )
    result = await route_import.import_route_from_ors(db, spec, client)
    response.status_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return RouteImportResponse(
        created=result.created,
        route=_to_route_response(result.route),
        waypoints_created=result.waypoints_created,
    )


@router.get("/{slug}", response_model=RouteDetailResponse)
def get_route(slug: str, db: Session = Depends(get_db)) -> RouteDetailResponse:
    return _to_route_detail(routes_service.get_route_by_slug(db, slug))
