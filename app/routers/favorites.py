from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user
from app.db.session import get_db
from app.models.users import User
from app.schemas.favorites import (
    FavoriteDeleteResponse,
    FavoriteItem,
    FavoriteListResponse,
    FavoriteRoute,
    FavoriteToggleResponse,
)
from app.services import favorites as favorites_service

router = APIRouter(prefix="/api", tags=["favorites"])


@router.post("/routes/{route_id}/favorite", response_model=FavoriteToggleResponse)
def toggle_favorite(
    route_id: int,
    response: Response,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FavoriteToggleResponse:
    is_favorite, favorite_id = favorites_service.toggle_favorite(db, user_id=current.id, route_id=route_id)
    if favorite_id is not None:
        response.status_code = status.HTTP_201_CREATED
    return FavoriteToggleResponse(is_favorite=is_favorite, favorite_id=favorite_id)


@router.delete("/routes/{route_id}/favorite", response_model=FavoriteDeleteResponse)
def delete_favorite(
    route_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FavoriteDeleteResponse:
    deleted = favorites_service.remove_favorite(db, user_id=current.id, route_id=route_id)
    return FavoriteDeleteResponse(deleted=deleted)


@router.get("/me/favorites", response_model=FavoriteListResponse)
def list_my_favorites(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FavoriteListResponse:
    favorites = favorites_service.list_my_favorites(db, current.id)
    return FavoriteListResponse(
        data=[
            FavoriteItem(
                id=f.id,
                created_at=f.created_at,
                route=FavoriteRoute(
                    id=f.route.id,
                    title=f.route.title,
                    slug=f.route.slug,
                    description=f.route.description,
                    distance_km=f.route.distance_km,
                    ascent_m=f.route.ascent_m,
                    difficulty=f.route.difficulty,
                    source=f.route.source,
                ),
            )
            for f in favorites
        ]
    )
