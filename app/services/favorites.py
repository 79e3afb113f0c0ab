from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import crud
from app.models.favorites import Favorite
from app.services.routes import get_route_or_404

logger = logging.getLogger(__name__)


def toggle_favorite(db: Session, *, user_id: int, route_id: int) -> tuple[bool, int | None]:
    """Flip the favorite state of (user, route).

    Returns ``(is_favorite, favorite_id)``. The delete is conditional and the
    insert is guarded by the unique (user_id, route_id) constraint, so two
    concurrent toggles never leave duplicate rows.
    """

    get_route_or_404(db, route_id)

    if crud.delete_favorites(db, user_id=user_id, route_id=route_id):
        logger.info("Route %s removed from favorites of user %s", route_id, user_id)
        return False, None

    try:
        favorite = crud.create_favorite(db, user_id=user_id, route_id=route_id)
    except IntegrityError:
        # Someone else inserted it first; it is a favorite either way.
        logger.info("Concurrent favorite insert for user %s route %s", user_id, route_id)
        return True, None

    logger.info("Route %s added to favorites of user %s", route_id, user_id)
    return True, favorite.id


def remove_favorite(db: Session, *, user_id: int, route_id: int) -> int:
    return crud.delete_favorites(db, user_id=user_id, route_id=route_id)


def list_my_favorites(db: Session, user_id: int) -> list[Favorite]:
    return crud.list_user_favorites(db, user_id)
