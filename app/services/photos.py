from __future__ import annotations

import logging
from functools import partial

import anyio
from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.db import crud
from app.models.photos import Photo
from app.services import storage
from app.services.routes import get_route_or_404

logger = logging.getLogger(__name__)


async def upload_route_photo(db: Session, *, route_id: int, user_id: int, upload: UploadFile) -> Photo:
    await anyio.to_thread.run_sync(get_route_or_404, db, route_id)
    url = await storage.save_image(upload)

    try:
        photo = await anyio.to_thread.run_sync(partial(crud.create_photo, db, route_id=route_id, user_id=user_id, url=url))
    except Exception:
        await anyio.to_thread.run_sync(storage.remove_stored_file, url)
        raise

    logger.info("Photo %s uploaded to route %s by user %s", photo.id, route_id, user_id)
    return photo


def list_route_photos(db: Session, route_id: int) -> list[Photo]:
    get_route_or_404(db, route_id)
    return crud.list_route_photos(db, route_id)


def list_all_photos(db: Session) -> list[Photo]:
    return crud.list_all_photos(db)


def delete_photo(db: Session, photo_id: int) -> None:
    photo = crud.get_photo(db, photo_id)
    if not photo:
        raise NotFoundError("Photo", photo_id)

    url = photo.url
    crud.delete_photo(db, photo)
    # The row is gone either way; a leftover file is only logged.
    storage.remove_stored_file(url)
    logger.info("Photo %s deleted", photo_id)
