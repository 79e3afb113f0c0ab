from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.core.deps import get_current_user
from app.db.session import get_db
from app.models.photos import Photo
from app.models.users import User
from app.schemas.common import UserBrief
from app.schemas.photos import PhotoResponse, RoutePhotoItem, RoutePhotoListResponse
from app.services import photos as photos_service

router = APIRouter(prefix="/api/routes/{route_id}/photos", tags=["photos"])


def _to_photo_item(p: Photo) -> RoutePhotoItem:
    return RoutePhotoItem(id=p.id, url=p.url, created_at=p.created_at, user=UserBrief(id=p.user.id, name=p.user.name))


@router.post("", response_model=PhotoResponse, status_code=201)
async def upload_photo(
    route_id: int,
    photo: UploadFile = File(...),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PhotoResponse:
    p = await photos_service.upload_route_photo(db, route_id=route_id, user_id=current.id, upload=photo)
    return PhotoResponse(id=p.id, route_id=p.route_id, user_id=p.user_id, url=p.url, created_at=p.created_at)


@router.get("", response_model=RoutePhotoListResponse)
def list_photos(route_id: int, db: Session = Depends(get_db)) -> RoutePhotoListResponse:
    photos = photos_service.list_route_photos(db, route_id)
    return RoutePhotoListResponse(data=[_to_photo_item(p) for p in photos])
