from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import require_role
from app.db.session import get_db
from app.models.enums import UserRole
from app.models.users import User
from app.routers.photos import _to_photo_item
from app.routers.routes import _to_route_response
from app.schemas.common import MessageResponse, RouteBrief
from app.schemas.photos import AdminPhotoItem, AdminPhotoListResponse
from app.schemas.reviews import AdminReviewItem, AdminReviewListResponse, ReviewAuthor
from app.schemas.routes import AdminRouteListResponse, RouteCreateRequest, RouteResponse, RouteUpdateRequest
from app.schemas.users import (
    AdminUserItem,
    AdminUserListResponse,
    AdminUserResponse,
    RoleUpdateRequest,
    UserCounts,
)
from app.services import photos as photos_service
from app.services import reviews as reviews_service
from app.services import routes as routes_service
from app.services import users as users_service

admin_only = require_role(UserRole.admin)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(admin_only)])


# Users


@router.get("/users", response_model=AdminUserListResponse)
def list_users(db: Session = Depends(get_db)) -> AdminUserListResponse:
    rows = users_service.list_users(db)
    return AdminUserListResponse(
        data=[
            AdminUserItem(
                id=row.user.id,
                name=row.user.name,
                email=row.user.email,
                role=row.user.role,
                created_at=row.user.created_at,
                counts=UserCounts(reviews=row.reviews, favorites=row.favorites, photos=row.photos),
            )
            for row in rows
        ]
    )


@router.patch("/users/{user_id}", response_model=AdminUserResponse)
def update_user_role(user_id: int, payload: RoleUpdateRequest, db: Session = Depends(get_db)) -> AdminUserResponse:
    user = users_service.update_user_role(db, user_id, payload.role.value)
    return AdminUserResponse(id=user.id, name=user.name, email=user.email, role=user.role)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    current: User = Depends(admin_only),
    db: Session = Depends(get_db),
) -> MessageResponse:
    users_service.delete_user(db, user_id, current)
    return MessageResponse(message="User deleted")


# Reviews


@router.get("/reviews", response_model=AdminReviewListResponse)
def list_reviews(db: Session = Depends(get_db)) -> AdminReviewListResponse:
    reviews = reviews_service.list_all_reviews(db)
    return AdminReviewListResponse(
        data=[
            AdminReviewItem(
                id=r.id,
                rating=r.rating,
                comment=r.comment,
                created_at=r.created_at,
                user=ReviewAuthor(id=r.user.id, name=r.user.name, email=r.user.email),
                route=RouteBrief(id=r.route.id, title=r.route.title, slug=r.route.slug),
            )
            for r in reviews
        ]
    )


@router.delete("/reviews/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: int,
    current: User = Depends(admin_only),
    db: Session = Depends(get_db),
) -> MessageResponse:
    reviews_service.delete_review(db, review_id, current)
    return MessageResponse(message="Review deleted")


# Routes


@router.get("/routes", response_model=AdminRouteListResponse)
def list_routes(db: Session = Depends(get_db)) -> AdminRouteListResponse:
    return AdminRouteListResponse(data=[_to_route_response(r) for r in routes_service.list_all_routes(db)])


@router.post("/routes", response_model=RouteResponse, status_code=201)
def create_route(payload: RouteCreateRequest, db: Session = Depends(get_db)) -> RouteResponse:
    fields = payload.model_dump()
    route = routes_service.create_route(
        db,
        title=fields.pop("title"),
        difficulty=fields.pop("difficulty"),
        description=fields.pop("description"),
        **fields,
    )
    return _to_route_response(route)


@router.patch("/routes/{route_id}", response_model=RouteResponse)
def update_route(route_id: int, payload: RouteUpdateRequest, db: Session = Depends(get_db)) -> RouteResponse:
    route = routes_service.update_route(db, route_id, payload.model_dump(exclude_unset=True))
    return _to_route_response(route)


@router.delete("/routes/{route_id}", response_model=MessageResponse)
def delete_route(route_id: int, db: Session = Depends(get_db)) -> MessageResponse:
    routes_service.delete_route(db, route_id)
    return MessageResponse(message="Route deleted")


# Photos


@router.get("/photos", response_model=AdminPhotoListResponse)
def list_photos(db: Session = Depends(get_db)) -> AdminPhotoListResponse:
    photos = photos_service.list_all_photos(db)
    return AdminPhotoListResponse(
        data=[
            AdminPhotoItem(
                **_to_photo_item(p).model_dump(),
                route=RouteBrief(id=p.route.id, title=p.route.title, slug=p.route.slug),
            )
            for p in photos
        ]
    )


@router.delete("/photos/{photo_id}", response_model=MessageResponse)
def delete_photo(photo_id: int, db: Session = Depends(get_db)) -> MessageResponse:
    photos_service.delete_photo(db, photo_id)
    return MessageResponse(message="Photo deleted")
