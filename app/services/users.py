from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.core.security import get_password_hash, verify_password
from app.db import crud
from app.models.enums import UserRole
from app.models.users import User

logger = logging.getLogger(__name__)

ALLOWED_ROLES = [r.value for r in UserRole]


@dataclass
class UserActivity:
    user: User
    reviews: int
    favorites: int
    photos: int


def register_user(db: Session, *, name: str, email: str, password: str) -> User:
    if crud.get_user_by_email(db, email):
        raise ConflictError("Email already registered")
    try:
        user = crud.create_user(db, name=name.strip(), email=email, password_hash=get_password_hash(password))
    except IntegrityError:
        raise ConflictError("Email already registered")
    logger.info("User %s registered", user.id)
    return user


def authenticate(db: Session, *, email: str, password: str) -> User | None:
    user = crud.get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def list_users(db: Session) -> list[UserActivity]:
    return [
        UserActivity(user=u, reviews=r, favorites=f, photos=p)
        for u, r, f, p in crud.list_users_with_counts(db)
    ]


def update_user_role(db: Session, user_id: int, role: str) -> User:
    if role not in ALLOWED_ROLES:
        raise ValidationError(f"role must be one of: {', '.join(ALLOWED_ROLES)}", field="role")

    user = crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User", user_id)

    user = crud.update_user(db, user, {"role": role})
    logger.info("User %s role set to %s", user_id, role)
    return user


def delete_user(db: Session, user_id: int, acting_user: User) -> None:
    if acting_user.id == user_id:
        raise ForbiddenError("You cannot delete your own account")

    if not crud.get_user(db, user_id):
        raise NotFoundError("User", user_id)

    crud.delete_user_cascade(db, user_id)
    logger.info("User %s deleted by admin %s with their reviews, favorites and photos", user_id, acting_user.id)
