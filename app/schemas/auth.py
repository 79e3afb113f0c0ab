from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import ApiModel


class RegisterRequest(ApiModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)


# OAuth2 token responses keep their standard snake_case keys.
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserMeResponse(ApiModel):
    id: int
    name: str
    email: EmailStr
    role: str
