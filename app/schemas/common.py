from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.services.pagination import Pagination


class ApiModel(BaseModel):
    """Base for JSON bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationResponse(ApiModel):
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def from_pagination(cls, p: Pagination) -> "PaginationResponse":
        return cls(page=p.page, page_size=p.page_size, total=p.total, total_pages=p.total_pages)


class UserBrief(ApiModel):
    id: int
    name: str


class RouteBrief(ApiModel):
    id: int
    title: str
    slug: str


class MessageResponse(ApiModel):
    message: str
