"""Request/response schemas for categories."""

from datetime import datetime

from pydantic import BaseModel


class CategoryCreate(BaseModel):
    name: str | None = None


class CategoryOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    created_at: datetime


class CategoriesListResponse(BaseModel):
    categories: list[CategoryOut]
