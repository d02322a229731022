"""Category taxonomy schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..core.enums import CategoryType
from ..core.timezone_utils import ensure_utc
from .base import CamelModel, CamelRequestModel


class CategoryCreate(CamelRequestModel):
    name: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    type: CategoryType = CategoryType.COURSE
    parent_id: Optional[str] = Field(None, alias="parent")
    order: int = Field(0, ge=0)


class CategoryUpdate(CamelRequestModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    type: Optional[CategoryType] = None
    parent_id: Optional[str] = Field(None, alias="parent")
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class CategoryResponse(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    type: str
    parent_id: Optional[str] = None
    is_active: bool
    order: int
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class CategoryListData(CamelModel):
    categories: List[CategoryResponse]
