"""User account schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, field_validator

from ..core.enums import RoleName
from ..core.timezone_utils import ensure_utc
from .base import CamelModel, CamelRequestModel
from .base_responses import UserPagination


class UserResponse(CamelModel):
    id: str
    email: str
    full_name: str
    role: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class UserListData(CamelModel):
    users: List[UserResponse]
    pagination: UserPagination


class UserStatusUpdate(CamelRequestModel):
    model_config = ConfigDict(json_schema_extra={"example": {"isActive": False}})

    is_active: bool


class UserRoleUpdate(CamelRequestModel):
    role: RoleName
