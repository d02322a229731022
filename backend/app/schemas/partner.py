"""Partner schemas."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from ..core.enums import PartnershipLevel, PartnerType
from ..core.timezone_utils import ensure_utc
from .base import CamelModel, CamelRequestModel
from .base_responses import PartnerPagination


def _check_dates(start: Optional[date], end: Optional[date]) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("endDate must not be before startDate")


class PartnerCreate(CamelRequestModel):
    name: str = Field(..., min_length=2, max_length=100)
    type: PartnerType
    description: Optional[str] = Field(None, max_length=2000)
    website: Optional[str] = Field(None, max_length=255, pattern=r"^https?://")
    contact_email: Optional[EmailStr] = None
    partnership_level: PartnershipLevel = PartnershipLevel.BRONZE
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def _check_date_order(self) -> "PartnerCreate":
        _check_dates(self.start_date, self.end_date)
        return self


class PartnerUpdate(CamelRequestModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    type: Optional[PartnerType] = None
    description: Optional[str] = Field(None, max_length=2000)
    website: Optional[str] = Field(None, max_length=255, pattern=r"^https?://")
    contact_email: Optional[EmailStr] = None
    partnership_level: Optional[PartnershipLevel] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def _check_date_order(self) -> "PartnerUpdate":
        _check_dates(self.start_date, self.end_date)
        return self


class PartnerResponse(CamelModel):
    id: str
    name: str
    type: str
    description: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[str] = None
    partnership_level: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class PartnerListData(CamelModel):
    partners: List[PartnerResponse]
    pagination: PartnerPagination
