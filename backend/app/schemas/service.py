"""Marketplace service schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from pydantic import AfterValidator, Field, field_validator, model_validator

from ..core.constants import MAX_BOOKING_DURATION, MIN_BOOKING_DURATION, WEEKDAYS
from ..core.timezone_utils import ensure_utc, parse_hhmm
from .base import CamelModel, CamelRequestModel, Money, RatingValue
from .base_responses import ServicePagination

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class TimeSlotWindow(CamelRequestModel):
    start_time: str = Field(..., pattern=HHMM_PATTERN)
    end_time: str = Field(..., pattern=HHMM_PATTERN)
    is_available: bool = True

    @model_validator(mode="after")
    def _check_order(self) -> "TimeSlotWindow":
        if parse_hhmm(self.end_time) <= parse_hhmm(self.start_time):
            raise ValueError("endTime must be after startTime")
        return self


def _check_weekdays(availability: Dict[str, bool]) -> Dict[str, bool]:
    unknown = set(availability) - set(WEEKDAYS)
    if unknown:
        raise ValueError(f"Unknown weekdays: {', '.join(sorted(unknown))}")
    return availability


WeekdayAvailability = Annotated[Dict[str, bool], AfterValidator(_check_weekdays)]


class ServiceCreate(CamelRequestModel):
    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=20, max_length=2000)
    category_id: Optional[str] = Field(None, alias="category")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    duration: int = Field(..., ge=MIN_BOOKING_DURATION, le=MAX_BOOKING_DURATION)
    availability: Optional[WeekdayAvailability] = None
    time_slots: List[TimeSlotWindow] = Field(default_factory=list)


class ServiceUpdate(CamelRequestModel):
    title: Optional[str] = Field(None, min_length=5, max_length=100)
    description: Optional[str] = Field(None, min_length=20, max_length=2000)
    category_id: Optional[str] = Field(None, alias="category")
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    duration: Optional[int] = Field(None, ge=MIN_BOOKING_DURATION, le=MAX_BOOKING_DURATION)
    availability: Optional[WeekdayAvailability] = None
    time_slots: Optional[List[TimeSlotWindow]] = None
    is_active: Optional[bool] = None


class ServiceConsultantInfo(CamelModel):
    id: str
    name: str
    specialization: Optional[str] = None
    rating: RatingValue = 0.0


class ServiceResponse(CamelModel):
    id: str
    title: str
    description: str
    price: Money
    duration: int
    is_active: bool
    availability: Dict[str, bool] = Field(default_factory=dict)
    time_slots: List[Dict[str, object]] = Field(default_factory=list)
    rating_average: RatingValue
    rating_count: int
    rating_distribution: Dict[str, int] = Field(default_factory=dict)
    total_bookings: int
    completed_bookings: int
    consultant_id: str
    category_id: Optional[str] = None
    consultant: Optional[ServiceConsultantInfo] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class ServiceListData(CamelModel):
    services: List[ServiceResponse]
    pagination: ServicePagination
