"""Consultant profile schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from ..core.constants import MAX_REASON_LENGTH
from ..core.enums import ApprovalAction
from ..core.timezone_utils import ensure_utc
from .base import CamelModel, CamelRequestModel, RatingValue
from .base_responses import ConsultantPagination


class ConsultantApplication(CamelRequestModel):
    specialization: str = Field(..., min_length=2, max_length=100)
    bio: Optional[str] = Field(None, max_length=1000)


class ConsultantApprovalRequest(CamelRequestModel):
    action: ApprovalAction
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)

    @model_validator(mode="after")
    def _reason_for_rejection(self) -> "ConsultantApprovalRequest":
        if self.action == ApprovalAction.REJECT.value and not self.reason:
            raise ValueError("A reason is required when rejecting an application")
        return self


class ConsultantResponse(CamelModel):
    id: str
    user_id: str
    name: str
    email: str
    specialization: Optional[str] = None
    bio: Optional[str] = None
    approval_status: str
    rejection_reason: Optional[str] = None
    approved_at: Optional[datetime] = None
    is_active: bool
    rating: RatingValue
    total_ratings: int
    created_at: datetime

    @field_validator("approved_at", "created_at")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class ConsultantListData(CamelModel):
    consultants: List[ConsultantResponse]
    pagination: ConsultantPagination
