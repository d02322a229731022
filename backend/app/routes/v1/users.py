# backend/app/routes/v1/users.py
"""
User routes - API v1

Endpoints:
    GET /me - The authenticated caller's account
"""

import logging

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user
from ...models.user import User
from ...schemas.base_responses import ApiResponse
from ...schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users-v1"])


@router.get("/me", response_model=ApiResponse[UserResponse])
async def read_users_me(current_user: User = Depends(get_current_user)) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.model_validate(current_user))
