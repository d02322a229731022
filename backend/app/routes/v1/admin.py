# backend/app/routes/v1/admin.py
"""
Admin routes - API v1

Every endpoint requires the admin role.

Endpoints:
    GET /dashboard - Platform totals and trailing thirty-day activity
    GET /users - Users with role/status filters
    PUT /users/{user_id}/status - Activate or deactivate an account
    PUT /users/{user_id}/role - Change a user's role
    GET /consultants/pending - Applications awaiting review
    PUT /consultants/{consultant_id}/approval - Approve or reject
    GET /courses - Courses of any status
    PUT /courses/{course_id}/status - Publish, unpublish or archive
    GET /consultations - Bookings of both kinds
    GET /analytics/revenue - Revenue by day with top earners
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from ...api.dependencies import get_admin_service, require_admin
from ...core.constants import REVENUE_PERIOD_DAYS
from ...core.enums import BookingKind, BookingStatus, CourseStatus, RoleName
from ...core.exceptions import DomainException
from ...models.user import User
from ...repositories.listing import ListingParams
from ...schemas.admin import DashboardData, RevenueAnalytics
from ...schemas.base_responses import (
    ApiResponse,
    ConsultantPagination,
    ConsultationPagination,
    CoursePagination,
    UserPagination,
)
from ...schemas.booking import BookingResponse, ConsultationListData
from ...schemas.consultant import (
    ConsultantApprovalRequest,
    ConsultantListData,
    ConsultantResponse,
)
from ...schemas.course import CourseListData, CourseResponse, CourseStatusUpdate
from ...schemas.user import UserListData, UserResponse, UserRoleUpdate, UserStatusUpdate
from ...services.admin_service import AdminService
from .common import ULID_PATH_PATTERN, handle_domain_exception, listing_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"], dependencies=[Depends(require_admin)])

PERIOD_PATTERN = "^(" + "|".join(REVENUE_PERIOD_DAYS) + ")$"


@router.get("/dashboard", response_model=ApiResponse[DashboardData])
async def get_dashboard(
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[DashboardData]:
    try:
        data = await asyncio.to_thread(admin_service.get_dashboard)
        return ApiResponse(data=DashboardData.model_validate(data, from_attributes=True))
    except DomainException as e:
        handle_domain_exception(e)


# Users


@router.get("/users", response_model=ApiResponse[UserListData])
async def list_users(
    role: Optional[RoleName] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|inactive)$"),
    params: ListingParams = Depends(listing_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[UserListData]:
    try:
        params.filters["role"] = role
        params.filters["isActive"] = None if status_filter is None else status_filter == "active"
        page = await asyncio.to_thread(admin_service.list_users, params)
        return ApiResponse(
            data=UserListData(
                users=[UserResponse.model_validate(item) for item in page.items],
                pagination=UserPagination.from_page(page),
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/users/{user_id}/status", response_model=ApiResponse[UserResponse])
async def update_user_status(
    user_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    status_data: UserStatusUpdate = Body(...),
    current_user: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[UserResponse]:
    try:
        user = await asyncio.to_thread(
            admin_service.set_user_active, current_user, user_id, status_data.is_active
        )
        state = "activated" if user.is_active else "deactivated"
        return ApiResponse(
            message=f"User account {state} successfully", data=UserResponse.model_validate(user)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/users/{user_id}/role", response_model=ApiResponse[UserResponse])
async def update_user_role(
    user_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    role_data: UserRoleUpdate = Body(...),
    current_user: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[UserResponse]:
    try:
        user = await asyncio.to_thread(
            admin_service.change_user_role, current_user, user_id, RoleName(role_data.role)
        )
        return ApiResponse(
            message=f"User role updated to {user.role} successfully",
            data=UserResponse.model_validate(user),
        )
    except DomainException as e:
        handle_domain_exception(e)


# Consultants


@router.get("/consultants/pending", response_model=ApiResponse[ConsultantListData])
async def list_pending_consultants(
    params: ListingParams = Depends(listing_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[ConsultantListData]:
    try:
        page = await asyncio.to_thread(admin_service.list_pending_consultants, params)
        return ApiResponse(
            data=ConsultantListData(
                consultants=[ConsultantResponse.model_validate(item) for item in page.items],
                pagination=ConsultantPagination.from_page(page),
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/consultants/{consultant_id}/approval", response_model=ApiResponse[ConsultantResponse])
async def review_consultant(
    consultant_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    approval: ConsultantApprovalRequest = Body(...),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[ConsultantResponse]:
    try:
        profile = await asyncio.to_thread(
            admin_service.review_consultant, consultant_id, approval.action, approval.reason
        )
        return ApiResponse(
            message=f"Consultant application {approval.action}d successfully",
            data=ConsultantResponse.model_validate(profile),
        )
    except DomainException as e:
        handle_domain_exception(e)


# Courses


@router.get("/courses", response_model=ApiResponse[CourseListData])
async def list_courses(
    status_filter: Optional[CourseStatus] = Query(None, alias="status"),
    instructor: Optional[str] = Query(None),
    params: ListingParams = Depends(listing_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[CourseListData]:
    try:
        params.filters.update({"status": status_filter, "instructor": instructor})
        if params.sort_by is None:
            params.sort_by = "createdAt"
        page = await asyncio.to_thread(admin_service.list_courses, params)
        return ApiResponse(
            data=CourseListData(
                courses=[CourseResponse.model_validate(item) for item in page.items],
                pagination=CoursePagination.from_page(page),
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/courses/{course_id}/status", response_model=ApiResponse[CourseResponse])
async def update_course_status(
    course_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    status_data: CourseStatusUpdate = Body(...),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[CourseResponse]:
    try:
        course = await asyncio.to_thread(
            admin_service.set_course_status, course_id, CourseStatus(status_data.status)
        )
        return ApiResponse(
            message=f"Course status updated to {course.status} successfully",
            data=CourseResponse.model_validate(course),
        )
    except DomainException as e:
        handle_domain_exception(e)


# Bookings


@router.get("/consultations", response_model=ApiResponse[ConsultationListData])
async def list_all_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    type_filter: Optional[BookingKind] = Query(None, alias="type"),
    consultant: Optional[str] = Query(None),
    user: Optional[str] = Query(None),
    params: ListingParams = Depends(listing_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[ConsultationListData]:
    try:
        params.filters.update(
            {"status": status_filter, "type": type_filter, "consultant": consultant, "user": user}
        )
        page = await asyncio.to_thread(admin_service.list_bookings, params)
        return ApiResponse(
            data=ConsultationListData(
                consultations=[BookingResponse.model_validate(item) for item in page.items],
                pagination=ConsultationPagination.from_page(page),
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


# Analytics


@router.get("/analytics/revenue", response_model=ApiResponse[RevenueAnalytics])
async def get_revenue_analytics(
    period: str = Query("30d", pattern=PERIOD_PATTERN),
    admin_service: AdminService = Depends(get_admin_service),
) -> ApiResponse[RevenueAnalytics]:
    try:
        data = await asyncio.to_thread(admin_service.get_revenue_analytics, period)
        return ApiResponse(data=RevenueAnalytics.model_validate(data))
    except DomainException as e:
        handle_domain_exception(e)
