# backend/app/routes/v1/courses.py
"""
Course routes - API v1

Public catalogue reads, instructor course management, enrollment and
lesson content.

Endpoints:
    GET / - Published courses with filters and pagination
    GET /instructor/my-courses - Caller's own courses, any status
    GET /{course_id} - One course
    POST / - Create a draft course (instructor)
    PUT /{course_id} - Update a course (owner or admin)
    DELETE /{course_id} - Archive a course (owner or admin)
    POST /{course_id}/enroll - Enroll the caller
    GET /{course_id}/content - Lessons for enrolled students, owner or admin
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ...api.dependencies import (
    get_course_service,
    get_current_user,
    get_enrollment_service,
    get_optional_user,
    require_roles,
)
from ...core.enums import CourseLanguage, CourseLevel, CourseStatus, RoleName
from ...core.exceptions import DomainException
from ...models.user import User
from ...repositories.listing import ListingParams
from ...schemas.base_responses import ApiResponse, CoursePagination
from ...schemas.course import (
    CourseContentResponse,
    CourseCreate,
    CourseListData,
    CourseResponse,
    CourseUpdate,
)
from ...schemas.enrollment import EnrollmentResponse
from ...services.course_service import CourseService
from ...services.enrollment_service import EnrollmentService
from .common import ULID_PATH_PATTERN, handle_domain_exception, listing_params, priced_listing_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["courses-v1"])


def _course_list(page) -> CourseListData:
    return CourseListData(
        courses=[CourseResponse.model_validate(course) for course in page.items],
        pagination=CoursePagination.from_page(page),
    )


@router.get("", response_model=ApiResponse[CourseListData])
async def list_courses(
    category: Optional[str] = Query(None),
    level: Optional[CourseLevel] = Query(None),
    language: Optional[CourseLanguage] = Query(None),
    params: ListingParams = Depends(priced_listing_params),
    course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseListData]:
    try:
        params.filters.update({"category": category, "level": level, "language": language})
        page = await asyncio.to_thread(course_service.list_courses, params)
        return ApiResponse(data=_course_list(page))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/instructor/my-courses", response_model=ApiResponse[CourseListData])
async def list_my_courses(
    status_filter: Optional[CourseStatus] = Query(None, alias="status"),
    params: ListingParams = Depends(listing_params),
    current_user: User = Depends(require_roles(RoleName.INSTRUCTOR, RoleName.ADMIN)),
    course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseListData]:
    try:
        params.filters["status"] = status_filter
        page = await asyncio.to_thread(course_service.list_instructor_courses, current_user, params)
        return ApiResponse(data=_course_list(page))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{course_id}", response_model=ApiResponse[CourseResponse])
async def get_course(
    course_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Optional[User] = Depends(get_optional_user),
    course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseResponse]:
    try:
        course = await asyncio.to_thread(course_service.get_course, course_id, current_user)
        return ApiResponse(data=CourseResponse.model_validate(course))
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=ApiResponse[CourseResponse], status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate = Body(...),
    current_user: User = Depends(get_current_user),
    course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseResponse]:
    try:
        course = await asyncio.to_thread(course_service.create_course, current_user, course_data)
        return ApiResponse(
            message="Course created successfully", data=CourseResponse.model_validate(course)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{course_id}", response_model=ApiResponse[CourseResponse])
async def update_course(
    course_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    course_data: CourseUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseResponse]:
    try:
        course = await asyncio.to_thread(
            course_service.update_course, current_user, course_id, course_data
        )
        return ApiResponse(
            message="Course updated successfully", data=CourseResponse.model_validate(course)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{course_id}", response_model=ApiResponse[CourseResponse])
async def archive_course(
    course_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseResponse]:
    """Courses are archived, never removed."""
    try:
        course = await asyncio.to_thread(course_service.archive_course, current_user, course_id)
        return ApiResponse(
            message="Course archived successfully", data=CourseResponse.model_validate(course)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{course_id}/enroll",
    response_model=ApiResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def enroll_in_course(
    course_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[EnrollmentResponse]:
    """Enroll the caller; a second live enrollment in the same course is rejected with 409."""
    try:
        enrollment = await asyncio.to_thread(enrollment_service.enroll, current_user, course_id)
        return ApiResponse(
            message="Successfully enrolled in course",
            data=EnrollmentResponse.model_validate(enrollment),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{course_id}/content", response_model=ApiResponse[CourseContentResponse])
async def get_course_content(
    course_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[CourseContentResponse]:
    try:
        content = await asyncio.to_thread(
            enrollment_service.get_course_content, current_user, course_id
        )
        return ApiResponse(data=CourseContentResponse.model_validate(content))
    except DomainException as e:
        handle_domain_exception(e)
