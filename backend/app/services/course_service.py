# backend/app/services/course_service.py
"""
Course Service for SkillBridge

Catalogue reads and instructor-side course management. Deleting a course
archives it; ``is_published`` always follows ``status``.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.enums import CourseStatus, RoleName
from ..core.exceptions import ForbiddenException, NotFoundException
from ..models.course import Course
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.listing import ListingParams, Page
from ..schemas.course import CourseCreate, CourseUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class CourseService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_course_repository(db)
        self.category_repository = RepositoryFactory.create_category_repository(db)

    def _load_course(self, course_id: str) -> Course:
        course = self.repository.get_by_id(course_id)
        if course is None:
            raise NotFoundException("Course not found", code="COURSE_NOT_FOUND")
        return course

    @staticmethod
    def _ensure_can_manage(course: Course, user: User) -> None:
        if not (user.is_admin or course.instructor_id == user.id):
            raise ForbiddenException("Not authorized to modify this course")

    def _ensure_category(self, category_id: Optional[str]) -> None:
        if category_id and self.category_repository.get_by_id(category_id) is None:
            raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND")

    @BaseService.measure_operation("list_courses")
    def list_courses(self, params: ListingParams) -> Page[Course]:
        """Published courses only."""
        return self.repository.list_published(params)

    @BaseService.measure_operation("get_course")
    def get_course(self, course_id: str, user: Optional[User] = None) -> Course:
        """Published courses are public; drafts and archived ones only to their instructor or admins."""
        course = self._load_course(course_id)
        if course.is_published:
            return course
        if user is not None and (user.is_admin or course.instructor_id == user.id):
            return course
        raise NotFoundException("Course not found", code="COURSE_NOT_FOUND")

    @BaseService.measure_operation("create_course")
    def create_course(self, instructor: User, course_data: CourseCreate) -> Course:
        if not instructor.has_role(RoleName.INSTRUCTOR, RoleName.ADMIN):
            raise ForbiddenException("Only instructors can create courses")

        with self.transaction():
            self._ensure_category(course_data.category_id)
            payload = course_data.model_dump(exclude={"lessons"})
            course = self.repository.create(
                instructor_id=instructor.id,
                lessons=[lesson.model_dump(by_alias=True) for lesson in course_data.lessons],
                status=CourseStatus.DRAFT.value,
                is_published=False,
                **payload,
            )

        self.logger.info(f"Instructor {instructor.id} created course {course.id}")
        return self.repository.get_by_id(course.id)

    @BaseService.measure_operation("update_course")
    def update_course(self, user: User, course_id: str, course_data: CourseUpdate) -> Course:
        with self.transaction():
            course = self._load_course(course_id)
            self._ensure_can_manage(course, user)

            changes: Dict[str, Any] = course_data.model_dump(
                exclude_unset=True, exclude={"lessons", "status"}
            )
            if "category_id" in changes:
                self._ensure_category(changes["category_id"])
            for field, value in changes.items():
                # Only the category may be cleared
                if value is None and field != "category_id":
                    continue
                setattr(course, field, value)
            if course_data.lessons is not None:
                course.lessons = [lesson.model_dump(by_alias=True) for lesson in course_data.lessons]
            if course_data.status is not None:
                course.set_status(CourseStatus(course_data.status))
            self.repository.flush()

        return course

    @BaseService.measure_operation("archive_course")
    def archive_course(self, user: User, course_id: str) -> Course:
        with self.transaction():
            course = self._load_course(course_id)
            self._ensure_can_manage(course, user)
            course.set_status(CourseStatus.ARCHIVED)
            self.repository.flush()
        self.logger.info(f"Course {course_id} archived by user {user.id}")
        return course

    @BaseService.measure_operation("set_course_status")
    def set_status(self, course_id: str, status: CourseStatus) -> Course:
        """Moderation entry point used by admins."""
        with self.transaction():
            course = self._load_course(course_id)
            course.set_status(CourseStatus(status))
            self.repository.flush()
        return course

    @BaseService.measure_operation("list_instructor_courses")
    def list_instructor_courses(self, instructor: User, params: ListingParams) -> Page[Course]:
        if not instructor.has_role(RoleName.INSTRUCTOR, RoleName.ADMIN):
            raise ForbiddenException("Only instructors can view their courses")
        params.filters["instructor"] = instructor.id
        return self.repository.list_any(params)
