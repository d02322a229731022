# backend/app/services/enrollment_service.py
"""
Enrollment Service for SkillBridge

Course enrollment lifecycle:
- Enrolling in a published course at most once at a time
- Lesson progress, completion and certificate issue
- Student and admin status changes along the enrollment transition table
- One course rating per enrollment
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.booking_policy import (
    ACTIVE_ENROLLMENT_STATUSES,
    SELF_SERVICE_ENROLLMENT_TARGETS,
    is_legal_enrollment_transition,
)
from ..core.enums import CourseStatus, EnrollmentStatus, EnrollmentType
from ..core.exceptions import (
    BusinessRuleException,
    DuplicateEnrollmentException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from ..core.timezone_utils import utc_now
from ..models.course import Course
from ..models.enrollment import Enrollment
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.listing import ListingParams, Page
from ..schemas.enrollment import EnrollmentProgressUpdate
from .base import BaseService
from .rating_service import RatingService

logger = logging.getLogger(__name__)


class EnrollmentService(BaseService):
    def __init__(self, db: Session, rating_service: Optional[RatingService] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_enrollment_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)
        self.rating_service = rating_service or RatingService(db)

    def _load_enrollment(self, enrollment_id: str) -> Enrollment:
        enrollment = self.repository.get_by_id(enrollment_id)
        if enrollment is None:
            raise NotFoundException("Enrollment not found", code="ENROLLMENT_NOT_FOUND")
        return enrollment

    @staticmethod
    def _ensure_owner(enrollment: Enrollment, user: User, allow_admin: bool = True) -> None:
        if enrollment.user_id == user.id or (allow_admin and user.is_admin):
            return
        raise ForbiddenException("Not authorized to access this enrollment")

    @staticmethod
    def _complete(enrollment: Enrollment) -> None:
        enrollment.status = EnrollmentStatus.COMPLETED.value
        enrollment.completed_at = utc_now()
        enrollment.issue_certificate()

    @BaseService.measure_operation("enroll")
    def enroll(self, user: User, course_id: str) -> Enrollment:
        """
        Enroll ``user`` in a published course.

        Raises:
            NotFoundException: Course missing
            BusinessRuleException: Course not published
            DuplicateEnrollmentException: An active or completed enrollment exists
        """
        with self.transaction():
            course = self.course_repository.get_by_id(course_id, load_relationships=False)
            if course is None:
                raise NotFoundException("Course not found", code="COURSE_NOT_FOUND")
            if not course.is_published or course.status != CourseStatus.PUBLISHED.value:
                raise BusinessRuleException(
                    "Course is not available for enrollment", code="COURSE_NOT_AVAILABLE"
                )

            if self.repository.find_live(user.id, course.id) is not None:
                prometheus_metrics.record_enrollment_event("duplicate")
                raise DuplicateEnrollmentException()

            price = course.price or 0
            try:
                enrollment = self.repository.create(
                    user_id=user.id,
                    course_id=course.id,
                    status=EnrollmentStatus.ACTIVE.value,
                    enrollment_type=(
                        EnrollmentType.FREE.value if price == 0 else EnrollmentType.PAID.value
                    ),
                    amount_paid=price,
                    current_lesson_id=course.lesson_ids[0] if course.lesson_ids else None,
                    last_accessed_at=utc_now(),
                )
            except RepositoryException as exc:
                if isinstance(exc.__cause__, IntegrityError):
                    prometheus_metrics.record_enrollment_event("duplicate")
                    raise DuplicateEnrollmentException() from exc
                raise

            self.course_repository.increment(course.id, "enrollment_count")
            self.course_repository.refresh(course)

        prometheus_metrics.record_enrollment_event("created")
        self.logger.info(f"User {user.id} enrolled in course {course.id}")
        return self.repository.get_by_id(enrollment.id)

    @BaseService.measure_operation("update_progress")
    def update_progress(
        self, user: User, enrollment_id: str, progress_data: EnrollmentProgressUpdate
    ) -> Enrollment:
        """
        Mark a lesson completed and recompute progress.

        Repeating a lesson is a no-op. Reaching 100% completes the
        enrollment and issues its certificate.
        """
        with self.transaction():
            enrollment = self._load_enrollment(enrollment_id)
            self._ensure_owner(enrollment, user, allow_admin=False)
            if enrollment.status != EnrollmentStatus.ACTIVE.value:
                raise BusinessRuleException(
                    "Progress can only be updated for active enrollments",
                    code="ENROLLMENT_NOT_ACTIVE",
                )

            course: Course = enrollment.course
            if course.lesson(progress_data.lesson_id) is None:
                raise ValidationException(
                    "Lesson does not belong to this course",
                    code="LESSON_NOT_IN_COURSE",
                    field="lessonId",
                )

            enrollment.add_completed_lesson(
                progress_data.lesson_id,
                time_spent=progress_data.time_spent or 0,
                quiz_score=progress_data.quiz_score,
            )
            enrollment.current_lesson_id = progress_data.lesson_id
            enrollment.last_accessed_at = utc_now()

            if enrollment.recompute_progress(course.total_lessons) >= 100:
                self._complete(enrollment)
                prometheus_metrics.record_enrollment_event("completed")
                self.logger.info(
                    f"Enrollment {enrollment.id} completed, certificate {enrollment.certificate_id}"
                )
            self.repository.flush()

        return enrollment

    @BaseService.measure_operation("change_enrollment_status")
    def change_status(self, user: User, enrollment_id: str, target: EnrollmentStatus) -> Enrollment:
        """
        Move an enrollment along the transition table.

        Students may pause, resume or cancel their own enrollment; admins
        may perform any legal change.
        """
        target = EnrollmentStatus(target)
        with self.transaction():
            enrollment = self._load_enrollment(enrollment_id)
            self._ensure_owner(enrollment, user)
            if not user.is_admin and target not in SELF_SERVICE_ENROLLMENT_TARGETS:
                raise ForbiddenException(
                    f"Not authorized to set enrollment status to {target.value}",
                    code="STATUS_CHANGE_FORBIDDEN",
                )

            current = EnrollmentStatus(enrollment.status)
            if not is_legal_enrollment_transition(current, target):
                raise InvalidStatusTransitionException(current.value, target.value)

            if target is EnrollmentStatus.ACTIVE:
                # Resuming must not create a second live enrollment
                if self.repository.find_live(
                    enrollment.user_id, enrollment.course_id, exclude_id=enrollment.id
                ):
                    raise DuplicateEnrollmentException()
                enrollment.status = target.value
                enrollment.last_accessed_at = utc_now()
            elif target is EnrollmentStatus.COMPLETED:
                self._complete(enrollment)
            else:
                enrollment.status = target.value

            try:
                self.repository.flush()
            except RepositoryException as exc:
                if isinstance(exc.__cause__, IntegrityError):
                    raise DuplicateEnrollmentException() from exc
                raise

        prometheus_metrics.record_enrollment_event(f"status:{target.value}")
        return enrollment

    @BaseService.measure_operation("rate_course")
    def rate(self, user: User, enrollment_id: str, score: int, review: Optional[str] = None) -> Enrollment:
        with self.transaction():
            enrollment = self._load_enrollment(enrollment_id)
            self._ensure_owner(enrollment, user, allow_admin=False)
            if EnrollmentStatus(enrollment.status) not in ACTIVE_ENROLLMENT_STATUSES:
                raise BusinessRuleException(
                    "Only active or completed enrollments can be rated",
                    code="RATING_NOT_ALLOWED",
                )
            if enrollment.rating_score is not None:
                raise BusinessRuleException(
                    "You have already rated this course", code="RATING_ALREADY_PROVIDED"
                )
            enrollment.rating_score = score
            enrollment.review = review
            enrollment.rated_at = utc_now()
            self.repository.flush()

        self.rating_service.refresh_course(enrollment.course_id)
        return enrollment

    @BaseService.measure_operation("get_enrollment")
    def get_enrollment(self, user: User, enrollment_id: str) -> Enrollment:
        enrollment = self._load_enrollment(enrollment_id)
        self._ensure_owner(enrollment, user)
        return enrollment

    @BaseService.measure_operation("list_enrollments")
    def list_enrollments(self, user: User, params: ListingParams) -> Page[Enrollment]:
        return self.repository.list_for_user(user.id, params)

    @BaseService.measure_operation("get_course_content")
    def get_course_content(self, user: User, course_id: str) -> Dict[str, Any]:
        """
        Lessons of a course for an enrolled student, its instructor or an admin.

        Enrolled students also get their progress alongside the lessons.
        """
        course = self.course_repository.get_by_id(course_id, load_relationships=False)
        if course is None:
            raise NotFoundException("Course not found", code="COURSE_NOT_FOUND")

        enrollment = self.repository.find_live(user.id, course.id)
        if enrollment is None and not (user.is_admin or course.instructor_id == user.id):
            raise ForbiddenException("You are not enrolled in this course", code="NOT_ENROLLED")

        return {
            "course_id": course.id,
            "title": course.title,
            "lessons": list(course.lessons or []),
            "progress": enrollment.progress if enrollment else None,
            "completed_lessons": enrollment.completed_lesson_ids if enrollment else [],
        }
