from decimal import Decimal

import pytest

from app.core.enums import CourseStatus, EnrollmentStatus
from app.core.exceptions import (
    BusinessRuleException,
    DuplicateEnrollmentException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from app.repositories.listing import ListingParams
from app.schemas.enrollment import EnrollmentProgressUpdate
from app.services.enrollment_service import EnrollmentService


@pytest.fixture
def enrollment_service(db):
    return EnrollmentService(db)


def _lesson(lesson_id, **extra):
    return EnrollmentProgressUpdate.model_validate({"lessonId": lesson_id, **extra})


class TestEnroll:
    def test_enroll_increments_count(self, db, enrollment_service, student, published_course):
        enrollment = enrollment_service.enroll(student, published_course.id)

        assert enrollment.status == EnrollmentStatus.ACTIVE.value
        assert enrollment.progress == 0
        assert enrollment.amount_paid == Decimal("49.00")
        assert enrollment.enrollment_type == "paid"
        assert enrollment.current_lesson_id == "l1"
        db.refresh(published_course)
        assert published_course.enrollment_count == 1

    def test_free_course(self, enrollment_service, student, make_course, instructor):
        free = make_course(instructor, title="Free taster", price=Decimal("0"))
        assert enrollment_service.enroll(student, free.id).enrollment_type == "free"

    def test_duplicate_enrollment_rejected(
        self, db, enrollment_service, student, published_course
    ):
        enrollment_service.enroll(student, published_course.id)
        with pytest.raises(DuplicateEnrollmentException) as exc_info:
            enrollment_service.enroll(student, published_course.id)
        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "You are already enrolled in this course"
        db.refresh(published_course)
        assert published_course.enrollment_count == 1

    def test_reenroll_after_cancelling(self, enrollment_service, student, published_course):
        first = enrollment_service.enroll(student, published_course.id)
        enrollment_service.change_status(student, first.id, EnrollmentStatus.CANCELLED)
        second = enrollment_service.enroll(student, published_course.id)
        assert second.id != first.id

    def test_draft_course_not_available(self, enrollment_service, student, make_course, instructor):
        draft = make_course(instructor, status=CourseStatus.DRAFT)
        with pytest.raises(BusinessRuleException) as exc_info:
            enrollment_service.enroll(student, draft.id)
        assert exc_info.value.code == "COURSE_NOT_AVAILABLE"

    def test_missing_course(self, enrollment_service, student):
        with pytest.raises(NotFoundException):
            enrollment_service.enroll(student, "01HZZZZZZZZZZZZZZZZZZZZZZZ")


class TestProgress:
    def test_half_then_complete_with_certificate(
        self, enrollment_service, student, published_course
    ):
        enrollment = enrollment_service.enroll(student, published_course.id)

        halfway = enrollment_service.update_progress(
            student, enrollment.id, _lesson("l1", timeSpent=20, quizScore=80)
        )
        assert halfway.progress == 50
        assert halfway.status == EnrollmentStatus.ACTIVE.value
        assert halfway.certificate_id is None

        done = enrollment_service.update_progress(student, enrollment.id, _lesson("l2", timeSpent=30))
        assert done.progress == 100
        assert done.status == EnrollmentStatus.COMPLETED.value
        assert done.completed_at is not None
        assert done.certificate_id.startswith("CERT-")
        assert done.total_time_spent == 50

    def test_repeating_a_lesson_is_a_no_op(self, enrollment_service, student, published_course):
        enrollment = enrollment_service.enroll(student, published_course.id)
        enrollment_service.update_progress(student, enrollment.id, _lesson("l1"))
        again = enrollment_service.update_progress(student, enrollment.id, _lesson("l1"))
        assert again.progress == 50
        assert again.completed_lesson_ids == ["l1"]

    def test_unknown_lesson(self, enrollment_service, student, published_course):
        enrollment = enrollment_service.enroll(student, published_course.id)
        with pytest.raises(ValidationException):
            enrollment_service.update_progress(student, enrollment.id, _lesson("nope"))

    def test_only_owner_updates_progress(
        self, enrollment_service, student, admin_user, published_course
    ):
        enrollment = enrollment_service.enroll(student, published_course.id)
        with pytest.raises(ForbiddenException):
            enrollment_service.update_progress(admin_user, enrollment.id, _lesson("l1"))

    def test_paused_enrollment_rejects_progress(
        self, enrollment_service, student, published_course
    ):
        enrollment = enrollment_service.enroll(student, published_course.id)
        enrollment_service.change_status(student, enrollment.id, EnrollmentStatus.PAUSED)
        with pytest.raises(BusinessRuleException) as exc_info:
            enrollment_service.update_progress(student, enrollment.id, _lesson("l1"))
        assert exc_info.value.code == "ENROLLMENT_NOT_ACTIVE"


class TestStatusChanges:
    def test_pause_and_resume(self, enrollment_service, student, published_course):
        enrollment = enrollment_service.enroll(student, published_course.id)
        paused = enrollment_service.change_status(student, enrollment.id, EnrollmentStatus.PAUSED)
        assert paused.status == "paused"
        resumed = enrollment_service.change_status(student, enrollment.id, EnrollmentStatus.ACTIVE)
        assert resumed.status == "active"

    def test_student_cannot_complete_directly(
        self, enrollment_service, student, published_course
    ):
        enrollment = enrollment_service.enroll(student, published_course.id)
        with pytest.raises(ForbiddenException):
            enrollment_service.change_status(student, enrollment.id, EnrollmentStatus.COMPLETED)

    def test_admin_completion_issues_certificate(
        self, enrollment_service, student, admin_user, published_course
    ):
        enrollment = enrollment_service.enroll(student, published_course.id)
        completed = enrollment_service.change_status(
            admin_user, enrollment.id, EnrollmentStatus.COMPLETED
        )
        assert completed.certificate_id is not None

    def test_cancelled_is_final(self, enrollment_service, student, published_course):
        enrollment = enrollment_service.enroll(student, published_course.id)
        enrollment_service.change_status(student, enrollment.id, EnrollmentStatus.CANCELLED)
        with pytest.raises(BusinessRuleException) as exc_info:
            enrollment_service.change_status(student, enrollment.id, EnrollmentStatus.ACTIVE)
        assert exc_info.value.code == "INVALID_STATUS_TRANSITION"

    def test_other_student_forbidden(
        self, enrollment_service, student, other_student, published_course
    ):
        enrollment = enrollment_service.enroll(student, published_course.id)
        with pytest.raises(ForbiddenException):
            enrollment_service.get_enrollment(other_student, enrollment.id)


class TestRating:
    def test_rating_updates_course_average(
        self, db, enrollment_service, student, other_student, published_course
    ):
        mine = enrollment_service.enroll(student, published_course.id)
        theirs = enrollment_service.enroll(other_student, published_course.id)

        enrollment_service.rate(student, mine.id, 4, "Clear")
        enrollment_service.rate(other_student, theirs.id, 5)

        db.refresh(published_course)
        assert published_course.rating_average == Decimal("4.5")
        assert published_course.rating_count == 2

    def test_rate_once(self, enrollment_service, student, published_course):
        enrollment = enrollment_service.enroll(student, published_course.id)
        enrollment_service.rate(student, enrollment.id, 5)
        with pytest.raises(BusinessRuleException) as exc_info:
            enrollment_service.rate(student, enrollment.id, 3)
        assert exc_info.value.code == "RATING_ALREADY_PROVIDED"


class TestReads:
    def test_list_is_scoped_to_caller(
        self, enrollment_service, student, other_student, published_course
    ):
        enrollment_service.enroll(student, published_course.id)
        assert enrollment_service.list_enrollments(student, ListingParams()).total == 1
        assert enrollment_service.list_enrollments(other_student, ListingParams()).total == 0

    def test_content_requires_enrollment(
        self, enrollment_service, student, other_student, instructor, published_course
    ):
        enrollment_service.enroll(student, published_course.id)

        content = enrollment_service.get_course_content(student, published_course.id)
        assert [lesson["id"] for lesson in content["lessons"]] == ["l1", "l2"]
        assert content["progress"] == 0

        owner_view = enrollment_service.get_course_content(instructor, published_course.id)
        assert owner_view["progress"] is None

        with pytest.raises(ForbiddenException) as exc_info:
            enrollment_service.get_course_content(other_student, published_course.id)
        assert exc_info.value.code == "NOT_ENROLLED"
