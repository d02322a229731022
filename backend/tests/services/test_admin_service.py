from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.core.enums import ApprovalStatus, BookingKind, BookingStatus, CourseStatus, RoleName
from app.core.exceptions import BusinessRuleException, NotFoundException, ValidationException
from app.repositories.listing import ListingParams
from app.services.admin_service import AdminService
from app.services.enrollment_service import EnrollmentService


@pytest.fixture
def admin_service(db):
    return AdminService(db)


@pytest.fixture
def activity(make_booking, make_consultant, student, service, published_course, db, at):
    """One completed consultation, one pending application and one enrollment."""
    make_booking(
        student,
        service,
        at(10),
        status=BookingStatus.COMPLETED,
        completed_at=datetime.now(timezone.utc),
    )
    make_booking(student, service, at(13))
    make_consultant(approval_status=ApprovalStatus.PENDING)
    EnrollmentService(db).enroll(student, published_course.id)


class TestDashboard:
    def test_totals_and_revenue(self, admin_service, admin_user, activity):
        data = admin_service.get_dashboard()

        overview = data["overview"]
        assert overview["total_consultations"] == 2
        assert overview["total_enrollments"] == 1
        assert overview["total_courses"] == 1
        assert overview["pending_consultants"] == 1
        assert data["revenue"]["consultation_revenue"] == Decimal("100")
        assert data["revenue"]["course_revenue"] == Decimal("49")
        assert data["revenue"]["total_revenue"] == Decimal("149")
        assert data["consultation_status"] == {"completed": 1, "scheduled": 1}
        assert data["users_by_role"]["admin"] == 1
        assert data["popular_courses"][0].enrollment_count == 1


class TestRevenueAnalytics:
    def test_buckets_today(self, admin_service, consultant, activity):
        data = admin_service.get_revenue_analytics("7d")

        assert data["totals"]["total_revenue"] == Decimal("149")
        assert len(data["daily"]) == 1
        today = data["daily"][0]
        assert today["consultation_count"] == 1
        assert today["enrollment_count"] == 1
        assert data["top_consultants"][0]["consultant_id"] == consultant.id
        assert data["top_courses"][0]["enrollment_count"] == 1

    def test_unknown_period(self, admin_service):
        with pytest.raises(ValidationException) as exc_info:
            admin_service.get_revenue_analytics("2w")
        assert exc_info.value.code == "INVALID_PERIOD"


class TestUserModeration:
    def test_deactivate_and_reactivate(self, admin_service, admin_user, student):
        assert admin_service.set_user_active(admin_user, student.id, False).is_active is False
        assert admin_service.set_user_active(admin_user, student.id, True).is_active is True

    def test_cannot_deactivate_self(self, admin_service, admin_user):
        with pytest.raises(BusinessRuleException):
            admin_service.set_user_active(admin_user, admin_user.id, False)

    def test_cannot_demote_self(self, admin_service, admin_user):
        with pytest.raises(BusinessRuleException):
            admin_service.change_user_role(admin_user, admin_user.id, RoleName.STUDENT)

    def test_unknown_user(self, admin_service, admin_user):
        with pytest.raises(NotFoundException):
            admin_service.set_user_active(admin_user, "missing", True)

    def test_promotion_to_consultant_creates_profile(self, db, admin_service, admin_user, student):
        admin_service.change_user_role(admin_user, student.id, RoleName.CONSULTANT)
        db.refresh(student)
        assert student.role == "consultant"
        assert student.consultant_profile.is_bookable

    def test_demotion_deactivates_profile(self, db, admin_service, admin_user, consultant):
        admin_service.change_user_role(admin_user, consultant.user_id, RoleName.STUDENT)
        db.refresh(consultant)
        assert consultant.is_active is False

    def test_list_users_filters_by_role(self, admin_service, admin_user, student, instructor):
        page = admin_service.list_users(ListingParams(filters={"role": "instructor"}))
        assert [u.id for u in page.items] == [instructor.id]


class TestCourseModeration:
    def test_admin_sees_drafts_and_sets_status(
        self, admin_service, make_course, instructor
    ):
        draft = make_course(instructor, status=CourseStatus.DRAFT)
        assert admin_service.list_courses(ListingParams()).total == 1

        published = admin_service.set_course_status(draft.id, CourseStatus.PUBLISHED)
        assert published.is_published is True
        assert published.published_at is not None


def test_admin_booking_view_covers_both_kinds(admin_service, make_booking, student, service, at):
    make_booking(student, service, at(9))
    make_booking(student, service, at(12), kind=BookingKind.SERVICE_BOOKING)
    page = admin_service.list_bookings(ListingParams())
    # Latest appointment first
    assert [b.kind for b in page.items] == ["service-booking", "consultation"]
