# backend/app/services/admin_service.py
"""
Admin Service for SkillBridge

Platform oversight: the dashboard summary, user moderation, consultant
approvals, course moderation, the all-bookings view and revenue
analytics. Consultant and course changes are delegated to their own
services so the same rules apply as everywhere else.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.constants import REVENUE_PERIOD_DAYS
from ..core.enums import ApprovalAction, ApprovalStatus, CourseStatus, RoleName, SortOrder
from ..core.exceptions import BusinessRuleException, NotFoundException, ValidationException
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import Booking
from ..models.consultant import Consultant
from ..models.course import Course
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.listing import ListingParams, Page
from .base import BaseService
from .consultant_service import ConsultantService
from .course_service import CourseService

logger = logging.getLogger(__name__)

DASHBOARD_WINDOW_DAYS = 30
POPULAR_COURSES_LIMIT = 5
TOP_EARNERS_LIMIT = 10


def _money(value: Any) -> Decimal:
    return Decimal(str(value or 0))


class AdminService(BaseService):
    def __init__(
        self,
        db: Session,
        consultant_service: Optional[ConsultantService] = None,
        course_service: Optional[CourseService] = None,
    ):
        super().__init__(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.enrollment_repository = RepositoryFactory.create_enrollment_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)
        self.service_repository = RepositoryFactory.create_service_repository(db)
        self.consultant_repository = RepositoryFactory.create_consultant_repository(db)
        self.consultant_service = consultant_service or ConsultantService(db)
        self.course_service = course_service or CourseService(db)

    def _load_user(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id, load_relationships=False)
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user

    @BaseService.measure_operation("admin.dashboard")
    def get_dashboard(self) -> Dict[str, Any]:
        """Platform totals, trailing thirty-day activity and revenue."""
        since = utc_now() - timedelta(days=DASHBOARD_WINDOW_DAYS)

        consultation_revenue = _money(self.booking_repository.completed_revenue_since(since))
        course_revenue = _money(self.enrollment_repository.revenue_since(since))

        return {
            "overview": {
                "total_users": self.user_repository.count(),
                "total_consultants": self.consultant_repository.count(),
                "total_courses": self.course_repository.count(),
                "total_services": self.service_repository.count(),
                "total_consultations": self.booking_repository.count(),
                "total_enrollments": self.enrollment_repository.count(),
                "recent_users": self.user_repository.count_created_since(since),
                "recent_consultations": self.booking_repository.count_created_since(since),
                "recent_enrollments": self.enrollment_repository.count_created_since(since),
                "pending_consultants": self.consultant_repository.count(
                    approval_status=ApprovalStatus.PENDING.value
                ),
            },
            "revenue": {
                "consultation_revenue": consultation_revenue,
                "course_revenue": course_revenue,
                "total_revenue": consultation_revenue + course_revenue,
            },
            "popular_courses": self.course_repository.most_enrolled(POPULAR_COURSES_LIMIT),
            "users_by_role": self.user_repository.count_by_role(),
            "consultation_status": self.booking_repository.status_distribution(),
        }

    # Users

    @BaseService.measure_operation("admin.list_users")
    def list_users(self, params: ListingParams) -> Page[User]:
        return self.user_repository.list_users(params)

    @BaseService.measure_operation("admin.set_user_active")
    def set_user_active(self, admin: User, user_id: str, is_active: bool) -> User:
        if admin.id == user_id and not is_active:
            raise BusinessRuleException("You cannot deactivate your own account")
        with self.transaction():
            user = self._load_user(user_id)
            user.is_active = is_active
            self.user_repository.flush()
        self.logger.info(
            f"Admin {admin.id} {'activated' if is_active else 'deactivated'} user {user_id}"
        )
        return user

    @BaseService.measure_operation("admin.change_user_role")
    def change_user_role(self, admin: User, user_id: str, role: RoleName) -> User:
        """
        Change a user's role.

        Promotion to consultant creates or re-activates an approved
        consultant profile; moving away from consultant deactivates it.
        """
        role = RoleName(role)
        if admin.id == user_id and role is not RoleName.ADMIN:
            raise BusinessRuleException("You cannot change your own role")

        with self.transaction():
            user = self._load_user(user_id)
            previous = user.role
            user.role = role.value
            if role is RoleName.CONSULTANT:
                self.consultant_service.ensure_profile_for_role(user)
            elif previous == RoleName.CONSULTANT.value:
                profile = self.consultant_repository.get_by_user_id(user.id)
                if profile is not None:
                    profile.is_active = False
            self.user_repository.flush()

        self.logger.info(f"Admin {admin.id} changed role of user {user_id}: {previous} -> {role.value}")
        return user

    # Consultants

    @BaseService.measure_operation("admin.pending_consultants")
    def list_pending_consultants(self, params: ListingParams) -> Page[Consultant]:
        return self.consultant_service.list_pending(params)

    def review_consultant(
        self, consultant_id: str, action: ApprovalAction, reason: Optional[str] = None
    ) -> Consultant:
        return self.consultant_service.review(consultant_id, action, reason)

    # Courses

    @BaseService.measure_operation("admin.list_courses")
    def list_courses(self, params: ListingParams) -> Page[Course]:
        return self.course_repository.list_any(params)

    def set_course_status(self, course_id: str, status: CourseStatus) -> Course:
        return self.course_service.set_status(course_id, status)

    # Bookings

    @BaseService.measure_operation("admin.list_bookings")
    def list_bookings(self, params: ListingParams) -> Page[Booking]:
        """Every booking of either kind, newest appointment first unless asked otherwise."""
        if params.sort_by is None:
            params.sort_by = "scheduledDate"
            params.sort_order = params.sort_order or SortOrder.DESC
        return self.booking_repository.list_all(params)

    # Analytics

    @BaseService.measure_operation("admin.revenue_analytics")
    def get_revenue_analytics(self, period: str = "30d") -> Dict[str, Any]:
        """
        Revenue over the requested period, bucketed per day.

        Consultation revenue counts completed bookings by completion
        time; course revenue counts enrollments by enrollment time.

        Raises:
            ValidationException: Unknown period key
        """
        if period not in REVENUE_PERIOD_DAYS:
            raise ValidationException(
                f"Period must be one of: {', '.join(REVENUE_PERIOD_DAYS)}",
                code="INVALID_PERIOD",
                field="period",
            )
        end = utc_now()
        start = end - timedelta(days=REVENUE_PERIOD_DAYS[period])

        buckets: Dict[date, Dict[str, Any]] = defaultdict(
            lambda: {
                "consultation_revenue": Decimal("0"),
                "consultation_count": 0,
                "course_revenue": Decimal("0"),
                "enrollment_count": 0,
            }
        )
        for booking in self.booking_repository.completed_bookings_since(start):
            bucket = buckets[ensure_utc(booking.completed_at).date()]
            bucket["consultation_revenue"] += _money(booking.amount)
            bucket["consultation_count"] += 1
        for enrollment in self.enrollment_repository.enrollments_since(start):
            bucket = buckets[ensure_utc(enrollment.enrolled_at).date()]
            bucket["course_revenue"] += _money(enrollment.amount_paid)
            bucket["enrollment_count"] += 1

        daily = [{"date": day, **values} for day, values in sorted(buckets.items())]
        consultation_total = sum((row["consultation_revenue"] for row in daily), Decimal("0"))
        course_total = sum((row["course_revenue"] for row in daily), Decimal("0"))

        return {
            "period": {"key": period, "start": start, "end": end},
            "totals": {
                "consultation_revenue": consultation_total,
                "course_revenue": course_total,
                "total_revenue": consultation_total + course_total,
            },
            "daily": daily,
            "top_consultants": [
                {
                    "consultant_id": consultant_id,
                    "name": name,
                    "total_revenue": _money(revenue),
                    "consultation_count": int(count),
                }
                for consultant_id, name, revenue, count in self.booking_repository.top_consultants_by_revenue(
                    start, TOP_EARNERS_LIMIT
                )
            ],
            "top_courses": [
                {
                    "course_id": course_id,
                    "title": title,
                    "total_revenue": _money(revenue),
                    "enrollment_count": int(count),
                }
                for course_id, title, revenue, count in self.enrollment_repository.top_courses_by_revenue(
                    start, TOP_EARNERS_LIMIT
                )
            ],
        }
