"""Admin dashboard and revenue analytics schemas."""

from datetime import date, datetime
from typing import Dict, List

from pydantic import Field

from .base import CamelModel, Money, RatingValue


class DashboardOverview(CamelModel):
    total_users: int
    total_consultants: int
    total_courses: int
    total_services: int
    total_consultations: int
    total_enrollments: int
    recent_users: int
    recent_consultations: int
    recent_enrollments: int
    pending_consultants: int


class DashboardRevenue(CamelModel):
    """Revenue over the trailing thirty days."""

    consultation_revenue: Money
    course_revenue: Money
    total_revenue: Money


class PopularCourse(CamelModel):
    id: str
    title: str
    enrollment_count: int
    rating_average: RatingValue
    price: Money


class DashboardData(CamelModel):
    overview: DashboardOverview
    revenue: DashboardRevenue
    popular_courses: List[PopularCourse]
    users_by_role: Dict[str, int] = Field(default_factory=dict)
    consultation_status: Dict[str, int] = Field(default_factory=dict)


class RevenueWindow(CamelModel):
    key: str
    start: datetime
    end: datetime


class DailyRevenue(CamelModel):
    date: date
    consultation_revenue: Money
    consultation_count: int
    course_revenue: Money
    enrollment_count: int


class TopConsultant(CamelModel):
    consultant_id: str
    name: str
    total_revenue: Money
    consultation_count: int


class TopCourse(CamelModel):
    course_id: str
    title: str
    total_revenue: Money
    enrollment_count: int


class RevenueTotals(CamelModel):
    consultation_revenue: Money
    course_revenue: Money
    total_revenue: Money


class RevenueAnalytics(CamelModel):
    period: RevenueWindow
    totals: RevenueTotals
    daily: List[DailyRevenue]
    top_consultants: List[TopConsultant]
    top_courses: List[TopCourse]
