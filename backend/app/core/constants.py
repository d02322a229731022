"""Application-wide constants for the SkillBridge platform."""

from __future__ import annotations

BRAND_NAME = "SkillBridge"
METRICS_NAMESPACE = "skillbridge"
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Consultations, service bookings and courses for the SkillBridge marketplace"
API_VERSION = "1.0.0"

# Booking duration constraints (minutes)
MIN_BOOKING_DURATION = 15
MAX_BOOKING_DURATION = 480

# Text constraints
MAX_NOTES_LENGTH = 1000
MAX_SPECIAL_REQUIREMENTS_LENGTH = 500
MAX_REASON_LENGTH = 500
MAX_FEEDBACK_LENGTH = 1000
MAX_REVIEW_LENGTH = 1000
MAX_TIME_SLOT_LENGTH = 50

# Rating bounds
MIN_RATING = 1
MAX_RATING = 5

DEFAULT_RESCHEDULE_REASON = "No reason provided"

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_COURSE_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100

# Course catalogue constraints
MIN_COURSE_OBJECTIVES = 3
MAX_COURSE_OBJECTIVES = 20
MIN_COURSE_HOURS = 1
MAX_COURSE_HOURS = 1000

CURRENCY_USD = "USD"

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_WEEKDAY_AVAILABILITY = {
    "monday": True,
    "tuesday": True,
    "wednesday": True,
    "thursday": True,
    "friday": True,
    "saturday": False,
    "sunday": False,
}

REVENUE_PERIOD_DAYS = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "1y": 365,
}
