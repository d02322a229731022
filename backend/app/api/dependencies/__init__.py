# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_user, get_optional_user, require_admin, require_roles
from .database import get_db
from .services import (
    get_admin_service,
    get_booking_service,
    get_catalog_service,
    get_category_service,
    get_conflict_checker,
    get_consultant_service,
    get_course_service,
    get_enrollment_service,
    get_partner_service,
    get_rating_service,
)

__all__ = [
    # Auth
    "get_current_user",
    "get_optional_user",
    "require_admin",
    "require_roles",
    # Database
    "get_db",
    # Services
    "get_admin_service",
    "get_booking_service",
    "get_catalog_service",
    "get_category_service",
    "get_conflict_checker",
    "get_consultant_service",
    "get_course_service",
    "get_enrollment_service",
    "get_partner_service",
    "get_rating_service",
]
