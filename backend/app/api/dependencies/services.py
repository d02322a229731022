# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
bound to the request's database session.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.admin_service import AdminService
from ...services.booking_service import BookingService
from ...services.catalog_service import CatalogService
from ...services.category_service import CategoryService
from ...services.conflict_checker import ConflictChecker
from ...services.consultant_service import ConsultantService
from ...services.course_service import CourseService
from ...services.enrollment_service import EnrollmentService
from ...services.partner_service import PartnerService
from ...services.rating_service import RatingService
from .database import get_db

logger = logging.getLogger(__name__)


def get_conflict_checker(db: Session = Depends(get_db)) -> ConflictChecker:
    """
    Get conflict checker service instance.

    Args:
        db: Database session

    Returns:
        ConflictChecker instance
    """
    return ConflictChecker(db)


def get_rating_service(db: Session = Depends(get_db)) -> RatingService:
    return RatingService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
    rating_service: RatingService = Depends(get_rating_service),
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Args:
        db: Database session
        conflict_checker: Calendar overlap checks
        rating_service: Rating recomputation after feedback

    Returns:
        BookingService instance
    """
    return BookingService(db, conflict_checker=conflict_checker, rating_service=rating_service)


def get_enrollment_service(
    db: Session = Depends(get_db),
    rating_service: RatingService = Depends(get_rating_service),
) -> EnrollmentService:
    return EnrollmentService(db, rating_service=rating_service)


def get_course_service(db: Session = Depends(get_db)) -> CourseService:
    return CourseService(db)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_consultant_service(db: Session = Depends(get_db)) -> ConsultantService:
    return ConsultantService(db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_partner_service(db: Session = Depends(get_db)) -> PartnerService:
    return PartnerService(db)


def get_admin_service(
    db: Session = Depends(get_db),
    consultant_service: ConsultantService = Depends(get_consultant_service),
    course_service: CourseService = Depends(get_course_service),
) -> AdminService:
    return AdminService(db, consultant_service=consultant_service, course_service=course_service)
