# backend/app/repositories/factory.py
"""
Repository Factory for SkillBridge

Provides centralized creation of repository instances, ensuring consistent
initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .category_repository import CategoryRepository
    from .conflict_checker_repository import ConflictCheckerRepository
    from .consultant_repository import ConsultantRepository
    from .course_repository import CourseRepository
    from .enrollment_repository import EnrollmentRepository
    from .partner_repository import PartnerRepository
    from .service_repository import ServiceRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation so services never construct
    repositories with ad-hoc arguments.
    """

    @staticmethod
    def create_base_repository(db: Session, model) -> BaseRepository:
        """Create a generic base repository for any model."""
        return BaseRepository(db, model)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_conflict_checker_repository(db: Session) -> "ConflictCheckerRepository":
        """Create repository for conflict checking queries."""
        from .conflict_checker_repository import ConflictCheckerRepository

        return ConflictCheckerRepository(db)

    @staticmethod
    def create_consultant_repository(db: Session) -> "ConsultantRepository":
        """Create repository for consultant profiles."""
        from .consultant_repository import ConsultantRepository

        return ConsultantRepository(db)

    @staticmethod
    def create_course_repository(db: Session) -> "CourseRepository":
        """Create repository for courses."""
        from .course_repository import CourseRepository

        return CourseRepository(db)

    @staticmethod
    def create_enrollment_repository(db: Session) -> "EnrollmentRepository":
        """Create repository for enrollments."""
        from .enrollment_repository import EnrollmentRepository

        return EnrollmentRepository(db)

    @staticmethod
    def create_service_repository(db: Session) -> "ServiceRepository":
        """Create repository for marketplace services."""
        from .service_repository import ServiceRepository

        return ServiceRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for user accounts."""
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_category_repository(db: Session) -> "CategoryRepository":
        """Create repository for categories."""
        from .category_repository import CategoryRepository

        return CategoryRepository(db)

    @staticmethod
    def create_partner_repository(db: Session) -> "PartnerRepository":
        """Create repository for partners."""
        from .partner_repository import PartnerRepository

        return PartnerRepository(db)
