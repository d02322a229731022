# backend/app/services/rating_service.py
"""
Rating aggregation for consultants, services and courses.

Aggregates are recomputed from the stored individual ratings rather than
adjusted incrementally, so a missed or repeated recompute never drifts:
the next successful run restores the exact mean.
"""

from decimal import Decimal
import logging
from typing import Callable, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import DomainException, NotFoundException, RepositoryException
from ..models.booking import Booking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from .base import BaseService
from .ratings_math import distribution_from_histogram, mean_rating, stats_from_histogram

logger = logging.getLogger(__name__)


class RatingService(BaseService):
    """Recomputes denormalized rating aggregates."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.enrollment_repository = RepositoryFactory.create_enrollment_repository(db)
        self.consultant_repository = RepositoryFactory.create_consultant_repository(db)
        self.service_repository = RepositoryFactory.create_service_repository(db)
        self.course_repository = RepositoryFactory.create_course_repository(db)

    @BaseService.measure_operation("recompute_consultant_rating")
    def recompute_consultant_rating(self, consultant_id: str) -> Tuple[Decimal, int]:
        with self.transaction():
            rating_sum, count = self.booking_repository.rating_stats_for_consultant(consultant_id)
            average = mean_rating(rating_sum, count)
            if not self.consultant_repository.update(
                consultant_id, rating=average, total_ratings=count
            ):
                raise NotFoundException("Consultant not found")
        self.logger.info(f"Consultant {consultant_id} rating now {average} over {count} ratings")
        return average, count

    @BaseService.measure_operation("recompute_service_rating")
    def recompute_service_rating(self, service_id: str) -> Tuple[Decimal, int]:
        with self.transaction():
            histogram = self.booking_repository.rating_histogram_for_service(service_id)
            average, count = stats_from_histogram(histogram)
            if not self.service_repository.update(
                service_id,
                rating_average=average,
                rating_count=count,
                rating_distribution=distribution_from_histogram(histogram),
            ):
                raise NotFoundException("Service not found")
        return average, count

    @BaseService.measure_operation("recompute_course_rating")
    def recompute_course_rating(self, course_id: str) -> Tuple[Decimal, int]:
        with self.transaction():
            rating_sum, count = self.enrollment_repository.rating_stats_for_course(course_id)
            average = mean_rating(rating_sum, count)
            if not self.course_repository.update(
                course_id, rating_average=average, rating_count=count
            ):
                raise NotFoundException("Course not found")
        return average, count

    def refresh_after_feedback(self, booking: Booking) -> None:
        """
        Best-effort recompute of the consultant and service aggregates.

        Feedback is already committed when this runs; a failure here is
        logged and counted, never surfaced to the caller.
        """
        self._best_effort("consultant", self.recompute_consultant_rating, booking.consultant_id)
        self._best_effort("service", self.recompute_service_rating, booking.service_id)

    def refresh_course(self, course_id: str) -> None:
        self._best_effort("course", self.recompute_course_rating, course_id)

    def _best_effort(
        self, target: str, recompute: Callable[[str], Tuple[Decimal, int]], entity_id: Optional[str]
    ) -> None:
        if not entity_id:
            return
        try:
            recompute(entity_id)
        except (DomainException, RepositoryException, SQLAlchemyError) as e:
            self.logger.error(f"Failed to update {target} rating for {entity_id}: {str(e)}")
            prometheus_metrics.record_rating_failure(target)
