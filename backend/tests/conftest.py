# backend/tests/conftest.py
"""
Pytest configuration.

Every test gets a fresh in-memory SQLite database. The API client runs
against the same session through a ``get_db`` override, so rows created
by fixtures are visible to requests and vice versa.
"""

import os

# Set before any app import so settings pick it up
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies.database import get_db
from app.auth import create_access_token
from app.core.constants import WEEKDAYS
from app.core.enums import ApprovalStatus, BookingKind, BookingStatus, CourseStatus, RoleName
from app.database import Base
from app.main import app
from app.models.booking import Booking
from app.models.consultant import Consultant
from app.models.course import Course
from app.models.service import Service
from app.models.user import User

ALL_WEEKDAYS = {day: True for day in WEEKDAYS}


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a new database session for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    # Don't use context manager - the lifespan would touch the configured database
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(role: RoleName = RoleName.STUDENT, email: Optional[str] = None, **kwargs) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role.value}{counter['n']}@example.com",
            full_name=kwargs.pop("full_name", f"Test {role.value.title()} {counter['n']}"),
            role=role.value,
            is_active=kwargs.pop("is_active", True),
            **kwargs,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_consultant(db: Session, make_user) -> Callable[..., Consultant]:
    def _make(
        user: Optional[User] = None,
        approval_status: ApprovalStatus = ApprovalStatus.APPROVED,
        specialization: str = "Career coaching",
    ) -> Consultant:
        user = user or make_user(RoleName.CONSULTANT)
        approved = approval_status is ApprovalStatus.APPROVED
        profile = Consultant(
            user_id=user.id,
            name=user.full_name,
            email=user.email,
            specialization=specialization,
            bio="Ten years helping people change careers.",
            approval_status=approval_status.value,
            is_active=approved,
            approved_at=datetime.now(timezone.utc) if approved else None,
        )
        db.add(profile)
        db.commit()
        return profile

    return _make


@pytest.fixture
def make_service(db: Session) -> Callable[..., Service]:
    def _make(consultant: Consultant, **overrides) -> Service:
        values = {
            "title": "Career strategy session",
            "description": "A focused hour on your next career move.",
            "price": Decimal("100.00"),
            "duration": 60,
            "availability": dict(ALL_WEEKDAYS),
            "time_slots": [],
        }
        values.update(overrides)
        service = Service(consultant_id=consultant.id, **values)
        db.add(service)
        db.commit()
        return service

    return _make


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    def _make(
        client_user: User,
        service: Service,
        start: datetime,
        status: BookingStatus = BookingStatus.SCHEDULED,
        kind: BookingKind = BookingKind.CONSULTATION,
        duration: Optional[int] = None,
        **kwargs,
    ) -> Booking:
        minutes = duration or service.duration
        booking = Booking(
            kind=kind.value,
            client_id=client_user.id,
            consultant_id=service.consultant_id,
            service_id=service.id,
            scheduled_at=start,
            end_at=start + timedelta(minutes=minutes),
            duration_minutes=minutes,
            time_slot=start.strftime("%H:%M"),
            amount=service.price,
            status=status.value,
            **kwargs,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def make_course(db: Session) -> Callable[..., Course]:
    def _make(instructor: User, status: CourseStatus = CourseStatus.PUBLISHED, **overrides) -> Course:
        values = {
            "title": "Practical Python",
            "description": "Learn to write practical Python programs from scratch.",
            "short_description": "Python from the ground up",
            "level": "beginner",
            "language": "english",
            "price": Decimal("49.00"),
            "duration_hours": 10,
            "objectives": ["Write scripts", "Use the standard library", "Test your code"],
            "lessons": [
                {"id": "l1", "title": "Getting started", "durationMinutes": 20},
                {"id": "l2", "title": "Functions", "durationMinutes": 30},
            ],
        }
        values.update(overrides)
        course = Course(instructor_id=instructor.id, **values)
        course.set_status(status)
        db.add(course)
        db.commit()
        return course

    return _make


# ============================================================================
# Standard actors
# ============================================================================


@pytest.fixture
def student(make_user) -> User:
    return make_user(RoleName.STUDENT, email="student@example.com", full_name="Sam Student")


@pytest.fixture
def other_student(make_user) -> User:
    return make_user(RoleName.STUDENT, email="other@example.com", full_name="Olive Other")


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user(RoleName.ADMIN, email="admin@example.com", full_name="Ada Admin")


@pytest.fixture
def instructor(make_user) -> User:
    return make_user(RoleName.INSTRUCTOR, email="instructor@example.com", full_name="Ivy Instructor")


@pytest.fixture
def consultant(make_consultant, make_user) -> Consultant:
    user = make_user(RoleName.CONSULTANT, email="consultant@example.com", full_name="Cora Consultant")
    return make_consultant(user)


@pytest.fixture
def service(make_service, consultant: Consultant) -> Service:
    return make_service(consultant)


@pytest.fixture
def published_course(make_course, instructor: User) -> Course:
    return make_course(instructor)


@pytest.fixture
def future_day() -> datetime:
    """Midnight UTC a week from now."""
    day = (datetime.now(timezone.utc) + timedelta(days=7)).date()
    return datetime.combine(day, time(0, 0), tzinfo=timezone.utc)


@pytest.fixture
def at(future_day: datetime) -> Callable[[int, int], datetime]:
    """``at(10, 30)`` is 10:30 UTC on ``future_day``."""

    def _at(hour: int, minute: int = 0) -> datetime:
        return future_day + timedelta(hours=hour, minutes=minute)

    return _at


def _auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_student(student: User) -> Dict[str, str]:
    return _auth_headers(student)


@pytest.fixture
def auth_headers_other_student(other_student: User) -> Dict[str, str]:
    return _auth_headers(other_student)


@pytest.fixture
def auth_headers_admin(admin_user: User) -> Dict[str, str]:
    return _auth_headers(admin_user)


@pytest.fixture
def auth_headers_instructor(instructor: User) -> Dict[str, str]:
    return _auth_headers(instructor)


@pytest.fixture
def auth_headers_consultant(consultant: Consultant) -> Dict[str, str]:
    return _auth_headers(consultant.user)


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Bearer headers for any user: ``auth_headers(user)``."""
    return _auth_headers
