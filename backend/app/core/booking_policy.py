# backend/app/core/booking_policy.py
"""
Status lifecycle rules for bookings and enrollments.

Pure lookup tables plus the small helpers services use to validate a
requested change. Nothing here touches the database.
"""

from typing import Dict, FrozenSet, Tuple

from .enums import BookingActor, BookingStatus, EnrollmentStatus

NON_TERMINAL_BOOKING_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.SCHEDULED, BookingStatus.CONFIRMED, BookingStatus.RESCHEDULED}
)
TERMINAL_BOOKING_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
)
RESCHEDULABLE_STATUSES = NON_TERMINAL_BOOKING_STATUSES

# Targets reachable through the status-update operation.
STATUS_UPDATE_TARGETS: FrozenSet[BookingStatus] = frozenset(
    {
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
        BookingStatus.COMPLETED,
        BookingStatus.NO_SHOW,
    }
)

_ANYONE = frozenset({BookingActor.CLIENT, BookingActor.CONSULTANT, BookingActor.ADMIN})
_PROVIDER = frozenset({BookingActor.CONSULTANT, BookingActor.ADMIN})
_REQUESTER = frozenset({BookingActor.CLIENT, BookingActor.ADMIN})

BOOKING_TRANSITIONS: Dict[BookingStatus, Dict[BookingStatus, FrozenSet[BookingActor]]] = {
    BookingStatus.SCHEDULED: {
        BookingStatus.CONFIRMED: _PROVIDER,
        BookingStatus.CANCELLED: _ANYONE,
        BookingStatus.RESCHEDULED: _REQUESTER,
    },
    BookingStatus.CONFIRMED: {
        BookingStatus.COMPLETED: _PROVIDER,
        BookingStatus.CANCELLED: _ANYONE,
        BookingStatus.NO_SHOW: _PROVIDER,
        BookingStatus.RESCHEDULED: _REQUESTER,
    },
    BookingStatus.RESCHEDULED: {
        BookingStatus.CONFIRMED: _PROVIDER,
        BookingStatus.CANCELLED: _ANYONE,
        BookingStatus.RESCHEDULED: _REQUESTER,
    },
    BookingStatus.COMPLETED: {},
    BookingStatus.CANCELLED: {},
    BookingStatus.NO_SHOW: {},
}


def allowed_booking_targets(current: BookingStatus) -> Tuple[BookingStatus, ...]:
    return tuple(BOOKING_TRANSITIONS.get(BookingStatus(current), {}).keys())


def is_legal_booking_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return BookingStatus(target) in BOOKING_TRANSITIONS.get(BookingStatus(current), {})


def actors_for_target(target: BookingStatus) -> FrozenSet[BookingActor]:
    """Actors allowed to move a booking into ``target`` from any state."""
    actors: FrozenSet[BookingActor] = frozenset()
    for targets in BOOKING_TRANSITIONS.values():
        actors = actors | targets.get(BookingStatus(target), frozenset())
    return actors


def is_terminal(status: BookingStatus) -> bool:
    return BookingStatus(status) in TERMINAL_BOOKING_STATUSES


ACTIVE_ENROLLMENT_STATUSES: FrozenSet[EnrollmentStatus] = frozenset(
    {EnrollmentStatus.ACTIVE, EnrollmentStatus.COMPLETED}
)

ENROLLMENT_TRANSITIONS: Dict[EnrollmentStatus, FrozenSet[EnrollmentStatus]] = {
    EnrollmentStatus.ACTIVE: frozenset(
        {
            EnrollmentStatus.COMPLETED,
            EnrollmentStatus.CANCELLED,
            EnrollmentStatus.PAUSED,
            EnrollmentStatus.EXPIRED,
        }
    ),
    EnrollmentStatus.PAUSED: frozenset(
        {EnrollmentStatus.ACTIVE, EnrollmentStatus.CANCELLED, EnrollmentStatus.EXPIRED}
    ),
    EnrollmentStatus.COMPLETED: frozenset(),
    EnrollmentStatus.CANCELLED: frozenset(),
    EnrollmentStatus.EXPIRED: frozenset(),
}

# Changes the enrolled student may request on their own enrollment.
SELF_SERVICE_ENROLLMENT_TARGETS: FrozenSet[EnrollmentStatus] = frozenset(
    {EnrollmentStatus.ACTIVE, EnrollmentStatus.PAUSED, EnrollmentStatus.CANCELLED}
)


def is_legal_enrollment_transition(current: EnrollmentStatus, target: EnrollmentStatus) -> bool:
    return EnrollmentStatus(target) in ENROLLMENT_TRANSITIONS.get(EnrollmentStatus(current), frozenset())
