import pytest

from app.core.booking_policy import (
    BOOKING_TRANSITIONS,
    actors_for_target,
    allowed_booking_targets,
    is_legal_booking_transition,
    is_legal_enrollment_transition,
    is_terminal,
)
from app.core.enums import BookingActor, BookingStatus, EnrollmentStatus


class TestBookingTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (BookingStatus.SCHEDULED, BookingStatus.CONFIRMED),
            (BookingStatus.SCHEDULED, BookingStatus.CANCELLED),
            (BookingStatus.SCHEDULED, BookingStatus.RESCHEDULED),
            (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
            (BookingStatus.CONFIRMED, BookingStatus.NO_SHOW),
            (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
            (BookingStatus.RESCHEDULED, BookingStatus.CONFIRMED),
            (BookingStatus.RESCHEDULED, BookingStatus.RESCHEDULED),
        ],
    )
    def test_legal_transitions(self, current, target):
        assert is_legal_booking_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (BookingStatus.SCHEDULED, BookingStatus.COMPLETED),
            (BookingStatus.SCHEDULED, BookingStatus.NO_SHOW),
            (BookingStatus.RESCHEDULED, BookingStatus.COMPLETED),
            (BookingStatus.CONFIRMED, BookingStatus.SCHEDULED),
        ],
    )
    def test_illegal_transitions(self, current, target):
        assert not is_legal_booking_transition(current, target)

    @pytest.mark.parametrize(
        "terminal", [BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW]
    )
    def test_terminal_states_have_no_exits(self, terminal):
        assert is_terminal(terminal)
        assert allowed_booking_targets(terminal) == ()
        for target in BookingStatus:
            assert not is_legal_booking_transition(terminal, target)

    def test_every_status_has_an_entry(self):
        assert set(BOOKING_TRANSITIONS) == set(BookingStatus)

    def test_accepts_plain_strings(self):
        assert is_legal_booking_transition("confirmed", "no-show")


class TestActorsForTarget:
    def test_confirm_complete_and_no_show_are_provider_only(self):
        for target in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW):
            assert actors_for_target(target) == {BookingActor.CONSULTANT, BookingActor.ADMIN}

    def test_anyone_may_cancel(self):
        assert actors_for_target(BookingStatus.CANCELLED) == set(BookingActor)

    def test_reschedule_is_requester_only(self):
        assert actors_for_target(BookingStatus.RESCHEDULED) == {
            BookingActor.CLIENT,
            BookingActor.ADMIN,
        }

    def test_scheduled_is_not_a_target(self):
        assert actors_for_target(BookingStatus.SCHEDULED) == frozenset()


class TestEnrollmentTransitions:
    def test_active_can_pause_and_resume(self):
        assert is_legal_enrollment_transition(EnrollmentStatus.ACTIVE, EnrollmentStatus.PAUSED)
        assert is_legal_enrollment_transition(EnrollmentStatus.PAUSED, EnrollmentStatus.ACTIVE)

    def test_completed_is_final(self):
        for target in EnrollmentStatus:
            assert not is_legal_enrollment_transition(EnrollmentStatus.COMPLETED, target)

    def test_paused_cannot_complete(self):
        assert not is_legal_enrollment_transition(
            EnrollmentStatus.PAUSED, EnrollmentStatus.COMPLETED
        )
