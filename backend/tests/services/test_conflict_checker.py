from datetime import datetime, timedelta, timezone

import pytest

from app.core.enums import BookingStatus
from app.core.exceptions import BookingConflictException, BusinessRuleException
from app.services.conflict_checker import ConflictChecker, intervals_overlap


@pytest.fixture
def checker(db):
    return ConflictChecker(db)


@pytest.fixture
def ten_oclock(make_booking, student, service, at):
    """A live 60-minute booking from 10:00 to 11:00."""
    return make_booking(student, service, at(10))


class TestIntervalsOverlap:
    def test_back_to_back_intervals_do_not_overlap(self, at):
        assert not intervals_overlap(at(10), at(11), at(11), at(12))

    def test_partial_overlap(self, at):
        assert intervals_overlap(at(10), at(11), at(10, 30), at(11, 30))

    def test_containment(self, at):
        assert intervals_overlap(at(9), at(12), at(10), at(11))


class TestFindConflict:
    def test_overlapping_start_conflicts(self, checker, consultant, ten_oclock, at):
        conflict = checker.find_conflict(consultant.id, at(10, 30), 60)
        assert conflict is not None
        assert conflict.id == ten_oclock.id

    def test_start_at_previous_end_is_free(self, checker, consultant, ten_oclock, at):
        assert checker.is_available(consultant.id, at(11), 60)

    def test_end_at_existing_start_is_free(self, checker, consultant, ten_oclock, at):
        assert checker.is_available(consultant.id, at(9), 60)

    def test_terminal_bookings_free_the_slot(
        self, checker, consultant, make_booking, student, service, at
    ):
        make_booking(student, service, at(13), status=BookingStatus.COMPLETED)
        make_booking(student, service, at(14), status=BookingStatus.CANCELLED)
        make_booking(student, service, at(15), status=BookingStatus.NO_SHOW)
        assert checker.is_available(consultant.id, at(13), 60)
        assert checker.is_available(consultant.id, at(14), 60)
        assert checker.is_available(consultant.id, at(15), 60)

    @pytest.mark.parametrize("status", [BookingStatus.CONFIRMED, BookingStatus.RESCHEDULED])
    def test_live_bookings_block(
        self, checker, consultant, make_booking, student, service, at, status
    ):
        make_booking(student, service, at(14), status=status)
        assert not checker.is_available(consultant.id, at(14, 30), 30)

    def test_excluded_booking_is_ignored(self, checker, consultant, ten_oclock, at):
        assert checker.is_available(
            consultant.id, at(10, 30), 60, exclude_booking_id=ten_oclock.id
        )

    def test_other_consultants_do_not_conflict(
        self, checker, make_consultant, ten_oclock, at
    ):
        other = make_consultant()
        assert checker.is_available(other.id, at(10), 60)

    def test_ensure_available_raises_conflict(self, checker, consultant, ten_oclock, at):
        with pytest.raises(BookingConflictException) as exc_info:
            checker.ensure_available(consultant.id, at(10, 30), 30)
        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "BOOKING_CONFLICT"


class TestValidateFuture:
    def test_past_start_rejected(self):
        with pytest.raises(BusinessRuleException) as exc_info:
            ConflictChecker.validate_future(datetime.now(timezone.utc) - timedelta(minutes=1))
        assert exc_info.value.code == "DATE_NOT_IN_FUTURE"

    def test_now_is_not_future(self):
        now = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
        with pytest.raises(BusinessRuleException):
            ConflictChecker.validate_future(now, now=now)

    def test_naive_start_treated_as_utc(self):
        now = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
        ConflictChecker.validate_future(datetime(2030, 1, 1, 12, 30), now=now)


class TestAvailableSlots:
    def test_day_grid_runs_from_nine_to_five_every_half_hour(self, future_day):
        grid = ConflictChecker.day_grid(future_day.date())
        assert len(grid) == 16
        assert grid[0].hour == 9 and grid[0].minute == 0
        assert grid[-1].hour == 16 and grid[-1].minute == 30

    def test_booked_interval_is_removed_from_slots(
        self, checker, consultant, ten_oclock, future_day
    ):
        result = checker.get_available_slots(consultant.id, future_day.date(), 60)
        slots = result["available_slots"]
        assert "09:00" in slots
        assert "09:30" not in slots
        assert "10:00" not in slots
        assert "10:30" not in slots
        assert "11:00" in slots
        # A 60-minute session must end by closing time
        assert slots[-1] == "16:00"
        assert result["booked_consultations"] == [{"time": "10:00", "duration": 60}]

    def test_service_weekday_flags_apply(
        self, checker, consultant, make_service, future_day
    ):
        weekday = future_day.strftime("%A").lower()
        closed = make_service(consultant, title="Closed today", availability={weekday: False})
        result = checker.get_available_slots(
            consultant.id, future_day.date(), closed.duration, service=closed
        )
        assert result["available_slots"] == []

    def test_service_time_windows_apply(self, checker, consultant, make_service, future_day):
        windowed = make_service(
            consultant,
            title="Mornings only",
            duration=30,
            time_slots=[{"startTime": "09:00", "endTime": "10:00"}],
        )
        result = checker.get_available_slots(
            consultant.id, future_day.date(), 30, service=windowed
        )
        assert result["available_slots"] == ["09:00", "09:30"]
