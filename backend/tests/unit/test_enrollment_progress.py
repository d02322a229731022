import pytest

from app.models.enrollment import Enrollment


def _with_lessons(count):
    return Enrollment(completed_lessons=[{"lessonId": f"l{i}"} for i in range(count)])


@pytest.mark.parametrize(
    "done,total,expected",
    [
        (1, 8, 13),  # 12.5 rounds half-up
        (3, 8, 38),  # 37.5
        (1, 3, 33),
        (2, 3, 67),
        (4, 4, 100),
        (0, 5, 0),
    ],
)
def test_progress_rounds_half_up(done, total, expected):
    assert _with_lessons(done).recompute_progress(total) == expected


def test_course_without_lessons_has_no_progress():
    assert _with_lessons(2).recompute_progress(0) == 0
