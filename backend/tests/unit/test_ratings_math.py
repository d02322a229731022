from decimal import Decimal

from app.services.ratings_math import (
    distribution_from_histogram,
    mean_of,
    mean_rating,
    round_rating,
    stats_from_histogram,
)


def test_mean_of_no_ratings_is_zero():
    assert mean_rating(0, 0) == Decimal("0.0")
    assert mean_of([]) == Decimal("0.0")


def test_mean_of_four_and_five_is_four_point_five():
    assert mean_of([4, 5]) == Decimal("4.5")


def test_rounds_half_up_to_one_decimal():
    assert round_rating(Decimal("4.25")) == Decimal("4.3")
    assert round_rating(Decimal("4.24")) == Decimal("4.2")
    # 13 / 3 = 4.333...
    assert mean_rating(13, 3) == Decimal("4.3")
    # 14 / 3 = 4.666...
    assert mean_rating(14, 3) == Decimal("4.7")


def test_mean_ignores_missing_ratings():
    assert mean_of([5, None, 3]) == Decimal("4.0")


def test_distribution_is_dense():
    assert distribution_from_histogram({5: 2, 3: 1}) == {"1": 0, "2": 0, "3": 1, "4": 0, "5": 2}


def test_stats_from_histogram():
    average, count = stats_from_histogram({5: 2, 3: 1})
    assert count == 3
    assert average == Decimal("4.3")


def test_stats_from_empty_histogram():
    assert stats_from_histogram({}) == (Decimal("0.0"), 0)
