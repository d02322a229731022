from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Mapping

from ..core.constants import MAX_RATING, MIN_RATING


def round_rating(value: Decimal | float) -> Decimal:
    """Round half-up to one decimal place."""
    return Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def mean_rating(rating_sum: int | float, count: int) -> Decimal:
    """Arithmetic mean of ``count`` ratings totalling ``rating_sum``; 0.0 when empty."""
    if count <= 0:
        return Decimal("0.0")
    return round_rating(Decimal(str(rating_sum)) / Decimal(count))


def mean_of(ratings: Iterable[int]) -> Decimal:
    values = [int(r) for r in ratings if r]
    return mean_rating(sum(values), len(values))


def distribution_from_histogram(histogram: Mapping[int, int]) -> Dict[str, int]:
    """Dense {"1".."5": n} map from a sparse star -> count histogram."""
    return {
        str(star): int(histogram.get(star, 0)) for star in range(MIN_RATING, MAX_RATING + 1)
    }


def stats_from_histogram(histogram: Mapping[int, int]) -> tuple[Decimal, int]:
    count = sum(histogram.values())
    total = sum(star * n for star, n in histogram.items())
    return mean_rating(total, count), count
