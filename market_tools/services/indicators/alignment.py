"""
Series Aligner

Pairs each indicator output with the calendar date of the close it was computed
on. An indicator with warm-up ``w`` starts at input index ``w``, so output ``j``
belongs to ``dates[w + j]``.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Generic, Sequence, TypeVar

from market_tools.services.base import AlignmentMismatch

T = TypeVar("T")


@dataclass(frozen=True)
class AlignedPoint(Generic[T]):
    date: date
    value: T


def align(dates: Sequence[date], series: Sequence[Any], warmup: int) -> list[AlignedPoint]:
    """
    Align an indicator series onto its dates, in chronological order.

    Raises:
        AlignmentMismatch: if ``len(dates) - warmup != len(series)``. The warm-up
            table and the calculations disagree; this is never coerced.
    """
    if warmup < 0 or len(dates) - warmup != len(series):
        raise AlignmentMismatch(
            "SeriesAligner",
            f"{len(series)} values cannot follow a warm-up of {warmup} over {len(dates)} dates",
            details={"dates": len(dates), "values": len(series), "warmup": warmup},
        )

    return [AlignedPoint(day, series[j]) for j, day in enumerate(dates[warmup:])]
