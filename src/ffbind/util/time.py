"""Time base constants and timestamp conversion."""

from __future__ import annotations

from fractions import Fraction

from ffbind.util.mathematics import INT64_MIN

TIME_BASE = 1_000_000
TIME_BASE_Q = Fraction(1, TIME_BASE)

# Marks an undefined timestamp (AV_NOPTS_VALUE)
NOPTS_VALUE = INT64_MIN


def to_seconds(timestamp: int | None, time_base: Fraction | None) -> float | None:
    """Convert a timestamp in time_base units to seconds.

    Returns:
        Seconds as float, or None when either value is missing or the
        timestamp is NOPTS_VALUE.
    """
    if timestamp is None or time_base is None or timestamp == NOPTS_VALUE:
        return None
    return float(timestamp * time_base)


def from_seconds(seconds: float, time_base: Fraction) -> int:
    """Convert seconds to a timestamp in time_base units (rounded)."""
    return round(Fraction(seconds) / time_base)
