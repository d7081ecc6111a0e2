"""Timestamp rescaling with FFmpeg rounding semantics.

Python integers are unbounded, so the 128-bit intermediate arithmetic
FFmpeg needs in av_rescale_rnd is exact here.
"""

from __future__ import annotations

from enum import IntFlag
from fractions import Fraction

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Rounding(IntFlag):
    """Rounding modes accepted by rescale_rnd (AVRounding)."""

    ZERO = 0
    INF = 1
    DOWN = 2
    UP = 3
    NEAR_INF = 5
    PASS_MINMAX = 8192


_VALID_MODES = {
    Rounding.ZERO,
    Rounding.INF,
    Rounding.DOWN,
    Rounding.UP,
    Rounding.NEAR_INF,
}


def rescale_rnd(a: int, b: int, c: int, rounding: Rounding = Rounding.NEAR_INF) -> int:
    """Compute a * b / c with the given rounding.

    Args:
        a: Value to rescale.
        b: Multiplier (must be >= 0).
        c: Divisor (must be > 0).
        rounding: Rounding mode, optionally combined with PASS_MINMAX.

    Returns:
        The rescaled integer.

    Raises:
        ValueError: If b is negative, c is not positive, or the mode is invalid.
    """
    rounding = Rounding(rounding)
    if int(rounding) & int(Rounding.PASS_MINMAX):
        if a in (INT64_MIN, INT64_MAX):
            return a
        rounding = Rounding(int(rounding) & ~int(Rounding.PASS_MINMAX))

    if c <= 0 or b < 0:
        raise ValueError(f"Invalid rescale operands b={b} c={c}")
    if rounding not in _VALID_MODES:
        raise ValueError(f"Invalid rounding mode: {int(rounding)}")

    if a < 0:
        # DOWN and UP swap for negative values; ZERO, INF and NEAR_INF are symmetric
        mirrored = Rounding(int(rounding) ^ ((int(rounding) >> 1) & 1))
        return -rescale_rnd(-a, b, c, mirrored)

    if rounding == Rounding.NEAR_INF:
        r = c // 2
    elif rounding in (Rounding.INF, Rounding.UP):
        r = c - 1
    else:
        r = 0
    return (a * b + r) // c


def rescale(
    value: int,
    source: Fraction,
    destination: Fraction,
    rounding: Rounding = Rounding.NEAR_INF,
) -> int:
    """Convert a timestamp between two time bases (av_rescale_q_rnd)."""
    b = source.numerator * destination.denominator
    c = destination.numerator * source.denominator
    return rescale_rnd(value, b, c, rounding)
