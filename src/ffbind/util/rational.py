"""Rational number helpers.

FFmpeg's AVRational maps onto ``fractions.Fraction``. PyAV already returns
Fractions for time bases and frame rates, but reports "unknown" as None or
as a zero denominator in string form ("0/0"); these helpers normalise that.
"""

from __future__ import annotations

from fractions import Fraction

Rational = Fraction

RationalLike = Fraction | int | tuple[int, int] | str | None


def to_rational(value: RationalLike) -> Fraction | None:
    """Coerce a value to a Fraction.

    Args:
        value: Fraction, int, (num, den) tuple, "num/den" string, or None.

    Returns:
        The Fraction, or None when the value is missing or has a zero
        denominator (FFmpeg's "undefined" rational).

    Raises:
        ValueError: If a string cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, tuple):
        num, den = value
        return Fraction(num, den) if den else None
    if isinstance(value, str):
        if "/" in value:
            num_s, den_s = value.split("/", 1)
            num, den = int(num_s), int(den_s)
            return Fraction(num, den) if den else None
        return Fraction(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to a rational")


def q2d(value: RationalLike) -> float:
    """Return the rational as a float; undefined rationals give 0.0."""
    q = to_rational(value)
    return float(q) if q is not None else 0.0


def invert(value: Fraction | None) -> Fraction | None:
    """Return 1/value (av_inv_q).

    Inverting zero gives FFmpeg's undefined rational 1/0, which is None
    here, as in to_rational(). Inverting None gives None.
    """
    if value is None or value == 0:
        return None
    return Fraction(value.denominator, value.numerator)


def nearer(q: Fraction, q1: Fraction, q2: Fraction) -> int:
    """Tell which of q1 and q2 is closer to q (av_nearer_q).

    Returns:
        1 if q1 is nearer, -1 if q2 is nearer, 0 if they are equally close.
    """
    d1 = abs(q - q1)
    d2 = abs(q - q2)
    if d1 < d2:
        return 1
    if d2 < d1:
        return -1
    return 0


def format_rational(value: Fraction | None) -> str:
    """Format a rational as "num/den", "0/0" when undefined."""
    if value is None:
        return "0/0"
    return f"{value.numerator}/{value.denominator}"
