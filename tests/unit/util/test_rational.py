"""Tests for util/rational.py and util/media.py."""

from fractions import Fraction

import pytest

from ffbind.util.media import MediaType
from ffbind.util.rational import format_rational, invert, nearer, q2d, to_rational


class TestToRational:
    """Tests for to_rational()."""

    def test_fraction_passthrough(self) -> None:
        value = Fraction(30000, 1001)
        assert to_rational(value) is value

    def test_int(self) -> None:
        assert to_rational(25) == Fraction(25)

    def test_tuple(self) -> None:
        assert to_rational((1, 90000)) == Fraction(1, 90000)

    def test_string(self) -> None:
        assert to_rational("30000/1001") == Fraction(30000, 1001)
        assert to_rational("25") == Fraction(25)

    def test_zero_denominator_is_undefined(self) -> None:
        assert to_rational("0/0") is None
        assert to_rational((5, 0)) is None
        assert to_rational(None) is None

    def test_invalid_string(self) -> None:
        with pytest.raises(ValueError):
            to_rational("abc/def")

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError):
            to_rational(1.5)  # type: ignore[arg-type]


class TestRationalHelpers:
    """Tests for q2d, invert, nearer and format_rational."""

    def test_q2d(self) -> None:
        assert q2d(Fraction(1, 4)) == 0.25
        assert q2d("0/0") == 0.0

    def test_invert(self) -> None:
        assert invert(Fraction(1, 25)) == Fraction(25)
        assert invert(Fraction(-2, 3)) == Fraction(-3, 2)

    def test_invert_zero_is_undefined(self) -> None:
        assert invert(Fraction(0)) is None
        assert invert(None) is None

    def test_nearer(self) -> None:
        q = Fraction(1, 3)
        assert nearer(q, Fraction(1, 4), Fraction(1, 2)) == 1
        assert nearer(q, Fraction(1, 2), Fraction(1, 4)) == -1
        assert nearer(Fraction(1, 2), Fraction(1, 4), Fraction(3, 4)) == 0

    def test_format_rational(self) -> None:
        assert format_rational(Fraction(1, 90000)) == "1/90000"
        assert format_rational(Fraction(25)) == "25/1"
        assert format_rational(None) == "0/0"


class TestMediaType:
    """Tests for MediaType."""

    def test_from_name(self) -> None:
        assert MediaType.from_name("video") is MediaType.VIDEO
        assert MediaType.from_name("Audio") is MediaType.AUDIO

    def test_from_unknown_name(self) -> None:
        assert MediaType.from_name("nonsense") is MediaType.UNKNOWN
        assert MediaType.from_name(None) is MediaType.UNKNOWN

    def test_label(self) -> None:
        assert MediaType.SUBTITLE.label == "Subtitle"
