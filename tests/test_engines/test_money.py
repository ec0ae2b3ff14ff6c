"""Tests for fixed-point money helpers."""

from decimal import Decimal
from fractions import Fraction

from taxtrace.money import apply_rate, cents, clamp_fraction, format_dollars, round_half_up


class TestRounding:
    def test_half_rounds_away_from_zero(self):
        assert round_half_up(Fraction(5, 2)) == 3
        assert round_half_up(Fraction(-5, 2)) == -3

    def test_below_half_rounds_down(self):
        assert round_half_up(Fraction(249, 100)) == 2

    def test_apply_rate_rounds_once(self):
        # 12345 x 10% = 1234.5 cents
        assert apply_rate(12345, Decimal("0.10")) == 1235
        assert apply_rate(12345, Decimal("0.0425")) == 525  # 524.6625

    def test_rate_is_exact(self):
        # 0.1 as a binary float would not land on a whole cent here
        assert apply_rate(30, Decimal("0.1")) == 3


class TestConversions:
    def test_cents(self):
        assert cents(10) == 1000
        assert cents("12.345") == 1235
        assert cents(Decimal("0.01")) == 1

    def test_format_dollars(self):
        assert format_dollars(-123456) == "-$1,234.56"
        assert format_dollars(5) == "$0.05"
        assert format_dollars(0) == "$0.00"

    def test_clamp_fraction(self):
        assert clamp_fraction(Fraction(-1, 3)) == 0
        assert clamp_fraction(Fraction(4, 3)) == 1
        assert clamp_fraction(Fraction(1, 3)) == Fraction(1, 3)
