"""Fixed-point money helpers.

Every monetary amount in taxtrace is an ``int`` number of cents. Rates are
declared as ``Decimal`` constants and converted to exact ``Fraction`` values
before multiplying, so no binary floating point ever touches an amount.
Rounding happens once, half-up (away from zero on an exact half cent).
"""

from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

Rate = Decimal | Fraction | int

CENTS_PER_DOLLAR = 100


def to_fraction(rate: Rate) -> Fraction:
    if isinstance(rate, Fraction):
        return rate
    return Fraction(rate)


def round_half_up(value: Fraction) -> int:
    """Round an exact rational amount of cents to the nearest whole cent."""
    sign = -1 if value < 0 else 1
    magnitude = abs(value) + Fraction(1, 2)
    return sign * (magnitude.numerator // magnitude.denominator)


def apply_rate(amount: int, rate: Rate) -> int:
    """Multiply an amount of cents by a rate and round once."""
    return round_half_up(Fraction(amount) * to_fraction(rate))


def cents(dollars: str | int | Decimal) -> int:
    """Convert a dollar figure to integer cents.

    >>> cents("1234.565")
    123457
    """
    value = Decimal(str(dollars)) * CENTS_PER_DOLLAR
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp_fraction(value: Fraction, low: int = 0, high: int = 1) -> Fraction:
    return max(Fraction(low), min(Fraction(high), value))


def format_dollars(amount: int) -> str:
    """Format cents for display: ``-123456`` -> ``-$1,234.56``."""
    sign = "-" if amount < 0 else ""
    whole, part = divmod(abs(amount), CENTS_PER_DOLLAR)
    return f"{sign}${whole:,}.{part:02d}"
