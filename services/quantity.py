"""
Quantity Service

Exact-rational ingredient quantities: stored as an integer numerator over a
fixed denominator, scaled by servings and formatted for display.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from fractions import Fraction

from constants import DISPLAY_FRACTIONS

DEFAULT_DENOMINATOR = 1000


def to_fraction(value):
    """Convert an int, float, Decimal, Fraction or numeric string to an exact Fraction."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        # Go through the shortest repr so 0.1 means one tenth, not the binary float
        return Fraction(repr(value))
    if isinstance(value, str):
        return Fraction(value.strip())
    return Fraction(value)


def round_half_up(value):
    """Round a Fraction to the nearest integer, halves rounding up."""
    return math.floor(value + Fraction(1, 2))


@dataclass(frozen=True)
class Quantity:
    """An amount equal to numerator / denominator."""
    numerator: int
    denominator: int = DEFAULT_DENOMINATOR

    def __post_init__(self):
        if self.denominator <= 0:
            raise ValueError("denominator must be positive")

    @classmethod
    def from_amount(cls, amount, denominator=DEFAULT_DENOMINATOR):
        """Store an entered amount, rounded to the nearest 1/denominator."""
        return cls(round_half_up(to_fraction(amount) * denominator), denominator)

    @classmethod
    def from_columns(cls, numerator, denominator):
        """Rebuild from stored columns; None when the line has no quantity."""
        if numerator is None or not denominator:
            return None
        return cls(int(numerator), int(denominator))

    @property
    def value(self):
        return Fraction(self.numerator, self.denominator)

    def to_decimal(self):
        return Decimal(self.numerator) / Decimal(self.denominator)

    def is_whole(self):
        return self.numerator % self.denominator == 0

    def scale(self, factor):
        """
        Multiply by factor, keeping the denominator.

        The numerator is rounded once, so callers must always scale the stored
        base quantity rather than an already scaled one.
        """
        return Quantity(round_half_up(self.numerator * to_fraction(factor)), self.denominator)

    def format(self):
        """Display text: an integer when whole, otherwise two decimal places."""
        if self.is_whole():
            return str(self.numerator // self.denominator)
        return str(self.to_decimal().quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))

    def to_text(self):
        """Shortest decimal text that reads back as the same quantity."""
        if self.is_whole():
            return str(self.numerator // self.denominator)
        return format(self.to_decimal().normalize(), 'f')

    def to_fraction_text(self):
        """Render with a vulgar fraction (e.g. '1½') when one is exact, else to_text()."""
        whole, rest = divmod(self.numerator, self.denominator)
        if rest == 0:
            return str(whole)
        thousandths = Fraction(rest, self.denominator) * 1000
        if thousandths.denominator == 1 and int(thousandths) in DISPLAY_FRACTIONS:
            glyph = DISPLAY_FRACTIONS[int(thousandths)]
            return f"{whole}{glyph}" if whole else glyph
        return self.to_text()

    def __str__(self):
        return self.format()


def scale_quantity(quantity, factor):
    """Scale an optional quantity; None stays None."""
    if quantity is None:
        return None
    return quantity.scale(factor)


def format_quantity(quantity):
    """Format an optional quantity for display ('' when absent)."""
    if quantity is None:
        return ''
    return quantity.format()
