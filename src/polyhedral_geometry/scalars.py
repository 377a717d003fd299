"""
Scalar domains.

Coordinates live in exactly one of two exact domains: rationals, stored as
fractions.Fraction, and integers, stored as int. The kernel names its objects
after the domain they were built with ("Cone<Rational>"), which is how a
wrapper finds out its own domain.
"""

import numbers
from enum import Enum
from fractions import Fraction


class ScalarDomain(Enum):
    """Numeric representation of coordinates."""

    RATIONAL = "Rational"
    INTEGER = "Integer"

    @property
    def kernel_type(self) -> type:
        """Native numeric type the kernel uses for this domain."""
        return SCALAR_TYPE_TO_KERNEL[self]

    def zero(self) -> Fraction | int:
        return self.convert(0)

    def convert(self, value) -> Fraction | int:
        """Convert a single value into this domain.

        Args:
            value: int, Fraction, float, numpy scalar or rational string

        Returns:
            The value as Fraction (RATIONAL) or int (INTEGER)

        Raises:
            ValueError: If the value is not representable in the domain
        """
        if isinstance(value, bool):
            raise ValueError(f"booleans are not {self.value} values")
        if self is ScalarDomain.RATIONAL:
            try:
                return Fraction(value)
            except (TypeError, ValueError) as err:
                raise ValueError(f"{value!r} is not a rational value") from err

        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, numbers.Rational) and value.denominator == 1:
            return int(value.numerator)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return self.convert(Fraction(value))
            except (TypeError, ValueError) as err:
                raise ValueError(f"{value!r} is not an integer value") from err
        raise ValueError(f"{value!r} is not an integer value")

    def convert_all(self, values) -> list:
        return [self.convert(v) for v in values]


SCALAR_TYPE_TO_KERNEL = {
    ScalarDomain.RATIONAL: Fraction,
    ScalarDomain.INTEGER: int,
}

# Closed table from the kernel's type token to the domain.
KERNEL_TOKEN_TO_SCALAR = {domain.value: domain for domain in ScalarDomain}