"""Signed 64-bit integer helpers shared by the value type and its codecs."""
from __future__ import annotations

import math
from typing import Tuple

from .errors import RationalOverflow

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def checked(value: int, *, what: str = "intermediate result") -> int:
    """Return *value* unchanged when it fits the signed 64-bit range."""
    if value < INT64_MIN or value > INT64_MAX:
        raise RationalOverflow(f"{what} {value} exceeds the signed 64-bit range")
    return value


def gcd(a: int, b: int) -> int:
    """Greatest common divisor of the magnitudes; ``gcd(a, 0) == |a|``."""
    return math.gcd(a, b)


def lcm(a: int, b: int) -> int:
    """Least common multiple of two positive denominators.

    Divides before multiplying so the only overflow reported is one the
    result itself would cause.
    """
    return checked(a // gcd(a, b) * b, what="common denominator")


def trunc_divmod(numerator: int, denominator: int) -> Tuple[int, int]:
    """Quotient rounded toward zero and the remainder carrying the numerator's sign."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        quotient = -quotient
    return quotient, numerator - quotient * denominator
