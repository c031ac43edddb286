"""Exact rational numbers over signed 64-bit components, with NumPy interoperability."""
from __future__ import annotations

import math
import numbers
import operator
from decimal import Context, Decimal
from fractions import Fraction
from typing import Any, Optional, Tuple, Union

import numpy as np

from ._int64 import INT64_MAX, INT64_MIN, checked, gcd, lcm, trunc_divmod
from .errors import DivisionByZero

NumberLike = Union["Rational", int, numbers.Integral]

DECIMAL_SCALE = 10**9
DECIMAL_PRECISION = 28
DECIMAL_CONTEXT = Context(prec=DECIMAL_PRECISION)


def _ensure_int(value: Any, *, name: str) -> int:
    """Convert *value* to ``int`` when it represents an integer."""
    if isinstance(value, np.integer):
        value = value.item()
    if isinstance(value, numbers.Integral):
        return checked(int(value), what=name)
    raise TypeError(f"{name} must be an integer, got {type(value)!r}")


class Rational:
    """Reduced fraction whose numerator and denominator fit in signed 64 bits.

    The denominator is always positive and coprime with the numerator; zero is
    stored as ``0/1``. Instances are immutable and every operation returns a new
    normalized value. Results that cannot be represented raise
    :class:`~rational64.errors.RationalOverflow` instead of wrapping.
    """

    __slots__ = ("_numerator", "_denominator")
    __array_priority__ = 1000.0  # Prefer Rational semantics in NumPy expressions.

    def __init__(
        self,
        numerator: NumberLike = 0,
        denominator: NumberLike = 1,
    ) -> None:
        num = _ensure_int(numerator, name="numerator")
        den = _ensure_int(denominator, name="denominator")
        num, den = self._normalize(num, den)

        self._numerator = checked(num, what="numerator")
        self._denominator = checked(den, what="denominator")

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def _from_canonical(cls, numerator: int, denominator: int) -> "Rational":
        value = cls.__new__(cls)
        value._numerator = numerator
        value._denominator = denominator
        return value

    @classmethod
    def _reduced(cls, numerator: int, denominator: int) -> "Rational":
        """Reduce an unbounded pair, then require the result to fit 64 bits."""
        num, den = cls._normalize(numerator, denominator)
        return cls._from_canonical(
            checked(num, what="numerator"), checked(den, what="denominator")
        )

    @classmethod
    def from_fraction(cls, numerator: NumberLike, denominator: NumberLike) -> "Rational":
        """Return ``numerator / denominator`` in canonical form."""
        return cls(numerator, denominator)

    @classmethod
    def from_integer(cls, value: NumberLike) -> "Rational":
        """Wrap an integer; the denominator is 1 so no reduction is needed."""
        return cls._from_canonical(_ensure_int(value, name="value"), 1)

    @classmethod
    def from_decimal(cls, value: Union[Decimal, numbers.Integral]) -> "Rational":
        """Widen *value* by fixed-point scaling at :data:`DECIMAL_SCALE`.

        Digits beyond the ninth fractional place are truncated toward zero.
        """
        if isinstance(value, numbers.Integral):
            return cls.from_integer(value)
        if not isinstance(value, Decimal):
            raise TypeError(f"expected a Decimal, got {type(value)!r}")
        if not value.is_finite():
            raise ValueError("cannot convert NaN or infinity to Rational")
        numerator, denominator = value.as_integer_ratio()
        scaled, _ = trunc_divmod(numerator * DECIMAL_SCALE, denominator)
        return cls(checked(scaled, what="scaled decimal"), DECIMAL_SCALE)

    @classmethod
    def rationalize(cls, value: Any) -> "Rational":
        """Coerce a numeric-like value into :class:`Rational`.

        Integers and :class:`~fractions.Fraction` convert exactly; decimals and
        floats go through :meth:`from_decimal`; strings through :meth:`parse`.
        """
        if isinstance(value, Rational):
            return value
        if isinstance(value, np.generic):
            return cls.rationalize(value.item())
        if isinstance(value, numbers.Integral):
            return cls.from_integer(value)
        if isinstance(value, Fraction):
            return cls(value.numerator, value.denominator)
        if isinstance(value, Decimal):
            return cls.from_decimal(value)
        if isinstance(value, numbers.Real):
            value = float(value)
            if math.isnan(value) or math.isinf(value):
                raise ValueError("cannot convert NaN or infinity to Rational")
            return cls.from_decimal(Decimal(repr(value)))
        if isinstance(value, str):
            return cls.parse(value)
        raise TypeError(f"Cannot convert {type(value)!r} to Rational")

    @classmethod
    def parse(cls, text: str, fmt: Optional[str] = None) -> "Rational":
        """Parse *text* under format tag *fmt* (``I`` then ``D`` when omitted)."""
        from .formats import parse

        return parse(text, fmt)

    @classmethod
    def try_parse(cls, text: str, fmt: Optional[str] = None) -> Optional["Rational"]:
        """Like :meth:`parse` but return ``None`` for malformed input."""
        from .formats import try_parse

        return try_parse(text, fmt)

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        return Fraction(self._numerator, self._denominator)

    def int_part(self) -> int:
        """Integer part, truncated toward zero."""
        return trunc_divmod(self._numerator, self._denominator)[0]

    def fract_part(self) -> "Rational":
        """Fractional part; carries the sign of the value."""
        remainder = trunc_divmod(self._numerator, self._denominator)[1]
        return Rational(remainder, self._denominator)

    def sign(self) -> int:
        return (self._numerator > 0) - (self._numerator < 0)

    def flip(self) -> "Rational":
        """Return the reciprocal."""
        if self._numerator == 0:
            raise DivisionByZero("cannot take the reciprocal of zero")
        return Rational(self._denominator, self._numerator)

    def increment(self) -> "Rational":
        return self + 1

    def decrement(self) -> "Rational":
        return self - 1

    def to_decimal(self) -> Decimal:
        """Return the quotient as a :class:`~decimal.Decimal` (28 significant digits)."""
        return DECIMAL_CONTEXT.divide(Decimal(self._numerator), Decimal(self._denominator))

    def to_string(self, fmt: Optional[str] = None) -> str:
        """Render the value under format tag *fmt* (default ``S``)."""
        from .formats import format_rational

        return format_rational(self, fmt)

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return self._numerator / self._denominator

    def __int__(self) -> int:
        return self.int_part()

    def __bool__(self) -> bool:
        return self._numerator != 0

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"Rational({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        from .formats import FORMATS

        if format_spec == "" or format_spec in FORMATS:
            return self.to_string(format_spec or None)
        return format(self.to_decimal(), format_spec)

    # ------------------------------------------------------------------
    # Internal helpers
    def _coerce_scalar(self, value: Any) -> "Rational":
        if isinstance(value, Rational):
            return value
        if isinstance(value, np.generic):  # NumPy scalars
            return self._coerce_scalar(value.item())
        if isinstance(value, numbers.Integral):
            return Rational.from_integer(value)
        raise TypeError(f"Cannot interpret {type(value)!r} as Rational")

    def _coerce_array(self, values: np.ndarray) -> np.ndarray:
        return np.vectorize(self._coerce_scalar, otypes=[object])(values)

    def _binary_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            return np.vectorize(lambda x: op(self, x), otypes=[object])(self._coerce_array(other))
        return op(self, self._coerce_scalar(other))

    def _reflected_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            return np.vectorize(lambda x: op(x, self), otypes=[object])(self._coerce_array(other))
        return op(self._coerce_scalar(other), self)

    @staticmethod
    def _normalize(num: int, den: int) -> Tuple[int, int]:
        if den == 0:
            raise DivisionByZero("denominator must be non-zero")
        if den < 0:
            num, den = -num, -den
        divisor = gcd(num, den)
        return num // divisor, den // divisor

    def _coerce_power(self, value: Any) -> int:
        if isinstance(value, np.generic):
            return self._coerce_power(value.item())
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, Rational):
            if value.denominator != 1:
                raise ValueError("Exponent must be an integer")
            return value.numerator
        raise TypeError("Unsupported exponent type")

    def _power(self, exponent: int) -> "Rational":
        if exponent < 0:
            return self.flip()._power(-exponent)
        if exponent == 0:
            return Rational.from_integer(1)
        if exponent % 2 == 1:
            return self._power(exponent - 1) * self
        half = self._power(exponent // 2)
        return half * half

    @staticmethod
    def _compare_magnitude(a_num: int, a_den: int, b_num: int, b_den: int) -> int:
        """Three-way compare of ``a_num/a_den`` and ``b_num/b_den``, both non-negative.

        Walks the continued-fraction expansions of both values in lockstep.
        When the integer parts agree, each value is replaced by the reciprocal
        of its fractional part and the operands swap sides, since taking
        reciprocals reverses the order. A reduced remainder ``r/den`` flips to
        ``den/r``, which is reduced as well, so no term ever grows.
        """
        while True:
            a_int, a_rem = divmod(a_num, a_den)
            b_int, b_rem = divmod(b_num, b_den)
            if a_int != b_int:
                return -1 if a_int < b_int else 1
            if a_rem == 0:
                return 0 if b_rem == 0 else -1
            if b_rem == 0:
                return 1
            a_num, a_den, b_num, b_den = b_den, b_rem, a_den, a_rem

    # ------------------------------------------------------------------
    # Arithmetic operators
    def __add__(self, other: Any) -> Any:
        def _add(a: "Rational", b: "Rational") -> "Rational":
            common = lcm(a._denominator, b._denominator)
            left = common // a._denominator * a._numerator
            right = common // b._denominator * b._numerator
            return Rational._reduced(left + right, common)

        return self._binary_operation(other, _add)

    def __radd__(self, other: Any) -> Any:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, lambda a, b: a + (-b))

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, operator.sub)

    def __mul__(self, other: Any) -> Any:
        def _mul(a: "Rational", b: "Rational") -> "Rational":
            # Cancel across the diagonal first so the products stay small.
            left = Rational(a._numerator, b._denominator)
            right = Rational(b._numerator, a._denominator)
            return Rational(
                left._numerator * right._numerator,
                left._denominator * right._denominator,
            )

        return self._binary_operation(other, _mul)

    def __rmul__(self, other: Any) -> Any:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Any:
        def _truediv(a: "Rational", b: "Rational") -> "Rational":
            if b._numerator == 0:
                raise DivisionByZero("division by zero")
            return a * b.flip()

        return self._binary_operation(other, _truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, operator.truediv)

    def __pow__(self, exponent: Any) -> Any:
        if isinstance(exponent, np.ndarray):
            vectorised = np.vectorize(lambda x: self.__pow__(x), otypes=[object])
            return vectorised(exponent)
        return self._power(self._coerce_power(exponent))

    def __rpow__(self, base: Any) -> Any:
        return self._coerce_scalar(base) ** self

    def __neg__(self) -> "Rational":
        return Rational(-self._numerator, self._denominator)

    def __pos__(self) -> "Rational":
        return self

    def __abs__(self) -> "Rational":
        return Rational(abs(self._numerator), self._denominator)

    # ------------------------------------------------------------------
    # Comparisons
    def compare_to(self, other: Any) -> int:
        """Return -1, 0 or 1 as this value is less than, equal to or greater than *other*."""
        other = self._coerce_scalar(other)
        if (self._numerator, self._denominator) == (other._numerator, other._denominator):
            return 0
        mine, theirs = self.sign(), other.sign()
        if mine != theirs:
            return -1 if mine < theirs else 1
        if mine > 0:
            return self._compare_magnitude(
                self._numerator, self._denominator, other._numerator, other._denominator
            )
        # Both negative: the larger magnitude is the smaller value.
        return self._compare_magnitude(
            -other._numerator, other._denominator, -self._numerator, self._denominator
        )

    def _compare(self, other: Any, op) -> Any:
        return self._binary_operation(other, lambda a, b: op(a.compare_to(b), 0))

    def __eq__(self, other: Any) -> bool:
        try:
            other_rat = self._coerce_scalar(other)
        except TypeError:
            return NotImplemented
        return (
            self._numerator == other_rat._numerator
            and self._denominator == other_rat._denominator
        )

    def __lt__(self, other: Any) -> Any:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> Any:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> Any:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> Any:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        if self._denominator == 1:
            return hash(self._numerator)
        return hash((self._numerator, self._denominator))

    # ------------------------------------------------------------------
    # NumPy interoperability
    _UFUNC_DISPATCH = {
        np.add: operator.add,
        np.subtract: operator.sub,
        np.multiply: operator.mul,
        np.divide: operator.truediv,
        np.true_divide: operator.truediv,
        np.negative: operator.neg,
        np.positive: operator.pos,
        np.absolute: abs,
        np.power: operator.pow,
        np.less: operator.lt,
        np.less_equal: operator.le,
        np.greater: operator.gt,
        np.greater_equal: operator.ge,
        np.equal: operator.eq,
        np.not_equal: operator.ne,
    }

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if method != "__call__":
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Rational ufuncs")
        op = self._UFUNC_DISPATCH.get(ufunc)
        if op is None:
            return NotImplemented

        operands = [
            self._coerce_array(value) if isinstance(value, np.ndarray) else self._coerce_scalar(value)
            for value in inputs
        ]
        if any(isinstance(value, np.ndarray) for value in operands):
            return np.vectorize(op, otypes=[object])(*operands)
        return op(*operands)


def rationalize(value: Any) -> Rational:
    """Public helper to convert *value* into :class:`Rational`."""

    return Rational.rationalize(value)


__all__ = [
    "Rational",
    "rationalize",
    "DECIMAL_SCALE",
    "DECIMAL_PRECISION",
    "INT64_MIN",
    "INT64_MAX",
]
