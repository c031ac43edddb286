"""Exact rational numbers bounded to signed 64-bit components."""

from ._int64 import INT64_MAX, INT64_MIN
from .arrays import as_rational_array, zeros, zeros_like
from .errors import (
    DivisionByZero,
    ParseError,
    RationalError,
    RationalOverflow,
    UnknownFormat,
)
from .formats import (
    DEFAULT_FORMAT,
    FORMATS,
    MAX_EXPANSION_DIGITS,
    MAX_REPEATING_DIGITS,
    format_rational,
    parse,
    try_parse,
)
from .rational import DECIMAL_PRECISION, DECIMAL_SCALE, Rational, rationalize

__all__ = [
    "Rational",
    "rationalize",
    "parse",
    "try_parse",
    "format_rational",
    "as_rational_array",
    "zeros",
    "zeros_like",
    "RationalError",
    "DivisionByZero",
    "RationalOverflow",
    "ParseError",
    "UnknownFormat",
    "INT64_MIN",
    "INT64_MAX",
    "DECIMAL_SCALE",
    "DECIMAL_PRECISION",
    "DEFAULT_FORMAT",
    "FORMATS",
    "MAX_REPEATING_DIGITS",
    "MAX_EXPANSION_DIGITS",
]
