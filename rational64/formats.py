"""Text codecs for :class:`~rational64.rational.Rational`.

Each format tag names a grammar for parsing and a canonical rendering for
formatting; ``format_rational(parse(text, tag), tag)`` reproduces the
canonical spelling of *text*.

====  ==========================  =====================
tag   example                     meaning
====  ==========================  =====================
s     ``7/2``                     simple fraction
S     ``7/2``, ``3``              integer when possible
i     ``3 1/2``                   mixed number
I     ``3 1/2``, ``3``, ``1/2``   mixed when needed
d     ``3.5``                     decimal
D     ``0.1(6)``                  repeating decimal
====  ==========================  =====================
"""
from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Callable, Dict, Optional, Sequence

from ._int64 import INT64_MAX, trunc_divmod
from .errors import DivisionByZero, ParseError, RationalOverflow, UnknownFormat
from .rational import Rational

logger = logging.getLogger(__name__)

FORMATS = ("s", "S", "i", "I", "d", "D")
DEFAULT_FORMAT = "S"
MAX_REPEATING_DIGITS = 18
MAX_EXPANSION_DIGITS = 100
TRUNCATION_MARKER = "..."

_INTEGER = re.compile(r"-?\d+", re.ASCII)
_SIMPLE = re.compile(r"(-?\d+)\s*/\s*(\d+)", re.ASCII)
_MIXED = re.compile(r"(-?)(\d+)\s+(\d+)\s*/\s*(\d+)", re.ASCII)
_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)
_REPEATING = re.compile(r"(-?)(\d+)\.(\d*)\((\d+)\)", re.ASCII)

Parser = Callable[[str], Optional[Rational]]


# ----------------------------------------------------------------------
# Parsing
_MAX_LITERAL_DIGITS = len(str(INT64_MAX))


def _literal(digits: str) -> int:
    """Convert a matched digit run, refusing runs too long for 64 bits before ``int()``."""
    if len(digits.lstrip("-").lstrip("0")) > _MAX_LITERAL_DIGITS:
        raise RationalOverflow(f"literal {digits[:24]}... exceeds the signed 64-bit range")
    return int(digits)


def _parse_integer(text: str) -> Optional[Rational]:
    if _INTEGER.fullmatch(text) is None:
        return None
    return Rational.from_integer(_literal(text))


def _parse_simple(text: str) -> Optional[Rational]:
    match = _SIMPLE.fullmatch(text)
    if match is None:
        return None
    return Rational(_literal(match.group(1)), _literal(match.group(2)))


def _parse_mixed(text: str) -> Optional[Rational]:
    match = _MIXED.fullmatch(text)
    if match is None:
        return None
    sign, whole, numerator, denominator = match.groups()
    value = Rational(_literal(numerator), _literal(denominator)) + _literal(whole)
    return -value if sign else value


def _parse_decimal(text: str) -> Optional[Rational]:
    if _DECIMAL.fullmatch(text) is None:
        return None
    numerator, denominator = Decimal(text).as_integer_ratio()
    return Rational(numerator, denominator)


def _parse_repeating(text: str) -> Optional[Rational]:
    """Parse ``I.F(R)``: value is ``I + (int(FR) - int(F)) / (10**n - 10**len(F))``."""
    match = _REPEATING.fullmatch(text)
    if match is None:
        return None
    sign, whole, fixed, period = match.groups()
    digits = fixed + period
    if len(digits) > MAX_REPEATING_DIGITS:
        raise ParseError(
            f"{len(digits)} fractional digits exceed the limit of {MAX_REPEATING_DIGITS}"
        )
    denominator = 10 ** len(digits) - 10 ** len(fixed)
    value = Rational(int(digits) - int(fixed or "0"), denominator) + _literal(whole)
    return -value if sign else value


_GRAMMARS: Dict[str, Sequence[Parser]] = {
    "s": (_parse_simple,),
    "S": (_parse_integer, _parse_simple),
    "i": (_parse_mixed,),
    "I": (_parse_integer, _parse_simple, _parse_mixed),
    "d": (_parse_decimal,),
    "D": (_parse_decimal, _parse_repeating),
}
# Without a tag: integer and mixed forms first, then the decimal forms.
_DEFAULT_GRAMMAR = tuple(_GRAMMARS["I"]) + tuple(_GRAMMARS["D"])


def _grammar(fmt: Optional[str]) -> Sequence[Parser]:
    if fmt is None:
        return _DEFAULT_GRAMMAR
    try:
        return _GRAMMARS[fmt]
    except KeyError:
        raise UnknownFormat(f"unknown format {fmt!r}") from None


def parse(text: str, fmt: Optional[str] = None) -> Rational:
    """Parse *text* as format *fmt*, or as ``I`` then ``D`` when *fmt* is None.

    Raises :class:`ParseError` when no grammar matches or a literal does not
    fit in 64 bits, :class:`DivisionByZero` for a zero denominator, and
    :class:`UnknownFormat` for an unsupported tag.
    """
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text)!r}")
    parsers = _grammar(fmt)
    stripped = text.strip()
    try:
        for parser in parsers:
            value = parser(stripped)
            if value is not None:
                return value
    except RationalOverflow as exc:
        raise ParseError(f"{text!r} does not fit the signed 64-bit range") from exc
    raise ParseError(f"{text!r} is not a valid rational in format {fmt or 'I/D'!r}")


def try_parse(text: str, fmt: Optional[str] = None) -> Optional[Rational]:
    """Like :func:`parse`, but return ``None`` instead of raising on bad input."""
    try:
        return parse(text, fmt)
    except (ParseError, DivisionByZero) as exc:
        logger.debug(f"try_parse({text!r}, {fmt!r}) failed: {exc}")
        return None


# ----------------------------------------------------------------------
# Formatting
def _format_simple(value: Rational) -> str:
    return f"{value.numerator}/{value.denominator}"


def _format_short(value: Rational) -> str:
    if value.denominator == 1:
        return str(value.numerator)
    return _format_simple(value)


def _format_mixed(value: Rational) -> str:
    whole, remainder = trunc_divmod(value.numerator, value.denominator)
    text = f"{abs(whole)} {abs(remainder)}/{value.denominator}"
    if value.numerator < 0:
        return "-" + text
    return text


def _format_mixed_short(value: Rational) -> str:
    whole, remainder = trunc_divmod(value.numerator, value.denominator)
    # A zero whole part falls back to S so the sign of -1/2 survives.
    if whole == 0 or remainder == 0:
        return _format_short(value)
    return f"{whole} {abs(remainder)}/{value.denominator}"


def _format_decimal(value: Rational) -> str:
    return format(value.to_decimal(), "f")


def _format_repeating(value: Rational) -> str:
    numerator, denominator = value.numerator, value.denominator
    text = "-" if numerator < 0 else ""
    numerator = abs(numerator)
    seen: Dict[int, int] = {}
    for position in range(MAX_EXPANSION_DIGITS):
        digit, remainder = divmod(numerator, denominator)
        text += str(digit)
        if remainder == 0:
            return text
        if remainder in seen:
            start = seen[remainder]
            return f"{text[:start]}({text[start:]})"
        if position == 0:
            text += "."
        seen[remainder] = len(text)
        numerator = remainder * 10
    logger.debug(f"expansion of {value!r} truncated after {MAX_EXPANSION_DIGITS} digits")
    return text + TRUNCATION_MARKER


_FORMATTERS: Dict[str, Callable[[Rational], str]] = {
    "s": _format_simple,
    "S": _format_short,
    "i": _format_mixed,
    "I": _format_mixed_short,
    "d": _format_decimal,
    "D": _format_repeating,
}


def format_rational(value: Rational, fmt: Optional[str] = None) -> str:
    """Render *value* in format *fmt* (default ``S``)."""
    if fmt is None:
        fmt = DEFAULT_FORMAT
    try:
        formatter = _FORMATTERS[fmt]
    except KeyError:
        raise UnknownFormat(f"unknown format {fmt!r}") from None
    return formatter(value)


__all__ = [
    "FORMATS",
    "DEFAULT_FORMAT",
    "MAX_REPEATING_DIGITS",
    "MAX_EXPANSION_DIGITS",
    "TRUNCATION_MARKER",
    "parse",
    "try_parse",
    "format_rational",
]
