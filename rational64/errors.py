"""Exceptions raised by :mod:`rational64`."""


class RationalError(Exception):
    """Base class of every error raised by this package."""


class DivisionByZero(RationalError, ZeroDivisionError):
    """A denominator would become zero."""


class RationalOverflow(RationalError, OverflowError):
    """A component or an intermediate result left the signed 64-bit range."""


class ParseError(RationalError, ValueError):
    """Text does not describe a representable :class:`Rational`."""


class UnknownFormat(RationalError, ValueError):
    """A format tag outside the supported set was requested."""


__all__ = [
    "RationalError",
    "DivisionByZero",
    "RationalOverflow",
    "ParseError",
    "UnknownFormat",
]
