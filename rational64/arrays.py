"""NumPy object-array helpers for :class:`~rational64.rational.Rational`."""
from __future__ import annotations

from typing import Any

import numpy as np

from .rational import Rational


def as_rational_array(values: Any, *, copy: bool = True) -> np.ndarray:
    """Return a ``numpy.ndarray`` of :class:`Rational` values.

    ``values`` can be any iterable of entries accepted by
    :func:`~rational64.rational.rationalize` or an existing NumPy array. When
    ``copy`` is ``False`` and ``values`` is already an object array holding
    only :class:`Rational` items, that array is returned as is.
    """

    if isinstance(values, np.ndarray):
        array = values.copy() if copy else values
        if array.dtype == object and all(isinstance(item, Rational) for item in array.flat):
            return array
        vectorised = np.vectorize(Rational.rationalize, otypes=[object])
        return vectorised(array)

    if isinstance(values, (list, tuple)):
        array = np.empty(len(values), dtype=object)
        array[:] = [Rational.rationalize(item) for item in values]
        return array

    return as_rational_array(list(values), copy=copy)


def zeros(length: int) -> np.ndarray:
    """Return a one-dimensional array of length ``length`` filled with zeros."""

    if length < 0:
        raise ValueError("length must be non-negative")
    return as_rational_array([Rational(0) for _ in range(length)])


def zeros_like(values: Any) -> np.ndarray:
    """Return a zero-filled array that matches the shape of ``values``."""

    shape = np.shape(values)
    array = np.empty(shape, dtype=object)
    array.fill(Rational(0))
    return array


__all__ = ["as_rational_array", "zeros", "zeros_like"]
