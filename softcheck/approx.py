"""
Tolerance comparisons

Scalar and element-wise comparisons used by the threshold and approximate
checks. Element-wise results are folded into one ``bool`` with
:func:`reduce_all`; a plain scalar comparison passes through unchanged.

Relative tolerance (``check_equal_approx``):
    |x - y| <= rel_tol * max(|x|, |y|)

Absolute tolerance (``check_equal_thresh``):
    |x - y| <= eps
"""

from __future__ import annotations

from typing import Any

import numpy as np

from softcheck.config import get_config


def reduce_all(value: Any) -> bool:
    """
    Fold an element-wise comparison result into one bool (logical AND)

    Args:
        value: numpy array, object with an ``all()`` method, list/tuple of
            such values, or a scalar

    Returns:
        True only if every element is true
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    all_fn = getattr(value, "all", None)
    if callable(all_fn):
        return bool(all_fn())
    if isinstance(value, (list, tuple)):
        return all(reduce_all(v) for v in value)
    return bool(value)


def shapes_compatible(x: Any, y: Any) -> bool:
    """True if *x* and *y* broadcast against each other.

    Ragged input that numpy cannot give a shape counts as incompatible.
    """
    try:
        np.broadcast_shapes(np.shape(x), np.shape(y))
    except ValueError:
        return False
    return True


def abs_diff(x: Any, y: Any) -> Any:
    """
    |x - y|, element-wise for sequences and arrays

    Python scalars keep their own type; anything else goes through numpy.
    """
    if np.isscalar(x) and np.isscalar(y):
        return abs(x - y)
    return np.abs(np.subtract(x, y))


def signed_diff(x: Any, y: Any) -> Any:
    """x - y, element-wise for sequences and arrays"""
    if np.isscalar(x) and np.isscalar(y):
        return x - y
    return np.subtract(x, y)


def within_threshold(x: Any, y: Any, eps: Any, strict: bool = False) -> bool:
    """
    Absolute tolerance test

    Args:
        x, y: values to compare
        eps: allowed absolute difference (scalar or broadcastable array)
        strict: use ``<`` instead of ``<=``

    Returns:
        True if every element is within tolerance; False when the shapes
        do not broadcast
    """
    if not shapes_compatible(x, y):
        return False
    diff = abs_diff(x, y)
    return reduce_all(diff < eps if strict else diff <= eps)


def equal_approx(x: Any, y: Any, rel_tol: float | None = None) -> bool:
    """
    Relative tolerance test

    Args:
        x, y: values to compare
        rel_tol: relative tolerance, defaults to the configured
            ``approx_rel_tol`` (0.1%)

    Returns:
        True if |x - y| <= rel_tol * max(|x|, |y|) holds everywhere;
        False when the shapes do not broadcast
    """
    if not shapes_compatible(x, y):
        return False
    if rel_tol is None:
        rel_tol = get_config().approx_rel_tol
    ax = np.abs(np.asarray(x, dtype=np.float64))
    ay = np.abs(np.asarray(y, dtype=np.float64))
    diff = np.abs(np.subtract(x, y, dtype=np.float64))
    return reduce_all(diff <= rel_tol * np.maximum(ax, ay))
