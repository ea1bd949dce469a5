"""Soft comparison checks.

Each ``check_*`` function evaluates one relation. When it holds nothing
happens. When it does not, a diagnostic naming the call site, the operand
expressions and their values is written to standard output and the active
:class:`~softcheck.counter.FailureCounter` grows by one. Checks never raise
for a failed relation, so a test keeps running after its first failure.

Example::

    from softcheck import check_equal, check_equal_approx

    check_equal(image.width, 640)
    check_equal_approx(pixel[0], 0.5)

prints on failure::

    tests/test_resize.py:12:
    FAILED: image.width == 640
    	values were '320' and '640'

Array operands (numpy arrays and other element-wise types) go through
``check_array_equal``/``check_array_equal_thresh``; ``check_equal_approx``
accepts both scalars and arrays.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Sequence

from softcheck.approx import (
    abs_diff,
    equal_approx,
    reduce_all,
    shapes_compatible,
    signed_diff,
    within_threshold,
)
from softcheck.callsite import capture_call_site
from softcheck.counter import FailureCounter, active_counter
from softcheck.formatting import NO_DIFF, format_failure
from softcheck.term import Term
from softcheck.types import Relation

logger = logging.getLogger(__name__)

_PLACEHOLDERS = ("x", "y")

__all__ = [
    "check_assert",
    "check_equal",
    "check_ne",
    "check_lt",
    "check_gt",
    "check_le",
    "check_ge",
    "check_equal_thresh",
    "check_equal_approx",
    "check_array_equal",
    "check_array_equal_thresh",
]


def _fail(
    func_name: str,
    relation: Relation,
    values: Sequence[Any],
    labels: Sequence[str] | None,
    counter: FailureCounter,
    diff: Any = NO_DIFF,
) -> None:
    """Print the diagnostic for a failed check and count it."""
    # 0 = _fail, 1 = check_*, 2 = the test code
    site = capture_call_site(2, func_name)
    exprs = list(labels) if labels else site.arg_texts
    nexprs = max(len(values), 1)
    exprs = [
        exprs[i] if i < len(exprs) else _PLACEHOLDERS[i]
        for i in range(nexprs)
    ]

    stream = sys.stdout
    text = format_failure(
        Term(stream),
        site.filename,
        site.lineno,
        relation,
        exprs,
        values,
        diff,
    )
    stream.write(text)
    stream.flush()

    counter.increment()
    logger.debug(
        "%s failed at %s:%d (%s now at %d)",
        func_name, site.filename, site.lineno, counter.name, counter.failures,
    )


def _resolve(counter: FailureCounter | None) -> FailureCounter:
    return counter if counter is not None else active_counter()


def _diff(func, x: Any, y: Any) -> Any:
    # Operands of mismatched shape have no element-wise difference.
    return func(x, y) if shapes_compatible(x, y) else NO_DIFF


# ---------------------------------------------------------------------------
# Truth and ordering
# ---------------------------------------------------------------------------

def check_assert(
    x: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check that *x* is truthy."""
    counter = _resolve(counter)
    if not x:
        _fail("check_assert", Relation.TRUTHY, (x,), labels, counter)


def check_equal(
    x: Any,
    y: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``x == y``. Sequences print as ``{a,b,c}``."""
    counter = _resolve(counter)
    if not x == y:
        _fail("check_equal", Relation.EQ, (x, y), labels, counter)


def check_ne(
    x: Any,
    y: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``x != y``."""
    counter = _resolve(counter)
    if not x != y:
        _fail("check_ne", Relation.NE, (x, y), labels, counter)


def check_lt(
    x: Any,
    y: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``x < y``."""
    counter = _resolve(counter)
    if not x < y:
        _fail("check_lt", Relation.LT, (x, y), labels, counter)


def check_gt(
    x: Any,
    y: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``x > y``."""
    counter = _resolve(counter)
    if not x > y:
        _fail("check_gt", Relation.GT, (x, y), labels, counter)


def check_le(
    x: Any,
    y: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``x <= y``."""
    counter = _resolve(counter)
    if not x <= y:
        _fail("check_le", Relation.LE, (x, y), labels, counter)


def check_ge(
    x: Any,
    y: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``x >= y``."""
    counter = _resolve(counter)
    if not x >= y:
        _fail("check_ge", Relation.GE, (x, y), labels, counter)


# ---------------------------------------------------------------------------
# Tolerance checks
# ---------------------------------------------------------------------------

def check_equal_thresh(
    x: Any,
    y: Any,
    eps: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``abs(x - y) <= eps``; the diagnostic reports ``abs(x - y)``."""
    counter = _resolve(counter)
    if not within_threshold(x, y, eps):
        _fail(
            "check_equal_thresh", Relation.EQ, (x, y), labels, counter,
            diff=_diff(abs_diff, x, y),
        )


def check_equal_approx(
    x: Any,
    y: Any,
    *,
    rel_tol: float | None = None,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``|x - y| <= rel_tol * max(|x|, |y|)`` for every element.

    *rel_tol* defaults to the configured ``approx_rel_tol`` (0.001). The
    diagnostic reports the signed difference ``x - y``.
    """
    counter = _resolve(counter)
    if not equal_approx(x, y, rel_tol):
        _fail(
            "check_equal_approx", Relation.EQ, (x, y), labels, counter,
            diff=_diff(signed_diff, x, y),
        )


# ---------------------------------------------------------------------------
# Element-wise checks
# ---------------------------------------------------------------------------

def check_array_equal(
    x: Any,
    y: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check that every element of ``x == y`` is true.

    A mismatch counts as one failure however many elements differ.
    Operands whose shapes do not broadcast fail without a diff.
    """
    counter = _resolve(counter)
    if not (shapes_compatible(x, y) and reduce_all(x == y)):
        _fail("check_array_equal", Relation.EQ, (x, y), labels, counter)


def check_array_equal_thresh(
    x: Any,
    y: Any,
    eps: Any,
    *,
    labels: Sequence[str] | None = None,
    counter: FailureCounter | None = None,
) -> None:
    """Check ``abs(x - y) < eps`` for every element (strict).

    The diagnostic reports the element-wise ``abs(x - y)``.
    """
    counter = _resolve(counter)
    if not within_threshold(x, y, eps, strict=True):
        _fail(
            "check_array_equal_thresh", Relation.EQ, (x, y), labels, counter,
            diff=_diff(abs_diff, x, y),
        )
