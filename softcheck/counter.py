"""Failure counter and end-of-run report.

A :class:`FailureCounter` tallies failed checks. Used as a context manager
it reports when the block ends and turns recorded failures into a non-zero
process exit status::

    with FailureCounter():
        check_equal(width, 640)
        check_lt(error, 1e-3)
    # prints "OK" or "ERRORS!"; raises SystemExit(1) on failures

Checks called outside any ``with`` block use a process-wide default
counter. It is created when softcheck is imported and reports from an
``atexit`` hook, so a run with no checks still prints ``OK``.
"""

from __future__ import annotations

import atexit
import logging
import operator
import os
import sys
import threading
from contextvars import ContextVar
from typing import TextIO

from softcheck.config import get_config
from softcheck.term import Term

logger = logging.getLogger(__name__)


class FailureCounter:
    """Thread-safe tally of failed checks with a one-shot summary.

    Args:
        stream: Where the summary goes. ``None`` means the current
            ``sys.stdout`` at report time.
        exit_on_failure: Whether leaving the ``with`` block raises
            ``SystemExit(1)`` after failures. ``None`` follows the config.
        name: Label used in log records.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        exit_on_failure: bool | None = None,
        name: str = "",
    ) -> None:
        self.name = name or f"counter-{id(self):x}"
        self._stream = stream
        self._exit_on_failure = exit_on_failure
        self._failures = 0
        self._reported = False
        self._lock = threading.Lock()

    # -- counting -------------------------------------------------------------

    def increment(self) -> FailureCounter:
        """Add one failure and return the counter (prefix form)."""
        with self._lock:
            self._failures += 1
        return self

    def post_increment(self) -> int:
        """Add one failure and return the count before it (postfix form)."""
        with self._lock:
            previous = self._failures
            self._failures += 1
        return previous

    def add(self, n: int) -> FailureCounter:
        """Add *n* failures. The count never decreases."""
        if isinstance(n, bool):
            raise TypeError("failure count increment must be an integer, got bool")
        n = operator.index(n)
        if n < 0:
            raise ValueError(f"failure count can only grow, got {n}")
        with self._lock:
            self._failures += n
        return self

    def __iadd__(self, n: int) -> FailureCounter:
        return self.add(n)

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def __int__(self) -> int:
        return self.failures

    __index__ = __int__

    def __repr__(self) -> str:
        return f"FailureCounter(name={self.name!r}, failures={self.failures})"

    # -- reporting ------------------------------------------------------------

    @property
    def reported(self) -> bool:
        return self._reported

    @property
    def exit_on_failure(self) -> bool:
        if self._exit_on_failure is None:
            return get_config().exit_on_failure
        return self._exit_on_failure

    @property
    def status(self) -> int:
        """Process exit status for the current count."""
        return int(self.failures != 0)

    def report(self) -> int:
        """Print ``ERRORS!`` or ``OK`` once and return the exit status.

        Later calls print nothing and return the same status.
        """
        with self._lock:
            if self._reported:
                return int(self._failures != 0)
            self._reported = True
            failures = self._failures

        stream = self._stream if self._stream is not None else sys.stdout
        term = Term(stream)
        if failures:
            stream.write(term.ansi("red", "ERRORS!\n"))
        else:
            stream.write(term.ansi("green", "OK\n"))
        stream.flush()
        logger.debug("%s reported %d failure(s)", self.name, failures)
        if self is not _default:
            _note_scoped_report()
        return int(failures != 0)

    def close(self) -> None:
        """Report, then raise ``SystemExit`` if failures were recorded."""
        status = self.report()
        if status and self.exit_on_failure:
            raise SystemExit(status)

    def __enter__(self) -> FailureCounter:
        _push(self)
        logger.debug("%s entered", self.name)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        _pop(self)
        if exc_type is not None:
            # Still print the summary, but let the exception propagate.
            self.report()
            return False
        self.close()
        return False


# ---------------------------------------------------------------------------
# Active counter resolution
# ---------------------------------------------------------------------------

_registry_lock = threading.Lock()
# Entered counters, innermost last. Each thread (and asyncio task) sees its own stack.
_active: ContextVar[tuple[FailureCounter, ...]] = ContextVar("softcheck_active", default=())
_default: FailureCounter | None = None
_scoped_reported = False


def _push(counter: FailureCounter) -> None:
    _active.set(_active.get() + (counter,))


def _pop(counter: FailureCounter) -> None:
    stack = _active.get()
    # Remove the most recent entry; nested blocks may close out of order.
    for i in range(len(stack) - 1, -1, -1):
        if stack[i] is counter:
            _active.set(stack[:i] + stack[i + 1:])
            break


def active_counter() -> FailureCounter:
    """Innermost counter entered in this thread, else the default."""
    stack = _active.get()
    if stack:
        return stack[-1]
    return default_counter()


def default_counter() -> FailureCounter:
    """Process-wide counter, reported when the interpreter exits."""
    global _default  # pylint: disable=global-statement
    with _registry_lock:
        if _default is None:
            _default = FailureCounter(name="unit_test_failures")
            atexit.register(_finish_default)
            logger.debug("created process-wide failure counter")
        return _default


def _note_scoped_report() -> None:
    global _scoped_reported  # pylint: disable=global-statement
    _scoped_reported = True


def _finish_default() -> None:
    counter = _default
    if counter is None or counter.reported:
        return
    if not counter.failures and _scoped_reported:
        # An unused default stays quiet once a scoped counter has reported.
        return
    status = counter.report()
    if status and counter.exit_on_failure:
        # An atexit hook cannot change the exit status any other way.
        logging.shutdown()
        sys.stdout.flush()
        sys.stderr.flush()
        os._exit(status)  # pylint: disable=protected-access
