"""
softcheck - soft assertions for unit tests

Checks print a diagnostic and count the failure instead of raising, so a
test program runs every check and ends with one ``OK``/``ERRORS!`` summary
and a matching exit status.

Usage:
    from softcheck import FailureCounter, check_equal, check_equal_approx

    with FailureCounter():
        check_equal(image.nchannels, 4)
        check_equal_approx(pixel, [0.25, 0.5, 0.75, 1.0])

Outside a ``with`` block, checks use the process-wide counter
``softcheck.unit_test_failures``. It is created on import and reports when
the interpreter exits, printing ``OK`` even if no check ran.
"""

__version__ = "0.1.0"

from softcheck.approx import equal_approx, reduce_all, within_threshold
from softcheck.checks import (
    check_array_equal,
    check_array_equal_thresh,
    check_assert,
    check_equal,
    check_equal_approx,
    check_equal_thresh,
    check_ge,
    check_gt,
    check_le,
    check_lt,
    check_ne,
)
from softcheck.config import CheckConfig, get_config, load_config, reset_config, set_config
from softcheck.counter import FailureCounter, active_counter, default_counter
from softcheck.formatting import format_value
from softcheck.types import CheckConfigError, Relation, SoftcheckError

__all__ = [
    "__version__",
    # counter
    "FailureCounter",
    "active_counter",
    "default_counter",
    # checks
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
    # helpers
    "equal_approx",
    "reduce_all",
    "within_threshold",
    "format_value",
    # config
    "CheckConfig",
    "get_config",
    "set_config",
    "reset_config",
    "load_config",
    # types
    "Relation",
    "SoftcheckError",
    "CheckConfigError",
]


# Registered now so that the exit report runs even without any check.
default_counter()


def __getattr__(name):
    """Resolve ``unit_test_failures`` to the current process-wide counter."""
    if name == "unit_test_failures":
        return default_counter()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
