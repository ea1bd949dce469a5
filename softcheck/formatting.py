"""Rendering of operand values and failure diagnostics."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from softcheck.term import Term
from softcheck.types import Relation

# Marker for "no diff line" so that a legitimate diff of None still prints.
NO_DIFF = object()

_TEXT_TYPES = (str, bytes, bytearray)


def format_value(value: Any) -> str:
    """Render a value the way the diagnostics print it.

    Ordered sequences and numpy arrays become ``{a,b,c}`` (nested
    sequences recurse). Floats use ``%g``; booleans print as ``1``/``0``.
    Everything else uses ``str``.
    """
    if isinstance(value, np.ndarray):
        if value.ndim == 0:
            return format_value(value.item())
        return format_sequence(value)
    if isinstance(value, (bool, np.bool_)):
        return "1" if value else "0"
    if isinstance(value, (float, np.floating)):
        return f"{float(value):g}"
    if isinstance(value, np.integer):
        return str(int(value))
    if isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES):
        return format_sequence(value)
    return str(value)


def format_sequence(values: Any) -> str:
    """Join the elements of *values* as ``{a,b,c}``."""
    return "{" + ",".join(format_value(v) for v in values) + "}"


def format_failure(
    term: Term,
    filename: str,
    lineno: int,
    relation: Relation,
    exprs: Sequence[str],
    values: Sequence[Any] = (),
    diff: Any = NO_DIFF,
) -> str:
    """Build the diagnostic block for one failed check.

    Layout::

        <red bold>file:line:
        FAILED: <normal>expr_x == expr_y
        \tvalues were 'x' and 'y', diff was d

    Single-operand checks print only the expression line.
    """
    lines = [term.ansi("red,bold", f"{filename}:{lineno}:\nFAILED: ")]
    if relation is Relation.TRUTHY:
        lines.append(f"{exprs[0]}\n")
        return "".join(lines)

    lines.append(f"{exprs[0]} {relation.value} {exprs[1]}\n")
    x, y = values
    tail = f"\tvalues were '{format_value(x)}' and '{format_value(y)}'"
    if diff is not NO_DIFF:
        tail += f", diff was {format_value(diff)}"
    lines.append(tail + "\n")
    return "".join(lines)
