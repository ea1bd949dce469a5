"""Relations and exceptions shared by the check functions."""

from __future__ import annotations

from enum import Enum


class Relation(str, Enum):
    """Relation symbol printed between the two operand expressions."""

    TRUTHY = ""
    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SoftcheckError(Exception):
    """Base exception for softcheck."""


class CheckConfigError(SoftcheckError):
    """Raised when a softcheck configuration is invalid or missing."""
