"""ANSI styling for diagnostics, enabled only where the stream supports it."""

from __future__ import annotations

import sys
from typing import TextIO

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style

from softcheck.config import get_config

# Style names that only switch styling off.
_RESET_STYLES = ("", "normal", "default", "reset")


class Term:
    """Decides whether ANSI codes go to *stream* and renders them.

    Args:
        stream: Output stream, ``sys.stdout`` by default.
        color: ``auto``, ``always`` or ``never``. ``None`` uses the
            configured mode.
    """

    def __init__(self, stream: TextIO | None = None, color: str | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.color = color or get_config().color
        self._enabled: bool | None = None

    @property
    def enabled(self) -> bool:
        """Whether styled text will carry ANSI codes."""
        if self._enabled is None:
            if self.color == "always":
                self._enabled = True
            elif self.color == "never":
                self._enabled = False
            else:
                # rich applies isatty, NO_COLOR, FORCE_COLOR and TERM=dumb
                self._enabled = Console(file=self.stream).color_system is not None
        return self._enabled

    def ansi(self, style: str, text: str = "") -> str:
        """Return *text* wrapped in the codes for *style*.

        *style* accepts comma or space separated names such as
        ``"red,bold"``. Reset-only names (``"normal"``) produce a bare reset
        sequence when color is on.
        """
        if not self.enabled:
            return text
        name = style.replace(",", " ").strip()
        if name in _RESET_STYLES:
            return "\x1b[0m" + text
        return Style.parse(name).render(text, color_system=ColorSystem.STANDARD)
