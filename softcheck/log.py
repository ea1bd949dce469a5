"""
Logging integration for softcheck.

Routes Python's standard logging to stderr through a rich console with
level colors. stdout is left to the check diagnostics and the final
summary, so log scraping of test output is not disturbed.

Example:
    >>> from softcheck import log
    >>> log.setup(logging.DEBUG)   # trace counters and failures
    >>> log.teardown()
"""
import logging
from typing import Optional

from rich.console import Console
from rich.text import Text

console = Console(stderr=True)

_LEVEL_STYLES = (
    (logging.ERROR, "red"),
    (logging.WARNING, "yellow"),
    (logging.INFO, "blue"),
)


class SoftcheckLogHandler(logging.Handler):
    """Logging handler that prints records to stderr with colors."""

    def emit(self, record: logging.LogRecord):
        try:
            msg = self.format(record)
            style = "dim"
            for levelno, level_style in _LEVEL_STYLES:
                if record.levelno >= levelno:
                    style = level_style
                    break
            # Text, not markup: messages may contain brackets.
            console.print(Text(msg, style=style))
        except Exception:
            self.handleError(record)


_handler: Optional[SoftcheckLogHandler] = None


def setup(level: int = logging.INFO):
    """Attach the softcheck handler to the root logger.

    Calling it again while installed does nothing.

    Args:
        level: Minimum logging level (default INFO)
    """
    global _handler

    if _handler is not None:
        return

    _handler = SoftcheckLogHandler()
    _handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger()
    root.addHandler(_handler)
    root.setLevel(level)


def teardown():
    """Remove the softcheck logging handler."""
    global _handler

    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
        _handler = None
