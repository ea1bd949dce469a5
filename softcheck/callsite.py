"""Recover the file, line and operand source text of a check call.

The operand text is read back from the caller's source. On interpreters
that record column positions for each instruction (3.11+), the exact span
of the running call is used. Older interpreters parse the statement that
starts on the caller's current line and pick the first call to the check
function by name. When no source is available the argument texts are
empty and callers fall back to placeholders.
"""

from __future__ import annotations

import ast
import linecache
import sys
import textwrap
from dataclasses import dataclass, field
from types import FrameType

# Continuation lines scanned when a call spans several lines.
_MAX_STATEMENT_LINES = 20


@dataclass
class CallSite:
    """Where a check was called from."""

    filename: str
    lineno: int
    arg_texts: list[str] = field(default_factory=list)


def capture_call_site(depth: int = 1, func_name: str = "") -> CallSite:
    """Describe the frame *depth* levels above the caller.

    Args:
        depth: 0 is the function calling ``capture_call_site``, 1 its
            caller, and so on.
        func_name: Name of the called check, used when column positions
            are unavailable.
    """
    frame = sys._getframe(depth + 1)  # pylint: disable=protected-access
    texts = None
    if hasattr(frame.f_code, "co_positions"):
        texts = _texts_from_positions(frame)
    if texts is None and func_name:
        texts = _texts_from_statement(frame, func_name)
    return CallSite(
        filename=frame.f_code.co_filename,
        lineno=frame.f_lineno or 0,
        arg_texts=texts or [],
    )


def _source_lines(frame: FrameType) -> list[str]:
    return linecache.getlines(frame.f_code.co_filename, frame.f_globals)


def _texts_from_positions(frame: FrameType) -> list[str] | None:
    index = frame.f_lasti // 2
    positions = list(frame.f_code.co_positions())
    if index < 0 or index >= len(positions):
        return None
    lineno, end_lineno, col, end_col = positions[index]
    if None in (lineno, end_lineno, col, end_col):
        return None

    lines = _source_lines(frame)
    if end_lineno > len(lines):
        return None

    # Column offsets are UTF-8 byte offsets.
    chunk = [line.encode("utf-8") for line in lines[lineno - 1:end_lineno]]
    if len(chunk) == 1:
        raw = chunk[0][col:end_col]
    else:
        raw = chunk[0][col:] + b"".join(chunk[1:-1]) + chunk[-1][:end_col]
    return _call_arg_texts(raw.decode("utf-8", errors="replace"))


def _call_arg_texts(source: str) -> list[str] | None:
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError:
        return None
    call = tree.body
    if not isinstance(call, ast.Call):
        return None
    return _arg_segments(source, call)


def _texts_from_statement(frame: FrameType, func_name: str) -> list[str] | None:
    lines = _source_lines(frame)
    start = (frame.f_lineno or 0) - 1
    if start < 0 or start >= len(lines):
        return None

    stop = min(start + _MAX_STATEMENT_LINES, len(lines))
    for end in range(start + 1, stop + 1):
        source = textwrap.dedent("".join(lines[start:end]))
        try:
            tree = ast.parse(source)
        except SyntaxError:
            continue
        for node in ast.walk(tree):
            if isinstance(node, ast.Call) and _called_name(node.func) == func_name:
                return _arg_segments(source, node)
        return None
    return None


def _called_name(func: ast.expr) -> str:
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return ""


def _arg_segments(source: str, call: ast.Call) -> list[str] | None:
    if any(isinstance(arg, ast.Starred) for arg in call.args):
        return None
    texts = [ast.get_source_segment(source, arg) for arg in call.args]
    if any(text is None for text in texts):
        return None
    # Multi-line operands are shown on one line.
    return [" ".join(text.split()) if "\n" in text else text for text in texts]
