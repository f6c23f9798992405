"""Compile-time errors raised by the directive transform."""

from __future__ import annotations

from typing import Optional


class DomTransformError(RuntimeError):
    """Fatal error for a single module; compilation of that file stops."""

    def __init__(
        self,
        message: str,
        *,
        filename: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        source: Optional[str] = None,
    ) -> None:
        self.reason = message
        self.filename = filename
        self.line = line
        self.column = column
        super().__init__(self._format(message, filename, line, column, source))

    @staticmethod
    def _format(
        message: str,
        filename: Optional[str],
        line: Optional[int],
        column: Optional[int],
        source: Optional[str],
    ) -> str:
        header = f"{filename}: {message}" if filename else message
        if line is None or source is None:
            return header
        return f"{header}\n{code_frame(source, line, column or 0)}"


def code_frame(source: str, line: int, column: int, *, context: int = 2) -> str:
    """Return a gutter-numbered excerpt with a caret under ``line:column``.

    ``line`` is 1-based and ``column`` 0-based.
    """
    lines = source.splitlines() or [""]
    line = max(1, min(line, len(lines)))
    start = max(1, line - context)
    end = min(len(lines), line + context)
    width = len(str(end))

    rendered = []
    for number in range(start, end + 1):
        marker = ">" if number == line else " "
        text = lines[number - 1]
        rendered.append(f"{marker} {number:>{width}} | {text}".rstrip())
        if number == line:
            rendered.append(f"  {' ' * width} | {' ' * column}^")
    return "\n".join(rendered)


__all__ = ["DomTransformError", "code_frame"]
