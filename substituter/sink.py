"""
Output sink with scoped formatting state.

Evaluators write values through an OutputSink. The sink's formatting state
decides how non-string values are rendered; the expander restores that state
after every evaluator call so one variable's formatting never leaks into the
next.
"""

import io
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Iterator, Optional, TextIO


@dataclass(frozen=True)
class FormatState:
    """
    Formatting state of an output sink.

    Attributes:
        format_spec: Spec passed to ``format()`` for non-string values
        boolalpha: Render booleans as ``true``/``false`` instead of ``1``/``0``
    """
    format_spec: str = ""
    boolalpha: bool = True


class OutputSink:
    """Text sink wrapping a writable stream."""

    def __init__(self, stream: Optional[TextIO] = None, format_state: Optional[FormatState] = None):
        """
        Initialize the sink.

        Args:
            stream: Destination stream; an in-memory buffer when omitted
            format_state: Initial formatting state
        """
        self.stream = stream if stream is not None else io.StringIO()
        self.format_state = format_state or FormatState()

    def write(self, value: Any) -> None:
        """Write a value using the current formatting state."""
        if isinstance(value, str):
            text = value
        elif isinstance(value, bool):
            if self.format_state.boolalpha:
                text = 'true' if value else 'false'
            else:
                text = '1' if value else '0'
        else:
            text = format(value, self.format_state.format_spec)
        self.stream.write(text)

    def set_format(self, **changes: Any) -> FormatState:
        """
        Update selected formatting fields.

        Returns:
            The previous formatting state
        """
        previous = self.format_state
        self.format_state = replace(previous, **changes)
        return previous

    @contextmanager
    def preserved_format(self) -> Iterator["OutputSink"]:
        """Restore the formatting state on exit, including on failure."""
        saved = self.format_state
        try:
            yield self
        finally:
            self.format_state = saved

    def getvalue(self) -> str:
        """Return everything written so far (in-memory streams only)."""
        getvalue = getattr(self.stream, 'getvalue', None)
        if getvalue is None:
            raise TypeError(f"{type(self.stream).__name__} does not retain written text")
        return getvalue()


def as_sink(target: Any) -> OutputSink:
    """Wrap a plain text stream in an OutputSink; sinks pass through."""
    if isinstance(target, OutputSink):
        return target
    if not hasattr(target, 'write'):
        raise TypeError(f"Expected an OutputSink or writable stream, got {type(target).__name__}")
    return OutputSink(target)
