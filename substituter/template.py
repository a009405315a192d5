"""
Compiled templates and their expansion.

A Template is produced by the parser and never mutated afterwards. It can be
expanded any number of times, concurrently if each call has its own sink and
context tuple.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Type

from .definitions.types import VariableDefinition
from .exceptions import ContextMismatchError, ParseError
from .sink import OutputSink, as_sink


@dataclass(frozen=True)
class SubstitutionSpan:
    """
    Range of template text replaced during expansion.

    Attributes:
        start: Offset of the ``@`` opening the reference
        end: Offset just past the reference
        definition: Bound definition, or None for the ``@@`` escape
    """
    start: int
    end: int
    definition: Optional[VariableDefinition] = None

    @property
    def is_escape(self) -> bool:
        return self.definition is None


class Template:
    """Parsed template: original text plus sorted, non-overlapping spans."""

    __slots__ = ('_text', '_spans', '_diagnostics', '_context_types')

    def __init__(
        self,
        text: str,
        spans: Sequence[SubstitutionSpan],
        context_types: Sequence[Type] = (),
        diagnostics: Sequence[ParseError] = ()
    ):
        self._text = text
        self._spans: Tuple[SubstitutionSpan, ...] = tuple(spans)
        self._context_types: Tuple[Type, ...] = tuple(context_types)
        self._diagnostics: Tuple[ParseError, ...] = tuple(diagnostics)

    @property
    def text(self) -> str:
        return self._text

    @property
    def spans(self) -> Tuple[SubstitutionSpan, ...]:
        return self._spans

    @property
    def diagnostics(self) -> Tuple[ParseError, ...]:
        """Errors tolerated by a lenient parse (empty for clean parses)."""
        return self._diagnostics

    @property
    def context_types(self) -> Tuple[Type, ...]:
        return self._context_types

    @property
    def arity(self) -> int:
        return len(self._context_types)

    def expand(self, sink: Any, *context: Any) -> None:
        """
        Expand the template into a sink.

        Args:
            sink: OutputSink or writable text stream
            *context: Context tuple, shaped as the registry declares

        Raises:
            ContextMismatchError: If the context has the wrong arity or an
                element of the wrong type (raised before anything is written)
            Exception: Whatever an evaluator raises, after the sink's format
                state has been restored
        """
        self.check_context(context)

        out = as_sink(sink)
        text = self._text
        curr = 0
        for span in self._spans:
            out.write(text[curr:span.start])
            if span.definition is not None:
                with out.preserved_format():
                    span.definition.evaluate(out, context)
            else:
                out.write('@')
            curr = span.end
        out.write(text[curr:])

    def check_context(self, context: Sequence[Any]) -> None:
        """
        Verify the context tuple matches the registry's declared shape.

        Raises:
            ContextMismatchError: On wrong arity or a mistyped element
        """
        if len(context) != len(self._context_types):
            raise ContextMismatchError(len(self._context_types), len(context))
        for slot, (value, expected) in enumerate(zip(context, self._context_types)):
            if not isinstance(value, expected):
                raise ContextMismatchError(expected.__name__, type(value).__name__, slot=slot)

    def render(self, *context: Any) -> str:
        """Expand into a fresh in-memory sink and return the text."""
        out = OutputSink()
        self.expand(out, *context)
        return out.getvalue()

    def refers_to(self, name: str) -> bool:
        """Return True if a resolved reference in this template names ``name``."""
        for span in self._spans:
            if span.definition is not None and span.definition.name == name:
                return True
        return False

    def referenced_names(self) -> List[str]:
        """Names of resolved references, in first-use order."""
        names: List[str] = []
        for span in self._spans:
            if span.definition is not None and span.definition.name not in names:
                names.append(span.definition.name)
        return names

    def __repr__(self) -> str:
        return f"Template({self._text!r}, spans={len(self._spans)})"
