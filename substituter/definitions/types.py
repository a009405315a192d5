"""
Definition type definitions for the substituter.

Defines variable definitions and the value sources that direct-value
evaluators read from.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Type, Union


# evaluator(sink, context_tuple) -> None
Evaluator = Callable[[Any, tuple], None]


@dataclass(frozen=True)
class VariableDefinition:
    """
    A named variable bound to its evaluator.

    Attributes:
        name: Variable name as referenced in template text
        evaluator: Callable writing the variable's value to a sink
    """
    name: str
    evaluator: Evaluator

    def evaluate(self, sink: Any, context: tuple) -> None:
        """Write this variable's value for the given context tuple."""
        self.evaluator(sink, context)


@dataclass(frozen=True)
class Live:
    """
    Live reference to a process-owned location.

    The getter is called on every expansion, so templates always see the
    current value rather than the value at definition time.
    """
    getter: Callable[[], Any]

    @classmethod
    def attribute(cls, obj: Any, attr: str) -> "Live":
        """Reference ``obj.<attr>``."""
        return cls(lambda: getattr(obj, attr))

    @classmethod
    def item(cls, mapping: Mapping, key: Any, default: Any = "") -> "Live":
        """Reference ``mapping[key]``, falling back to ``default`` when absent."""
        return cls(lambda: mapping.get(key, default))

    def read(self) -> Any:
        return self.getter()


@dataclass(frozen=True)
class Snapshot:
    """Fixed value captured once at definition time."""
    value: Any

    def read(self) -> Any:
        return self.value


ValueSource = Union[Live, Snapshot]


@dataclass(frozen=True)
class FieldRef:
    """
    Declaration of a field accessor.

    Attributes:
        context_type: Class the context element must be an instance of
        field: Attribute name (or key, for mapping context types)
        slot: Explicit context tuple index; resolved by type when omitted
    """
    context_type: Type
    field: str
    slot: Optional[int] = None
