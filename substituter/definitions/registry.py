"""
Definition registry for template variables.

Maps variable names to evaluators bound to a fixed tuple of context types.
A registry is populated during setup, then frozen and shared read-only by
every template parsed against it.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Type

from ..exceptions import DefinitionError, DuplicateDefinitionError, RegistryFrozenError
from .types import Evaluator, FieldRef, Live, Snapshot, ValueSource, VariableDefinition


logger = logging.getLogger(__name__)


class DefinitionRegistry:
    """
    Registry of variable definitions.

    The registry declares the shape of the context tuple every expansion must
    supply. Field accessors are resolved against that shape when they are
    defined, so a misconfigured accessor fails during setup and never during
    expansion.
    """

    def __init__(self, context_types: Sequence[Type] = ()):
        """
        Initialize an empty registry.

        Args:
            context_types: Ordered classes of the context tuple elements
        """
        self.context_types = tuple(context_types)
        self._definitions: Dict[str, VariableDefinition] = {}
        self._frozen = False

    @property
    def arity(self) -> int:
        """Number of elements every context tuple must have."""
        return len(self.context_types)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "DefinitionRegistry":
        """Make the registry read-only. Returns the registry for chaining."""
        self._frozen = True
        logger.debug(f"Registry frozen with {len(self._definitions)} definition(s)")
        return self

    def define(self, name: str, evaluator: Evaluator) -> VariableDefinition:
        """
        Register a raw evaluator.

        Args:
            name: Variable name
            evaluator: Callable taking ``(sink, context_tuple)``

        Returns:
            The new definition

        Raises:
            DuplicateDefinitionError: If name is already defined
            RegistryFrozenError: If the registry is frozen
            DefinitionError: If name is empty or evaluator is not callable
        """
        if self._frozen:
            raise RegistryFrozenError(name)
        if not isinstance(name, str) or not name:
            raise DefinitionError("Variable name must be a non-empty string")
        if not callable(evaluator):
            raise DefinitionError(f"Evaluator for '{name}' is not callable")
        if name in self._definitions:
            raise DuplicateDefinitionError(name)

        definition = VariableDefinition(name=name, evaluator=evaluator)
        self._definitions[name] = definition
        logger.debug(f"Defined variable: {name}")
        return definition

    def define_value(self, name: str, source: ValueSource) -> VariableDefinition:
        """
        Define a variable that writes a direct value.

        A ``Live`` source is re-read on every expansion (it is a live
        reference, not a snapshot). A ``Snapshot`` always writes the value it
        was created with.
        """
        if not isinstance(source, (Live, Snapshot)):
            raise DefinitionError(
                f"Value source for '{name}' must be Live or Snapshot, got {type(source).__name__}"
            )

        def evaluate(sink, context):
            sink.write(source.read())

        return self.define(name, evaluate)

    def define_field(
        self,
        name: str,
        context_type: Type,
        field: str,
        slot: Optional[int] = None
    ) -> VariableDefinition:
        """
        Define a variable that reads a field of one context element.

        Args:
            name: Variable name
            context_type: Class the selected context element is an instance of
            field: Attribute name, or key when context_type is a mapping type
            slot: Explicit context index; found by type when omitted

        Raises:
            DefinitionError: If no slot, or more than one slot, matches
        """
        index = self.resolve_slot(context_type, slot)
        by_key = issubclass(context_type, Mapping)

        def evaluate(sink, context):
            obj = context[index]
            sink.write(obj[field] if by_key else getattr(obj, field))

        definition = self.define(name, evaluate)
        logger.debug(f"Field accessor '{name}' bound to slot {index} ({context_type.__name__}.{field})")
        return definition

    def define_callback(self, name: str, func: Callable[..., None]) -> VariableDefinition:
        """
        Define a variable computed by an arbitrary function.

        ``func`` is called as ``func(sink, *context)`` and may read any number
        of context elements.
        """
        if not callable(func):
            raise DefinitionError(f"Callback for '{name}' is not callable")

        def evaluate(sink, context):
            func(sink, *context)

        return self.define(name, evaluate)

    def resolve_slot(self, context_type: Type, slot: Optional[int] = None) -> int:
        """
        Find the context tuple index satisfying ``context_type``.

        Raises:
            DefinitionError: If the slot is out of range, incompatible, missing
                or ambiguous
        """
        if not isinstance(context_type, type):
            raise DefinitionError(f"Context type must be a class, got {context_type!r}")

        if slot is not None:
            if not 0 <= slot < self.arity:
                raise DefinitionError(
                    f"Context slot {slot} out of range for {self.arity} context type(s)"
                )
            if not issubclass(self.context_types[slot], context_type):
                raise DefinitionError(
                    f"Context slot {slot} holds {self.context_types[slot].__name__}, "
                    f"which is not a {context_type.__name__}"
                )
            return slot

        candidates = [
            i for i, candidate in enumerate(self.context_types)
            if issubclass(candidate, context_type)
        ]
        if not candidates:
            raise DefinitionError(f"No context slot holds a {context_type.__name__}")
        if len(candidates) > 1:
            raise DefinitionError(
                f"Ambiguous context type {context_type.__name__}: matches slots {candidates}; "
                f"pass an explicit slot"
            )
        return candidates[0]

    def __setitem__(self, name: str, value: Any) -> None:
        """
        Define a variable using the form of ``value``.

        ``Live``/``Snapshot`` define a direct value, ``FieldRef`` a field
        accessor, and any other callable a free-form callback.
        """
        if isinstance(value, (Live, Snapshot)):
            self.define_value(name, value)
        elif isinstance(value, FieldRef):
            self.define_field(name, value.context_type, value.field, value.slot)
        elif callable(value):
            self.define_callback(name, value)
        else:
            raise DefinitionError(
                f"Cannot define '{name}' from {type(value).__name__}; "
                f"use Live, Snapshot, FieldRef or a callable"
            )

    def get(self, name: str) -> Optional[VariableDefinition]:
        return self._definitions.get(name)

    def names(self) -> List[str]:
        return sorted(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[VariableDefinition]:
        return iter(self._definitions.values())
