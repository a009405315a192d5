"""
Variable definitions module.
Holds the registry mapping variable names to evaluators.
"""

from .registry import DefinitionRegistry
from .types import VariableDefinition, Live, Snapshot, FieldRef

__all__ = ['DefinitionRegistry', 'VariableDefinition', 'Live', 'Snapshot', 'FieldRef']
