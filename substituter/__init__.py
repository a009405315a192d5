"""
Compiled `@`-variable templates.

Text containing `@x`, `@{name}` and `@@` references is parsed once against a
registry of variable definitions, then expanded any number of times against
caller-supplied context tuples.
"""

from .config import SubstituterConfig, config_from_dict, load_config
from .definitions import DefinitionRegistry, FieldRef, Live, Snapshot, VariableDefinition
from .exceptions import (
    ContextMismatchError,
    DefinitionError,
    DuplicateDefinitionError,
    ErrorKind,
    ParseError,
    RegistryFrozenError,
    SubstituterError,
    TemplateParseError,
)
from .parsing import Parser
from .sink import FormatState, OutputSink
from .substituter import Substituter
from .template import SubstitutionSpan, Template

__all__ = [
    'Substituter',
    'SubstituterConfig',
    'load_config',
    'config_from_dict',
    'DefinitionRegistry',
    'VariableDefinition',
    'FieldRef',
    'Live',
    'Snapshot',
    'Parser',
    'Template',
    'SubstitutionSpan',
    'OutputSink',
    'FormatState',
    'ErrorKind',
    'ParseError',
    'SubstituterError',
    'DefinitionError',
    'DuplicateDefinitionError',
    'RegistryFrozenError',
    'ContextMismatchError',
    'TemplateParseError',
]
