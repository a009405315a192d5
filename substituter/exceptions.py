"""Substituter exceptions."""

from enum import Enum
from typing import List, Optional
from dataclasses import dataclass


class ErrorKind(str, Enum):
    """Kinds of diagnostics a parse pass can collect."""
    UNTERMINATED_TOKEN = "unterminated_token"
    UNTERMINATED_BRACE_REFERENCE = "unterminated_brace_reference"
    UNDEFINED_VARIABLE = "undefined_variable"


@dataclass
class ParseError:
    """Single parse diagnostic."""
    kind: ErrorKind
    message: str
    position: int = 0
    token: str = ""


@dataclass
class ValidationError:
    """Single configuration validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class SubstituterError(Exception):
    """Base class for all substituter errors."""


class DefinitionError(SubstituterError):
    """Raised when a variable definition is misconfigured.

    These are setup-time errors: they are never affected by lenient mode.
    """


class DuplicateDefinitionError(DefinitionError):
    """Raised when the same variable name is defined twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Multiple definitions for same variable name: '{name}'")


class RegistryFrozenError(DefinitionError):
    """Raised when defining a variable in a frozen registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot define '{name}': registry is frozen")


class ContextMismatchError(SubstituterError):
    """Raised when an expansion is given a context tuple of the wrong shape.

    For an arity mismatch ``expected`` and ``got`` are counts and ``slot`` is
    None; for a type mismatch they are type names and ``slot`` is the index.
    """

    def __init__(self, expected, got, slot: Optional[int] = None):
        self.expected = expected
        self.got = got
        self.slot = slot
        if slot is None:
            message = f"Expected {expected} context argument(s), got {got}"
        else:
            message = f"Context slot {slot} expects {expected}, got {got}"
        super().__init__(message)


class TemplateParseError(SubstituterError):
    """Raised when a strict parse collects one or more errors.

    Carries every diagnostic from the parse pass, not just the first one.
    """

    def __init__(self, errors: List[ParseError], text: Optional[str] = None):
        self.errors = errors
        self.text = text
        self.exit_code = 2

        messages = []
        for error in errors:
            messages.append(f"Parse error: {error.message}")

        super().__init__("\n".join(messages))


class ConfigError(SubstituterError):
    """Raised when a configuration file fails validation."""

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        self.exit_code = 2

        messages = []
        for error in errors:
            if error.path:
                messages.append(f"Config error at '{error.path}': {error.message}")
            else:
                messages.append(f"Config error: {error.message}")

        super().__init__("\n".join(messages))
