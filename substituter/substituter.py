"""
Substituter facade.

Bundles a definition registry with parse configuration. Typical use::

    class CtxA:
        y = 0

    class CtxB:
        x = 0

    subst = Substituter(CtxA, CtxB)
    subst['x'] = FieldRef(CtxB, 'x')
    subst['y'] = lambda out, a, b: out.write(a.y)
    templ = subst.parse("<@x:@y>\\n")
    templ.render(CtxA(), CtxB())    # "<0:0>\\n"
"""

import logging
from typing import Any, Optional, Type

from .config import SubstituterConfig
from .definitions.registry import DefinitionRegistry
from .definitions.types import Evaluator, VariableDefinition
from .exceptions import TemplateParseError
from .parsing.parser import Parser
from .template import Template


logger = logging.getLogger(__name__)


class Substituter:
    """Defines variables and compiles `@` templates against them."""

    def __init__(self, *context_types: Type, config: Optional[SubstituterConfig] = None):
        """
        Initialize a substituter.

        Args:
            *context_types: Ordered classes of the context tuple elements
            config: Parse configuration; strict, stderr diagnostics by default
        """
        self.config = config or SubstituterConfig()
        self.registry = DefinitionRegistry(context_types)
        self._parser = Parser(self.registry, lenient=self.config.lenient, logger=self.config.logger)

    @property
    def lenient(self) -> bool:
        return self.config.lenient

    def define(self, name: str, evaluator: Evaluator) -> VariableDefinition:
        """Register a raw ``(sink, context_tuple)`` evaluator."""
        return self.registry.define(name, evaluator)

    def __setitem__(self, name: str, value: Any) -> None:
        self.registry[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self.registry

    def freeze(self) -> "Substituter":
        self.registry.freeze()
        return self

    def parse(self, text: str, logger: Optional[logging.Logger] = None) -> Template:
        """
        Compile text into a Template.

        Raises:
            TemplateParseError: In strict mode, if any error was found
        """
        return self._parser.parse(text, logger)

    def expand(self, text: str, sink: Any, *context: Any) -> bool:
        """
        Parse and expand text in one step.

        Returns:
            False if a strict parse failed (nothing is written), True otherwise
        """
        try:
            templ = self.parse(text)
        except TemplateParseError as e:
            logger.debug(f"Skipping expansion, {len(e.errors)} parse error(s)")
            return False
        templ.expand(sink, *context)
        return True
