"""
Logging integration.

Formats log output through compiled `@` templates:

- TemplateFormatter renders whole records, e.g. ``"@{levelname} @{name}: @{message}"``
- ContextLoggerAdapter prefixes messages with a template expanded against a
  rotating context tuple (e.g. a request and a connection)
"""

import logging
import time
from typing import Any, Callable, MutableMapping, Optional, Tuple

from .definitions.registry import DefinitionRegistry
from .definitions.types import FieldRef
from .parsing.parser import Parser
from .template import Template


def record_registry(converter: Callable[[float], time.struct_time] = time.localtime) -> DefinitionRegistry:
    """
    Build a frozen registry over a single ``logging.LogRecord`` context.

    Defines ``name``, ``levelname``, ``message``, ``process``, ``thread``,
    ``time`` (``%H:%M:%S``) and the shorthand ``l`` (level initial).

    Args:
        converter: Turns ``record.created`` into a struct_time, as
            ``logging.Formatter.converter`` does
    """
    registry = DefinitionRegistry((logging.LogRecord,))
    for field in ('name', 'levelname', 'process', 'thread'):
        registry[field] = FieldRef(logging.LogRecord, field)
    registry['message'] = lambda out, record: out.write(record.getMessage())
    registry['time'] = lambda out, record: out.write(
        time.strftime('%H:%M:%S', converter(record.created))
    )
    registry['l'] = lambda out, record: out.write(record.levelname[:1])
    return registry.freeze()


class TemplateFormatter(logging.Formatter):
    """Logging formatter rendering records through an `@` template."""

    def __init__(
        self,
        template: str = "@{levelname} @{name}: @{message}",
        registry: Optional[DefinitionRegistry] = None,
        lenient: bool = False
    ):
        """
        Initialize the formatter.

        Args:
            template: Template text; compiled once here
            registry: Registry over ``(LogRecord,)``; record_registry() bound
                to this formatter's ``converter`` when omitted
            lenient: Keep undefined references literal instead of failing

        Raises:
            TemplateParseError: If the template is invalid and not lenient
        """
        super().__init__()
        self.registry = registry or record_registry(lambda secs: self.converter(secs))
        self.template = Parser(self.registry, lenient=lenient).parse(template)

    def format(self, record: logging.LogRecord) -> str:
        text = self.template.render(record)
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            text = f"{text}\n{record.exc_text}"
        if record.stack_info:
            text = f"{text}\n{self.formatStack(record.stack_info)}"
        return text


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that prefixes every message with an expanded template.

    The context tuple is replaced with set_context() as the surrounding
    objects rotate; the template itself is compiled once.
    """

    def __init__(self, logger: logging.Logger, template: Template, *context: Any):
        super().__init__(logger, {})
        self.template = template
        self._context: Tuple[Any, ...] = context
        # A template without references renders the same prefix every time
        self._static = not template.referenced_names()
        self._static_prefix: Optional[str] = None

    def set_context(self, *context: Any) -> None:
        self._context = context

    def prefix(self) -> str:
        if self._static_prefix is not None:
            return self._static_prefix
        text = self.template.render(*self._context)
        if self._static:
            self._static_prefix = text
        return text

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix()}{msg}", kwargs

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        if args:
            # getMessage() applies args to the prefix too
            msg = f"{self.prefix().replace('%', '%%')}{msg}"
        else:
            msg, kwargs = self.process(msg, kwargs)
        self.logger.log(level, msg, *args, **kwargs)
