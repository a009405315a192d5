"""
Template parser.

Scans text once, left to right, for ``@`` references:

- ``@{name}``: reference to ``name`` (any run of characters without ``}``)
- ``@x``: shorthand reference to the single-character name ``x``
- ``@@``: literal ``@``
"""

import logging
from typing import List, Optional

from ..definitions.registry import DefinitionRegistry
from ..exceptions import ErrorKind, ParseError, TemplateParseError
from ..template import SubstitutionSpan, Template


class Parser:
    """
    Compiles text into Templates against a definition registry.

    The parser never mutates the registry, so any number of parsers may share
    one frozen registry across threads.
    """

    def __init__(
        self,
        registry: DefinitionRegistry,
        lenient: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the parser.

        Args:
            registry: Registry to resolve variable names against
            lenient: Tolerate errors, keeping offending text literal
            logger: Diagnostic logger; the module logger when omitted
        """
        self.registry = registry
        self.lenient = lenient
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, text: str, logger: Optional[logging.Logger] = None) -> Template:
        """
        Parse text into a Template.

        Every diagnostic is logged, at WARNING level when lenient and ERROR
        level otherwise.

        Args:
            text: Template source text
            logger: Per-call diagnostic logger override

        Returns:
            Parsed template (carrying any tolerated diagnostics)

        Raises:
            TemplateParseError: If not lenient and any error was found
        """
        log = logger or self.logger
        log_level = logging.WARNING if self.lenient else logging.ERROR

        errors: List[ParseError] = []
        spans: List[SubstitutionSpan] = []

        def report(kind: ErrorKind, message: str, position: int, token: str) -> None:
            log.log(log_level, message)
            errors.append(ParseError(kind=kind, message=message, position=position, token=token))

        curr = 0
        end = len(text)
        while True:
            i = text.find('@', curr)
            if i == -1:
                break
            if i + 1 == end:
                report(ErrorKind.UNTERMINATED_TOKEN, "Unterminated `@` at end of text", i, '@')
                break

            ch = text[i + 1]
            if ch == '{':
                j = text.find('}', i + 2)
                if j == -1:
                    report(ErrorKind.UNTERMINATED_BRACE_REFERENCE, "Unterminated `@{`", i, text[i:])
                    curr = i + 2
                    continue
                var_name = text[i + 2:j]
                curr = j + 1
            else:
                var_name = ch
                curr = i + 2

            definition = None
            if ch != '@':
                definition = self.registry.get(var_name)
                if definition is None:
                    token = text[i:curr]
                    report(
                        ErrorKind.UNDEFINED_VARIABLE,
                        f"Undefined variable `{var_name}` in substitution `{token}`",
                        i,
                        token,
                    )
                    continue

            spans.append(SubstitutionSpan(start=i, end=curr, definition=definition))

        if errors and not self.lenient:
            raise TemplateParseError(errors, text)

        return Template(text, spans, context_types=self.registry.context_types, diagnostics=errors)
