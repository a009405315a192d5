"""Check command implementation."""

import logging
import sys
from argparse import Namespace
from pathlib import Path

from substituter.exceptions import DefinitionError, TemplateParseError

from .common import build_substituter, setup_logging
from .render import read_template


logger = logging.getLogger(__name__)


def check_template(args: Namespace) -> int:
    """
    Parse a template without expanding it.

    Prints each referenced variable name on its own line.

    Returns:
        0 if the template parses, 2 if it does not, 1 on I/O errors
    """
    setup_logging(args)

    try:
        text = read_template(Path(args.template))
        subst = build_substituter(args)
        templ = subst.parse(text)
    except TemplateParseError as e:
        logger.error(f"Template {args.template} has {len(e.errors)} error(s)")
        return e.exit_code
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1
    except (DefinitionError, ValueError) as e:
        logger.error(f"Validation error: {e}")
        return 2

    for name in templ.referenced_names():
        print(name, file=sys.stdout)

    if templ.diagnostics:
        logger.warning(f"Template {args.template} parsed leniently with {len(templ.diagnostics)} warning(s)")

    return 0
