"""Render command implementation."""

import logging
import sys
from argparse import Namespace
from pathlib import Path

from substituter.exceptions import DefinitionError, TemplateParseError

from .common import build_substituter, setup_logging


logger = logging.getLogger(__name__)


def read_template(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Template not found: {path}")
    with path.open('r', encoding='utf-8') as f:
        return f.read()


def render_template(args: Namespace) -> int:
    """
    Expand a template file and write the result.

    Returns:
        0 on success, 2 on parse or definition errors, 1 on I/O errors
    """
    setup_logging(args)

    try:
        text = read_template(Path(args.template))
        subst = build_substituter(args)
        templ = subst.parse(text)

        if args.out:
            out_path = Path(args.out)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            with out_path.open('w', encoding='utf-8') as f:
                templ.expand(f)
            logger.info(f"Rendered {args.template} to {out_path}")
        else:
            templ.expand(sys.stdout)

        return 0

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
