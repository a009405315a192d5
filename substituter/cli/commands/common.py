"""Helpers shared by CLI commands."""

import logging
import os
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict

import yaml

from substituter.config import SubstituterConfig
from substituter.definitions.types import Live, Snapshot
from substituter.exceptions import DefinitionError
from substituter.substituter import Substituter


logger = logging.getLogger(__name__)


def setup_logging(args: Namespace) -> None:
    """Configure root logging from --log-level/--debug/--quiet."""
    log_level = getattr(logging, args.log_level.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def parse_variables(args: Namespace) -> Dict[str, Any]:
    """
    Collect snapshot variables from --vars and --var.

    --var pairs override values loaded from the --vars file.
    """
    variables: Dict[str, Any] = {}

    if args.vars:
        vars_file = Path(args.vars)
        if not vars_file.exists():
            raise FileNotFoundError(f"Variables file not found: {vars_file}")

        with open(vars_file, 'r', encoding='utf-8') as f:
            # JSON documents are valid YAML, so one loader covers both
            file_vars = yaml.safe_load(f)
        if file_vars is None:
            file_vars = {}
        if not isinstance(file_vars, dict):
            raise ValueError(f"Variables file must contain a mapping, got {type(file_vars).__name__}")

        for key, value in file_vars.items():
            variables[str(key)] = value

    if args.var:
        for item in args.var:
            if '=' not in item:
                raise ValueError(f"Invalid variable format: {item}. Expected KEY=VALUE")
            key, value = item.split('=', 1)
            if not key:
                raise ValueError(f"Invalid KEY in pair: {item}")
            variables[key] = value

    return variables


def build_substituter(args: Namespace) -> Substituter:
    """
    Build a frozen, context-free substituter from command line variables.

    File and --var values are snapshots; --env names are live references to
    the process environment.

    Raises:
        DefinitionError: If an --env name collides with another variable
    """
    subst = Substituter(config=SubstituterConfig(lenient=args.lenient))

    for name, value in parse_variables(args).items():
        subst[name] = Snapshot(value)

    for name in args.env or []:
        if name in subst:
            raise DefinitionError(f"Variable '{name}' given both as a value and as --env")
        subst[name] = Live.item(os.environ, name)

    logger.debug(f"Defined variables: {subst.registry.names()}")
    return subst.freeze()
