"""Substituter configuration and YAML config loading."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from substituter.exceptions import ConfigError, ValidationError


@dataclass
class SubstituterConfig:
    """
    Construction-time configuration.

    Attributes:
        lenient: Treat parse errors as warnings and keep the offending text
            literal, instead of failing the parse
        logger: Diagnostic logger used during parsing; when None, parse
            diagnostics go to the parser module's logger, which writes to
            stderr if logging has not been configured
    """
    lenient: bool = False
    logger: Optional[logging.Logger] = None


class ConfigLoader:
    """Loads and validates substituter configuration from YAML."""

    KNOWN_FIELDS = {'lenient', 'logger'}

    def __init__(self):
        self.errors: List[ValidationError] = []

    def load(self, config_path: Union[str, Path]) -> SubstituterConfig:
        """
        Load a configuration file.

        Raises:
            ConfigError: If the file cannot be read or fails validation
        """
        self.errors = []
        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self._add_error(f"Failed to load config: {e}")
            raise ConfigError(self.errors)

        if data is None:
            data = {}
        return self.from_dict(data)

    def from_dict(self, data: Any) -> SubstituterConfig:
        """Build a configuration from an already-parsed mapping."""
        self.errors = []
        if not isinstance(data, dict):
            self._add_error("Config must be a YAML object/dictionary")
            raise ConfigError(self.errors)

        for key in data:
            if key not in self.KNOWN_FIELDS:
                self._add_error(f"Unknown field '{key}'", path=str(key))

        lenient = data.get('lenient', False)
        if not isinstance(lenient, bool):
            self._add_error(f"must be a boolean, got {type(lenient).__name__}", path='lenient')

        logger_name = data.get('logger')
        if logger_name is not None and not isinstance(logger_name, str):
            self._add_error(f"must be a logger name string, got {type(logger_name).__name__}", path='logger')

        if self.errors:
            raise ConfigError(self.errors)

        return SubstituterConfig(
            lenient=lenient,
            logger=logging.getLogger(logger_name) if logger_name else None
        )

    def _add_error(self, message: str, path: str = "") -> None:
        self.errors.append(ValidationError(message=message, path=path))


def load_config(config_path: Union[str, Path]) -> SubstituterConfig:
    """Load a SubstituterConfig from a YAML file."""
    return ConfigLoader().load(config_path)


def config_from_dict(data: Dict[str, Any]) -> SubstituterConfig:
    """Build a SubstituterConfig from a mapping."""
    return ConfigLoader().from_dict(data)
